import mimetypes
import os
import uuid
from fastapi import UploadFile, HTTPException
from app.config import settings


def validate_file(file: UploadFile) -> None:
    ext = file.filename.rsplit(".", 1)[-1].lower() if "." in file.filename else ""
    if ext not in settings.ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Tipo de archivo '{ext}' no permitido. Permitidos: {', '.join(settings.ALLOWED_EXTENSIONS)}",
        )


async def save_upload(file: UploadFile, subfolder: str = "") -> dict:
    validate_file(file)
    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=400, detail="El archivo supera el límite de 50 MB")

    folder = os.path.join(str(settings.storage_root()), subfolder)
    os.makedirs(folder, exist_ok=True)

    ext = file.filename.rsplit(".", 1)[-1].lower()
    filename = f"{uuid.uuid4().hex}.{ext}"
    with open(os.path.join(folder, filename), "wb") as f:
        f.write(content)

    mime_type = file.content_type
    if not mime_type or mime_type == "application/octet-stream":
        mime_type = mimetypes.guess_type(file.filename)[0] or "application/octet-stream"

    return {
        "filename": file.filename,
        # ruta opaca relativa al bucket
        "path": f"{subfolder}/{filename}".strip("/").replace("\\", "/"),
        "size": len(content),
        "mime_type": mime_type,
    }


def read_stored_file(path: str) -> bytes:
    full_path = os.path.join(str(settings.storage_root()), path)
    with open(full_path, "rb") as f:
        return f.read()
