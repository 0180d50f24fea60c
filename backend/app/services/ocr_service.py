"""Extracción de texto (PDF/imagen) e indexación del contenido de documentos."""

import io
import logging
import time
from datetime import datetime
from typing import Callable, Dict, Optional

import fitz  # PyMuPDF
import pytesseract
from fastapi import HTTPException
from PIL import Image
from sqlalchemy.orm import Session

from app.config import settings
from app.models.content_index import DocumentContentIndex
from app.models.document import Document
from app.utils.helpers import read_stored_file

logger = logging.getLogger(__name__)

PDF_ERROR_TEXT = "[Error al extraer texto del PDF]"
IMAGE_ERROR_TEXT = "[Error en OCR]"
UNSUPPORTED_TEXT = "[Tipo de archivo no soportado para OCR]"

ProgressCallback = Callable[[int, int], None]


def is_processable(mime_type: Optional[str]) -> bool:
    normalized = (mime_type or "").lower()
    return normalized == "application/pdf" or normalized.startswith("image/")


def extract_pdf_text(data: bytes) -> str:
    with fitz.open(stream=data, filetype="pdf") as pdf:
        return "\n".join(page.get_text() for page in pdf)


def extract_image_text(data: bytes, language: str) -> str:
    with Image.open(io.BytesIO(data)) as image:
        return pytesseract.image_to_string(image, lang=language)


def extract_text(data: bytes, mime_type: Optional[str]) -> str:
    normalized = (mime_type or "").lower()
    if normalized == "application/pdf":
        try:
            return extract_pdf_text(data) or ""
        except Exception as exc:
            logger.warning("[ocr] pdf parsing failed: %s", exc)
            return PDF_ERROR_TEXT
    if normalized.startswith("image/"):
        try:
            return extract_image_text(data, settings.OCR_LANGUAGE) or ""
        except Exception as exc:
            logger.warning("[ocr] image recognition failed: %s", exc)
            return IMAGE_ERROR_TEXT
    return UNSUPPORTED_TEXT


def process_document_ocr(db: Session, doc_id: int) -> Dict:
    doc = db.query(Document).filter(Document.doc_id == doc_id).first()
    if not doc:
        raise HTTPException(status_code=404, detail="Documento no encontrado.")

    try:
        data = read_stored_file(doc.file_path)
    except OSError as exc:
        logger.error("[ocr] failed to read %s for doc_id=%s: %s", doc.file_path, doc_id, exc)
        raise HTTPException(status_code=500, detail="No se pudo descargar el archivo.")

    mime_type = (doc.mime_type or "").lower()
    text = extract_text(data, mime_type)
    now = datetime.utcnow()

    index = db.query(DocumentContentIndex).filter(DocumentContentIndex.doc_id == doc_id).first()
    if index is None:
        index = DocumentContentIndex(doc_id=doc_id)
        db.add(index)
    index.content_text = text
    index.page_number = 1
    index.ocr_confidence = settings.OCR_DEFAULT_CONFIDENCE
    index.index_metadata = {"mime_type": mime_type, "processed_at": now.isoformat()}
    index.indexed_at = now
    db.commit()

    logger.info("[ocr] indexed doc_id=%s text_length=%s", doc_id, len(text))
    return {
        "success": True,
        "document_id": doc_id,
        "text_length": len(text),
        "message": "Documento indexado correctamente",
    }


def _process_locally(db: Session, doc_id: int) -> bool:
    try:
        process_document_ocr(db, doc_id)
    except HTTPException as exc:
        logger.warning("[ocr] processing failed for doc_id=%s: %s", doc_id, exc.detail)
        return False
    return True


def reprocess_all_documents(
    db: Session,
    processor: Optional[Callable[[int], bool]] = None,
    on_progress: Optional[ProgressCallback] = None,
    delay_seconds: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, int]:
    """Procesa todos los documentos de a uno, en orden de carga.

    No es cancelable: los documentos ya procesados quedan procesados si se interrumpe.
    """
    if processor is None:
        def processor(doc_id: int) -> bool:
            return _process_locally(db, doc_id)
    delay = settings.OCR_REPROCESS_DELAY_SECONDS if delay_seconds is None else delay_seconds

    documents = (
        db.query(Document.doc_id, Document.file_name, Document.mime_type)
        .order_by(Document.uploaded_at, Document.doc_id)
        .all()
    )
    result = {"success": 0, "failed": 0, "skipped": 0}
    total = len(documents)
    for position, doc in enumerate(documents, start=1):
        if on_progress:
            on_progress(position, total)
        if not is_processable(doc.mime_type):
            logger.info("[ocr] skipping %s - unsupported type: %s", doc.file_name, doc.mime_type)
            result["skipped"] += 1
            continue
        if processor(doc.doc_id):
            result["success"] += 1
        else:
            result["failed"] += 1
        if delay > 0:
            sleep(delay)
    return result


def reprocess_in_background(session_factory: Callable[[], Session]) -> Dict[str, int]:
    """Ejecuta `reprocess_all_documents` con una sesión propia, fuera del ciclo de la solicitud."""
    db = session_factory()
    try:
        result = reprocess_all_documents(db)
    finally:
        db.close()
    logger.info(
        "[ocr] reprocess finished success=%s failed=%s skipped=%s",
        result["success"], result["failed"], result["skipped"],
    )
    return result
