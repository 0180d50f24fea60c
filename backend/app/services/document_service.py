"""Alta de documentos y reemplazo de archivo, ambos registrados como versiones."""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.client import Entity, Movement
from app.models.document import Document
from app.models.user import User
from app.services import version_service

logger = logging.getLogger(__name__)


def create_document(
    db: Session,
    *,
    entity: Entity,
    upload: dict,
    current_user: User,
    title: Optional[str] = None,
    movement_id: Optional[int] = None,
    content_text: Optional[str] = None,
) -> Document:
    if movement_id is not None:
        movement = db.query(Movement).filter(Movement.movement_id == movement_id).first()
        if not movement or movement.entity_id != entity.entity_id:
            raise HTTPException(status_code=400, detail="La gestión no pertenece a esta sociedad.")
    entity_id = entity.entity_id

    def work() -> Document:
        doc = Document(
            entity_id=entity_id,
            movement_id=movement_id,
            title=title or upload["filename"],
            file_name=upload["filename"],
            mime_type=upload.get("mime_type"),
            file_path=upload["path"],
            file_size=upload["size"],
            current_version=0,
            uploaded_by=current_user.user_id,
        )
        db.add(doc)
        db.flush()
        version_service.apply_version(
            db,
            doc=doc,
            content_text=content_text,
            file_path=upload["path"],
            file_size=upload["size"],
            changes_description="Versión inicial",
            created_by=current_user.user_id,
        )
        return doc

    doc = version_service.run_versioned(db, work)
    db.refresh(doc)
    logger.info("[documents] created doc_id=%s entity_id=%s", doc.doc_id, entity_id)
    return doc


def replace_file(
    db: Session,
    *,
    doc: Document,
    upload: dict,
    current_user: User,
    changes_description: Optional[str] = None,
    content_text: Optional[str] = None,
) -> Document:
    def work() -> None:
        doc.file_name = upload["filename"]
        doc.mime_type = upload.get("mime_type") or doc.mime_type
        version_service.apply_version(
            db,
            doc=doc,
            content_text=content_text,
            file_path=upload["path"],
            file_size=upload["size"],
            changes_description=changes_description or f"Archivo reemplazado: {upload['filename']}",
            created_by=current_user.user_id,
        )

    version_service.run_versioned(db, work)
    db.refresh(doc)
    logger.info("[documents] replaced file doc_id=%s version=%s", doc.doc_id, doc.current_version)
    return doc
