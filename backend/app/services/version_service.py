"""Historial de versiones de documentos: creación, comparación, reversión y deshacer."""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.document import Document
from app.models.document_version import DocumentVersion
from app.models.pending_undo import PendingUndo
from app.models.user import User
from app.services.diff_service import compute_diff, render_html

logger = logging.getLogger(__name__)

T = TypeVar("T")


class VersionCollision(Exception):
    """Otro escritor tomó el número de versión calculado."""

    def __init__(self, doc_id: int, version_number: int):
        super().__init__(f"doc_id={doc_id} version={version_number}")
        self.doc_id = doc_id
        self.version_number = version_number


def _utcnow() -> datetime:
    return datetime.utcnow()


def _new_action_id() -> str:
    return str(uuid.uuid4())


def _next_version_number(db: Session, doc: Document) -> int:
    current_max = (
        db.query(func.max(DocumentVersion.version_number))
        .filter(DocumentVersion.doc_id == doc.doc_id)
        .scalar()
    )
    return max(doc.current_version or 0, current_max or 0) + 1


def apply_version(
    db: Session,
    *,
    doc: Document,
    content_text: Optional[str],
    file_path: str,
    file_size: int,
    changes_description: str,
    created_by: int,
) -> DocumentVersion:
    """Inserta la siguiente versión y mueve el puntero del documento, sin commit.

    Debe ejecutarse dentro de `run_versioned`, que reintenta ante `VersionCollision`.
    """
    version_number = _next_version_number(db, doc)
    row = DocumentVersion(
        doc_id=doc.doc_id,
        version_number=version_number,
        file_path=file_path,
        file_size=file_size or 0,
        content_text=content_text,
        changes_description=changes_description,
        created_by=created_by,
    )
    db.add(row)
    doc.file_path = file_path
    doc.file_size = file_size or 0
    doc.content_text = content_text
    doc.current_version = version_number
    doc.updated_at = _utcnow()
    try:
        db.flush()
    except IntegrityError as exc:
        raise VersionCollision(doc.doc_id, version_number) from exc
    return row


def run_versioned(db: Session, work: Callable[[], T]) -> T:
    """Ejecuta `work` y hace commit como una única transacción.

    Ante `VersionCollision` se descarta la transacción completa y se vuelve a ejecutar
    `work` desde cero; cualquier otro error deshace todo y se propaga.
    """
    retries = max(1, settings.VERSION_ALLOCATION_RETRIES)
    for attempt in range(1, retries + 1):
        try:
            result = work()
            db.commit()
        except VersionCollision as exc:
            db.rollback()
            logger.warning(
                "[versions] version number collision doc_id=%s version=%s attempt=%s",
                exc.doc_id, exc.version_number, attempt,
            )
            continue
        except (SQLAlchemyError, HTTPException):
            db.rollback()
            raise
        return result

    raise HTTPException(
        status_code=409,
        detail="No se pudo asignar un número de versión; otro usuario modificó el documento. Intenta nuevamente.",
    )


def create_version(
    db: Session,
    *,
    doc: Document,
    content_text: Optional[str],
    file_path: str,
    file_size: int,
    changes_description: str,
    created_by: int,
) -> DocumentVersion:
    row = run_versioned(
        db,
        lambda: apply_version(
            db,
            doc=doc,
            content_text=content_text,
            file_path=file_path,
            file_size=file_size,
            changes_description=changes_description,
            created_by=created_by,
        ),
    )
    db.refresh(row)
    logger.info("[versions] doc_id=%s now at version %s", doc.doc_id, row.version_number)
    return row


def list_versions(db: Session, doc_id: int) -> List[DocumentVersion]:
    return (
        db.query(DocumentVersion)
        .filter(DocumentVersion.doc_id == doc_id)
        .order_by(DocumentVersion.version_number.desc())
        .all()
    )


def get_version(db: Session, doc_id: int, version_number: int) -> DocumentVersion:
    row = (
        db.query(DocumentVersion)
        .filter(
            DocumentVersion.doc_id == doc_id,
            DocumentVersion.version_number == version_number,
        )
        .first()
    )
    if not row:
        raise HTTPException(status_code=404, detail="Versión no encontrada.")
    return row


def to_response(row: DocumentVersion, current_version: Optional[int] = None) -> Dict[str, Any]:
    creator = row.creator
    return {
        "version_id": row.version_id,
        "doc_id": row.doc_id,
        "version_number": row.version_number,
        "file_path": row.file_path,
        "file_size": row.file_size or 0,
        "content_text": row.content_text,
        "changes_description": row.changes_description,
        "created_by": row.created_by,
        "creator_email": creator.email if creator else None,
        "creator_name": creator.full_name if creator else None,
        "is_current": current_version is not None and row.version_number == current_version,
        "created_at": row.created_at,
    }


def _diff_response(doc_id: int, older: Optional[DocumentVersion], newer: DocumentVersion) -> Dict[str, Any]:
    segments = compute_diff(older.content_text if older else "", newer.content_text)
    return {
        "doc_id": doc_id,
        "from_version": older.version_number if older else None,
        "to_version": newer.version_number,
        "segments": [{"operation": op.value, "text": text} for op, text in segments],
        "html": render_html(segments),
    }


def compare_to_previous(db: Session, doc: Document, version_number: int) -> Dict[str, Any]:
    newer = get_version(db, doc.doc_id, version_number)
    older = (
        db.query(DocumentVersion)
        .filter(
            DocumentVersion.doc_id == doc.doc_id,
            DocumentVersion.version_number < version_number,
        )
        .order_by(DocumentVersion.version_number.desc())
        .first()
    )
    # la primera versión no tiene predecesora: todo su texto se muestra como inserción
    return _diff_response(doc.doc_id, older, newer)


def compare_versions(db: Session, doc: Document, from_version: int, to_version: int) -> Dict[str, Any]:
    older = get_version(db, doc.doc_id, from_version)
    newer = get_version(db, doc.doc_id, to_version)
    return _diff_response(doc.doc_id, older, newer)


def revert_to(
    db: Session,
    doc: Document,
    target_version_number: int,
    current_user: User,
    now: Optional[datetime] = None,
) -> Tuple[DocumentVersion, PendingUndo]:
    """Crea una versión nueva con el contenido de `target_version_number`.

    Las versiones intermedias se conservan. La versión nueva, el puntero y la acción
    compensatoria pendiente se confirman juntos; si algo falla no queda nada escrito.
    """
    target = get_version(db, doc.doc_id, target_version_number)
    if target.version_number == doc.current_version:
        raise HTTPException(status_code=400, detail="La versión seleccionada ya es la versión actual.")
    now = now or _utcnow()

    def work() -> Tuple[DocumentVersion, PendingUndo]:
        previous_version_number = doc.current_version
        previous_file_path = doc.file_path
        previous_file_size = doc.file_size or 0
        previous_content_text = doc.content_text

        new_version = apply_version(
            db,
            doc=doc,
            content_text=target.content_text,
            file_path=target.file_path,
            file_size=target.file_size,
            changes_description=f"Revertido a versión {target.version_number}",
            created_by=current_user.user_id,
        )
        pending = PendingUndo(
            action_id=_new_action_id(),
            doc_id=doc.doc_id,
            action_type="revert",
            revert_version_number=new_version.version_number,
            previous_version_number=previous_version_number,
            previous_file_path=previous_file_path,
            previous_file_size=previous_file_size,
            previous_content_text=previous_content_text,
            created_by=current_user.user_id,
            created_at=now,
            expires_at=now + timedelta(seconds=settings.REVERT_UNDO_WINDOW_SECONDS),
        )
        db.add(pending)
        return new_version, pending

    new_version, pending = run_versioned(db, work)
    db.refresh(new_version)
    db.refresh(pending)
    logger.info(
        "[versions] doc_id=%s reverted to version %s as version %s by user_id=%s",
        doc.doc_id, target_version_number, new_version.version_number, current_user.user_id,
    )
    return new_version, pending


def undo_revert(
    db: Session,
    doc: Document,
    action_id: str,
    current_user: User,
    now: Optional[datetime] = None,
) -> Document:
    pending = (
        db.query(PendingUndo)
        .filter(PendingUndo.action_id == action_id, PendingUndo.doc_id == doc.doc_id)
        .first()
    )
    if not pending:
        raise HTTPException(status_code=404, detail="No hay una reversión pendiente para deshacer.")
    if pending.consumed_at is not None:
        raise HTTPException(status_code=410, detail="La reversión ya fue deshecha.")
    now = now or _utcnow()
    if now >= pending.expires_at:
        logger.warning("[versions] undo window expired action_id=%s doc_id=%s", action_id, doc.doc_id)
        raise HTTPException(status_code=410, detail="El plazo para deshacer la reversión expiró.")

    revert_version_number = pending.revert_version_number
    previous = {
        "version_number": pending.previous_version_number,
        "file_path": pending.previous_file_path,
        "file_size": pending.previous_file_size,
        "content_text": pending.previous_content_text,
    }

    def work() -> None:
        # compare-and-set: solo una solicitud puede consumir la acción
        consumed = (
            db.query(PendingUndo)
            .filter(PendingUndo.action_id == action_id, PendingUndo.consumed_at.is_(None))
            .update({"consumed_at": now}, synchronize_session=False)
        )
        if consumed != 1:
            raise HTTPException(status_code=410, detail="La reversión ya fue deshecha.")
        apply_version(
            db,
            doc=doc,
            content_text=previous["content_text"],
            file_path=previous["file_path"],
            file_size=previous["file_size"],
            changes_description=f"Reversión deshecha (contenido de la versión {previous['version_number']})",
            created_by=current_user.user_id,
        )
        db.query(DocumentVersion).filter(
            DocumentVersion.doc_id == doc.doc_id,
            DocumentVersion.version_number == revert_version_number,
        ).delete(synchronize_session="fetch")

    run_versioned(db, work)
    db.refresh(doc)
    logger.info("[versions] undo applied action_id=%s doc_id=%s", action_id, doc.doc_id)
    return doc


def reconcile_document(db: Session, doc: Document) -> bool:
    """Promueve la última versión almacenada si el puntero del documento quedó atrás."""
    latest = (
        db.query(DocumentVersion)
        .filter(DocumentVersion.doc_id == doc.doc_id)
        .order_by(DocumentVersion.version_number.desc())
        .first()
    )
    if not latest or latest.version_number <= (doc.current_version or 0):
        return False
    logger.warning(
        "[versions] reconciling doc_id=%s pointer %s -> %s",
        doc.doc_id, doc.current_version, latest.version_number,
    )
    doc.file_path = latest.file_path
    doc.file_size = latest.file_size or 0
    doc.content_text = latest.content_text
    doc.current_version = latest.version_number
    doc.updated_at = _utcnow()
    db.commit()
    db.refresh(doc)
    return True
