"""Procesamiento OCR de documentos."""

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db, get_session_factory
from app.middleware.auth_middleware import get_current_user, require_roles
from app.models.user import User
from app.schemas.ocr import OCRRequest, OCRResult, ReprocessStarted
from app.services import ocr_service
from app.utils.permissions import ADMIN, RC_ABOGADOS, get_accessible_document

router = APIRouter(prefix="/api/ocr", tags=["ocr"])


@router.post("/process", response_model=OCRResult)
def process_document(
    data: OCRRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    get_accessible_document(db, data.document_id, current_user)
    return ocr_service.process_document_ocr(db, data.document_id)


@router.post("/reprocess", response_model=ReprocessStarted, status_code=status.HTTP_202_ACCEPTED)
def reprocess_documents(
    background_tasks: BackgroundTasks,
    session_factory=Depends(get_session_factory),
    _current_user: User = Depends(require_roles(ADMIN, RC_ABOGADOS)),
):
    background_tasks.add_task(ocr_service.reprocess_in_background, session_factory)
    return {"status": "started", "message": "Reprocesamiento OCR iniciado en segundo plano"}
