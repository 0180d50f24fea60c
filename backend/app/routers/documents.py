"""Documentos y su historial de versiones: carga, reemplazo, comparación, reversión y deshacer."""

from fastapi import APIRouter, Depends, UploadFile, File, Form
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.document import Document
from app.models.user import User
from app.schemas.document import DocumentOut
from app.schemas.version import DocumentVersionOut, RevertResult, UndoResult, VersionDiffOut
from app.services import document_service, version_service
from app.utils.helpers import save_upload
from app.utils.permissions import ensure_staff, get_accessible_document, get_accessible_entity

router = APIRouter(tags=["documents"])


@router.get("/api/entities/{entity_id}/documents", response_model=List[DocumentOut])
def list_documents(
    entity_id: int,
    movement_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    get_accessible_entity(db, entity_id, current_user)
    q = db.query(Document).filter(Document.entity_id == entity_id)
    if movement_id is not None:
        q = q.filter(Document.movement_id == movement_id)
    return q.order_by(Document.uploaded_at.desc(), Document.doc_id.desc()).all()


@router.post("/api/entities/{entity_id}/documents", response_model=DocumentOut)
async def create_document(
    entity_id: int,
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    movement_id: Optional[int] = Form(None),
    content_text: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entity = get_accessible_entity(db, entity_id, current_user)
    upload = await save_upload(file, subfolder=f"entity_{entity_id}")
    return document_service.create_document(
        db,
        entity=entity,
        upload=upload,
        current_user=current_user,
        title=title,
        movement_id=movement_id,
        content_text=content_text,
    )


@router.get("/api/documents/{doc_id}", response_model=DocumentOut)
def get_document(doc_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_accessible_document(db, doc_id, current_user)


@router.put("/api/documents/{doc_id}/file", response_model=DocumentOut)
async def replace_document_file(
    doc_id: int,
    file: UploadFile = File(...),
    changes_description: Optional[str] = Form(None),
    content_text: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    doc = get_accessible_document(db, doc_id, current_user)
    upload = await save_upload(file, subfolder=f"entity_{doc.entity_id}")
    return document_service.replace_file(
        db,
        doc=doc,
        upload=upload,
        current_user=current_user,
        changes_description=changes_description,
        content_text=content_text,
    )


@router.get("/api/documents/{doc_id}/versions", response_model=List[DocumentVersionOut])
def list_document_versions(
    doc_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    doc = get_accessible_document(db, doc_id, current_user)
    versions = version_service.list_versions(db, doc_id)
    return [version_service.to_response(row, doc.current_version) for row in versions]


@router.get("/api/documents/{doc_id}/versions/{version_number}/diff", response_model=VersionDiffOut)
def compare_to_previous(
    doc_id: int,
    version_number: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    doc = get_accessible_document(db, doc_id, current_user)
    return version_service.compare_to_previous(db, doc, version_number)


@router.get("/api/documents/{doc_id}/diff", response_model=VersionDiffOut)
def compare_versions(
    doc_id: int,
    from_version: int,
    to_version: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    doc = get_accessible_document(db, doc_id, current_user)
    return version_service.compare_versions(db, doc, from_version, to_version)


@router.post("/api/documents/{doc_id}/revert/{version_number}", response_model=RevertResult)
def revert_document(
    doc_id: int,
    version_number: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    doc = get_accessible_document(db, doc_id, current_user)
    new_version, pending = version_service.revert_to(db, doc, version_number, current_user)
    db.refresh(doc)
    return {
        "message": f"Documento revertido a versión {version_number}",
        "document": doc,
        "version": version_service.to_response(new_version, doc.current_version),
        "undo": pending,
    }


@router.post("/api/documents/{doc_id}/undo/{action_id}", response_model=UndoResult)
def undo_revert(
    doc_id: int,
    action_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    doc = get_accessible_document(db, doc_id, current_user)
    doc = version_service.undo_revert(db, doc, action_id, current_user)
    return {"message": "Reversión deshecha", "document": doc}


@router.post("/api/documents/{doc_id}/reconcile", response_model=DocumentOut)
def reconcile_document(
    doc_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_staff(current_user)
    doc = get_accessible_document(db, doc_id, current_user)
    version_service.reconcile_document(db, doc)
    return doc
