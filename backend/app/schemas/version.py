"""Esquemas Pydantic del historial de versiones, comparaciones y reversión."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from app.schemas.document import DocumentOut


class DocumentVersionOut(BaseModel):
    version_id: int
    doc_id: int
    version_number: int
    file_path: str
    file_size: int
    content_text: Optional[str] = None
    changes_description: Optional[str] = None
    created_by: int
    creator_email: Optional[str] = None
    creator_name: Optional[str] = None
    is_current: bool = False
    created_at: datetime


class DiffSegmentOut(BaseModel):
    operation: str  # equal/insert/delete
    text: str


class VersionDiffOut(BaseModel):
    doc_id: int
    from_version: Optional[int]
    to_version: int
    segments: List[DiffSegmentOut]
    html: str


class PendingUndoOut(BaseModel):
    action_id: str
    expires_at: datetime

    model_config = {"from_attributes": True}


class RevertResult(BaseModel):
    message: str
    document: DocumentOut
    version: DocumentVersionOut
    undo: PendingUndoOut


class UndoResult(BaseModel):
    message: str
    document: DocumentOut
