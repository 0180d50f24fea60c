"""Esquemas Pydantic de documentos."""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class DocumentOut(BaseModel):
    doc_id: int
    entity_id: int
    movement_id: Optional[int] = None
    title: Optional[str] = None
    file_name: str
    mime_type: Optional[str] = None
    file_path: str
    file_size: int
    content_text: Optional[str] = None
    current_version: int
    uploaded_by: int
    uploaded_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}
