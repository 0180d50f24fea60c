"""Esquemas Pydantic del procesamiento OCR."""

from pydantic import BaseModel


class OCRRequest(BaseModel):
    document_id: int


class OCRResult(BaseModel):
    success: bool
    document_id: int
    text_length: int
    message: str


class ReprocessStarted(BaseModel):
    status: str
    message: str
