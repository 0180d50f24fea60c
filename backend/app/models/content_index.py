"""Texto extraído por OCR, una fila por documento."""

from sqlalchemy import Column, Integer, Float, Text, DateTime, ForeignKey, JSON

from app.database import Base


class DocumentContentIndex(Base):
    __tablename__ = "document_content_index"

    index_id = Column(Integer, primary_key=True, autoincrement=True)
    doc_id = Column(Integer, ForeignKey("documents.doc_id", ondelete="CASCADE"), unique=True, nullable=False)
    content_text = Column(Text)
    page_number = Column(Integer, default=1)
    ocr_confidence = Column(Float)
    # "metadata" está reservado por SQLAlchemy en clases declarativas
    index_metadata = Column("metadata", JSON)
    indexed_at = Column(DateTime)
