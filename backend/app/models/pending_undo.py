"""Acción compensatoria pendiente para deshacer una reversión dentro de una ventana corta."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey

from app.database import Base


class PendingUndo(Base):
    __tablename__ = "pending_undo"

    action_id = Column(String(36), primary_key=True)
    doc_id = Column(Integer, ForeignKey("documents.doc_id", ondelete="CASCADE"), nullable=False)
    action_type = Column(String(30), nullable=False, default="revert")
    revert_version_number = Column(Integer, nullable=False)
    previous_version_number = Column(Integer, nullable=False)
    previous_file_path = Column(String(500), nullable=False)
    previous_file_size = Column(Integer, default=0)
    previous_content_text = Column(Text)
    created_by = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    consumed_at = Column(DateTime)
