from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Document(Base):
    __tablename__ = "documents"

    doc_id = Column(Integer, primary_key=True, autoincrement=True)
    entity_id = Column(Integer, ForeignKey("entities.entity_id", ondelete="CASCADE"), nullable=False)
    movement_id = Column(Integer, ForeignKey("entity_movements.movement_id", ondelete="SET NULL"))
    title = Column(String(200))
    file_name = Column(String(255), nullable=False)
    mime_type = Column(String(100))
    # puntero al archivo vigente dentro del bucket de almacenamiento
    file_path = Column(String(500), nullable=False)
    file_size = Column(Integer, default=0)
    content_text = Column(Text)
    current_version = Column(Integer, nullable=False, default=0)
    uploaded_by = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    uploaded_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    entity = relationship("Entity", back_populates="documents")
    movement = relationship("Movement", back_populates="documents")
    versions = relationship(
        "DocumentVersion",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="DocumentVersion.version_number",
    )

    __table_args__ = (
        Index("idx_document_entity", "entity_id", "movement_id"),
    )
