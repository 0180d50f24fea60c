"""Estado de aprobación por documento y su historial de transiciones."""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class WorkflowState(Base):
    __tablename__ = "document_workflow_states"

    state_id = Column(Integer, primary_key=True, autoincrement=True)
    doc_id = Column(Integer, ForeignKey("documents.doc_id", ondelete="CASCADE"), unique=True, nullable=False)
    current_state = Column(String(20), nullable=False, default="draft")
    previous_state = Column(String(20))
    assigned_to = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"))
    due_date = Column(Date)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class WorkflowTransition(Base):
    __tablename__ = "workflow_transitions"

    transition_id = Column(Integer, primary_key=True, autoincrement=True)
    doc_id = Column(Integer, ForeignKey("documents.doc_id", ondelete="CASCADE"), nullable=False)
    from_state = Column(String(20), nullable=False)
    to_state = Column(String(20), nullable=False)
    transitioned_by = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    transition_type = Column(String(20), nullable=False)  # submit/approve/reject/revise/publish/archive
    comment = Column(Text)
    created_at = Column(DateTime, server_default=func.now())

    actor = relationship("User")

    __table_args__ = (
        Index("idx_workflow_transition_doc", "doc_id", "transition_id"),
    )
