"""Paquete de modelos SQLAlchemy."""

from app.models.user import User, ClientUser
from app.models.client import Client, Entity, Movement
from app.models.document import Document
from app.models.document_version import DocumentVersion
from app.models.workflow import WorkflowState, WorkflowTransition
from app.models.pending_undo import PendingUndo
from app.models.content_index import DocumentContentIndex

__all__ = [
    "User", "ClientUser",
    "Client", "Entity", "Movement",
    "Document",
    "DocumentVersion",
    "WorkflowState", "WorkflowTransition",
    "PendingUndo",
    "DocumentContentIndex",
]
