"""Flujo de aprobación por documento."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.user import User
from app.schemas.workflow import WorkflowOut, WorkflowTransitionRequest
from app.services import workflow_service
from app.utils.feature_flags import require_flag
from app.utils.permissions import get_accessible_document

router = APIRouter(
    prefix="/api/documents/{doc_id}/workflow",
    tags=["workflow"],
    dependencies=[Depends(require_flag("enable_workflow_system"))],
)


@router.get("", response_model=WorkflowOut)
def get_workflow(doc_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    get_accessible_document(db, doc_id, current_user)
    return workflow_service.workflow_overview(db, doc_id)


@router.post("/transition", response_model=WorkflowOut)
def transition_workflow(
    doc_id: int,
    data: WorkflowTransitionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    get_accessible_document(db, doc_id, current_user)
    workflow_service.transition(
        db,
        doc_id,
        data.action,
        current_user,
        comment=data.comment,
        assigned_to=data.assigned_to,
        due_date=data.due_date,
    )
    return workflow_service.workflow_overview(db, doc_id)
