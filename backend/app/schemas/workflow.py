"""Esquemas Pydantic del flujo de aprobación de documentos."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel


class WorkflowActionOut(BaseModel):
    action: str
    next_state: str
    next_state_label: str


class WorkflowStateOut(BaseModel):
    state_id: int
    doc_id: int
    current_state: str
    previous_state: Optional[str] = None
    assigned_to: Optional[int] = None
    due_date: Optional[date] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class WorkflowTransitionOut(BaseModel):
    transition_id: int
    doc_id: int
    from_state: str
    to_state: str
    transitioned_by: int
    transitioned_by_email: Optional[str] = None
    transition_type: str
    comment: Optional[str] = None
    created_at: datetime
    hours_since_last_transition: Optional[float] = None


class WorkflowOut(BaseModel):
    state: WorkflowStateOut
    state_label: str
    available_actions: List[WorkflowActionOut]
    transitions: List[WorkflowTransitionOut]


class WorkflowTransitionRequest(BaseModel):
    action: str
    comment: Optional[str] = None
    assigned_to: Optional[int] = None
    due_date: Optional[date] = None
