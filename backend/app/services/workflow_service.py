"""Máquina de estados del flujo de aprobación de documentos.

`transition_workflow_state` es el procedimiento del lado servidor: valida la transición
contra el estado almacenado y escribe estado + auditoría en una sola transacción.
`transition` es la entrada usada por la API; solo pre-valida el comentario obligatorio.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.user import User
from app.models.workflow import WorkflowState, WorkflowTransition

logger = logging.getLogger(__name__)

DRAFT = "draft"
IN_REVIEW = "in_review"
APPROVED = "approved"
REJECTED = "rejected"
PUBLISHED = "published"
ARCHIVED = "archived"

STATES = (DRAFT, IN_REVIEW, APPROVED, REJECTED, PUBLISHED, ARCHIVED)

# estado -> {acción: estado siguiente}
TRANSITIONS: Dict[str, Dict[str, str]] = {
    DRAFT: {"submit": IN_REVIEW},
    IN_REVIEW: {"approve": APPROVED, "reject": REJECTED},
    REJECTED: {"revise": DRAFT},
    APPROVED: {"publish": PUBLISHED},
    PUBLISHED: {"archive": ARCHIVED},
    ARCHIVED: {},
}

ACTION_TARGETS: Dict[str, str] = {
    action: next_state
    for actions in TRANSITIONS.values()
    for action, next_state in actions.items()
}

COMMENT_REQUIRED_ACTIONS = frozenset({"reject", "revise"})

STATE_LABELS = {
    DRAFT: "Borrador",
    IN_REVIEW: "En Revisión",
    APPROVED: "Aprobado",
    REJECTED: "Rechazado",
    PUBLISHED: "Publicado",
    ARCHIVED: "Archivado",
}


@dataclass
class TransitionResult:
    success: bool
    error_message: Optional[str] = None
    conflict: bool = False


def available_actions(state: str) -> List[Tuple[str, str]]:
    return list(TRANSITIONS.get(state, {}).items())


def get_or_create_state(db: Session, doc_id: int) -> WorkflowState:
    state = db.query(WorkflowState).filter(WorkflowState.doc_id == doc_id).first()
    if state:
        return state
    try:
        db.add(WorkflowState(doc_id=doc_id, current_state=DRAFT))
        db.commit()
    except IntegrityError:
        # otro lector creó la fila primero; se usa la existente
        db.rollback()
        logger.info("[workflow] initial state already created for doc_id=%s", doc_id)
    return db.query(WorkflowState).filter(WorkflowState.doc_id == doc_id).one()


def transition_workflow_state(
    db: Session,
    *,
    doc_id: int,
    to_state: str,
    transition_type: str,
    user_id: int,
    comment: Optional[str] = None,
    assigned_to: Optional[int] = None,
    due_date: Optional[date] = None,
) -> TransitionResult:
    state = get_or_create_state(db, doc_id)
    from_state = state.current_state

    if to_state not in STATES:
        return TransitionResult(False, f"Estado desconocido: {to_state}")
    if TRANSITIONS.get(from_state, {}).get(transition_type) != to_state:
        return TransitionResult(
            False,
            f"Transición no permitida: {from_state} → {to_state} ({transition_type})",
        )
    if transition_type in COMMENT_REQUIRED_ACTIONS and not (comment or "").strip():
        return TransitionResult(False, "Esta acción requiere un comentario.")
    if assigned_to is not None and from_state == DRAFT:
        assignee = db.query(User).filter(User.user_id == assigned_to, User.is_active == True).first()  # noqa: E712
        if not assignee:
            return TransitionResult(False, "El usuario asignado no existe o está inactivo.")

    values: Dict[str, Any] = {
        "current_state": to_state,
        "previous_state": from_state,
        "updated_at": datetime.utcnow(),
    }
    if from_state == DRAFT:
        if assigned_to is not None:
            values["assigned_to"] = assigned_to
        if due_date is not None:
            values["due_date"] = due_date

    try:
        # compare-and-set: una transición concurrente ya aplicada deja 0 filas afectadas
        updated = (
            db.query(WorkflowState)
            .filter(
                WorkflowState.state_id == state.state_id,
                WorkflowState.current_state == from_state,
            )
            .update(values, synchronize_session=False)
        )
        if updated != 1:
            db.rollback()
            return TransitionResult(
                False,
                "El estado del documento cambió durante la operación. Recarga e intenta nuevamente.",
                conflict=True,
            )
        db.add(
            WorkflowTransition(
                doc_id=doc_id,
                from_state=from_state,
                to_state=to_state,
                transitioned_by=user_id,
                transition_type=transition_type,
                comment=(comment or "").strip() or None,
            )
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "[workflow] doc_id=%s %s -> %s (%s) by user_id=%s",
        doc_id, from_state, to_state, transition_type, user_id,
    )
    return TransitionResult(True)


def transition(
    db: Session,
    doc_id: int,
    action: str,
    current_user: User,
    comment: Optional[str] = None,
    assigned_to: Optional[int] = None,
    due_date: Optional[date] = None,
) -> WorkflowState:
    to_state = ACTION_TARGETS.get(action)
    if to_state is None:
        raise HTTPException(status_code=400, detail=f"Acción desconocida: {action}")
    if action in COMMENT_REQUIRED_ACTIONS and not (comment or "").strip():
        raise HTTPException(status_code=400, detail="Por favor ingresa un comentario para esta acción.")

    result = transition_workflow_state(
        db,
        doc_id=doc_id,
        to_state=to_state,
        transition_type=action,
        user_id=current_user.user_id,
        comment=comment,
        assigned_to=assigned_to,
        due_date=due_date,
    )
    if not result.success:
        logger.warning("[workflow] transition rejected doc_id=%s action=%s: %s", doc_id, action, result.error_message)
        raise HTTPException(status_code=409 if result.conflict else 400, detail=result.error_message)
    return db.query(WorkflowState).filter(WorkflowState.doc_id == doc_id).one()


def list_transitions(db: Session, doc_id: int) -> List[Dict[str, Any]]:
    rows = (
        db.query(WorkflowTransition)
        .filter(WorkflowTransition.doc_id == doc_id)
        .order_by(WorkflowTransition.transition_id)
        .all()
    )
    items: List[Dict[str, Any]] = []
    previous_at: Optional[datetime] = None
    for row in rows:
        hours = None
        if previous_at is not None and row.created_at is not None:
            hours = round((row.created_at - previous_at).total_seconds() / 3600, 2)
        items.append(
            {
                "transition_id": row.transition_id,
                "doc_id": row.doc_id,
                "from_state": row.from_state,
                "to_state": row.to_state,
                "transitioned_by": row.transitioned_by,
                "transitioned_by_email": row.actor.email if row.actor else None,
                "transition_type": row.transition_type,
                "comment": row.comment,
                "created_at": row.created_at,
                "hours_since_last_transition": hours,
            }
        )
        previous_at = row.created_at
    return items


def workflow_overview(db: Session, doc_id: int) -> Dict[str, Any]:
    state = get_or_create_state(db, doc_id)
    return {
        "state": state,
        "state_label": STATE_LABELS[state.current_state],
        "available_actions": [
            {"action": action, "next_state": next_state, "next_state_label": STATE_LABELS[next_state]}
            for action, next_state in available_actions(state.current_state)
        ],
        "transitions": list_transitions(db, doc_id),
    }
