"""Administración de cuentas de usuario y su acceso a clientes."""

import logging
from typing import Dict, List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.client import Client, Movement
from app.models.document import Document
from app.models.document_version import DocumentVersion
from app.models.workflow import WorkflowTransition
from app.models.user import ClientUser, User
from app.schemas.user import AdminUserCreate, AdminUserUpdate
from app.utils.permissions import ADMIN, ALL_ROLES, is_admin

logger = logging.getLogger(__name__)


def _normalize_role_or_raise(role: str) -> str:
    normalized = str(role or "").strip()
    if normalized not in ALL_ROLES:
        raise HTTPException(status_code=400, detail="Rol inválido.")
    return normalized


def _ensure_not_last_admin_change(db: Session, user: User, next_role: str, next_active: bool):
    is_admin_leaving = is_admin(user) and (next_role != ADMIN or next_active is False)
    if is_admin_leaving:
        admin_count = db.query(User).filter(User.role == ADMIN, User.is_active == True).count()  # noqa: E712
        if admin_count <= 1:
            raise HTTPException(status_code=400, detail="No se puede modificar la última cuenta de administrador.")


def _set_client_access(db: Session, user_id: int, client_ids: List[int], granted_by: int):
    unique_ids = sorted(set(client_ids))
    if unique_ids:
        existing = db.query(Client).filter(Client.client_id.in_(unique_ids)).count()
        if existing != len(unique_ids):
            raise HTTPException(status_code=400, detail="La lista contiene clientes inexistentes.")
    db.query(ClientUser).filter(ClientUser.user_id == user_id).delete(synchronize_session="fetch")
    for client_id in unique_ids:
        db.add(ClientUser(client_id=client_id, user_id=user_id, granted_by=granted_by))


def _collect_hard_delete_references(db: Session, user_id: int) -> List[str]:
    checks = [
        ("documentos", db.query(Document).filter(Document.uploaded_by == user_id).count()),
        ("versiones", db.query(DocumentVersion).filter(DocumentVersion.created_by == user_id).count()),
        ("transiciones de workflow", db.query(WorkflowTransition).filter(WorkflowTransition.transitioned_by == user_id).count()),
        ("clientes creados", db.query(Client).filter(Client.created_by == user_id).count()),
        ("gestiones creadas", db.query(Movement).filter(Movement.created_by == user_id).count()),
    ]
    return [f"{count} {label}" for label, count in checks if count > 0]


def _client_ids(db: Session, user_id: int) -> List[int]:
    return [
        int(row[0])
        for row in db.query(ClientUser.client_id)
        .filter(ClientUser.user_id == user_id)
        .order_by(ClientUser.client_id)
        .all()
    ]


def to_response(db: Session, user: User) -> Dict:
    return {
        "user_id": user.user_id,
        "email": user.email,
        "full_name": user.full_name,
        "department": user.department,
        "role": user.role,
        "is_active": user.is_active,
        "created_at": user.created_at,
        "client_ids": _client_ids(db, user.user_id),
    }


def _get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="Usuario no encontrado.")
    return user


def list_users(db: Session) -> List[Dict]:
    users = db.query(User).order_by(User.full_name, User.user_id).all()
    return [to_response(db, user) for user in users]


def create_user(db: Session, data: AdminUserCreate, current_user: User) -> Dict:
    role = _normalize_role_or_raise(data.role)
    email = data.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="Ya existe un usuario con ese correo.")

    user = User(
        email=email,
        full_name=data.full_name,
        department=data.department,
        role=role,
        is_active=True,
    )
    db.add(user)
    db.flush()
    _set_client_access(db, user.user_id, data.client_ids, current_user.user_id)
    db.commit()
    db.refresh(user)
    logger.info("[users] created user_id=%s role=%s by user_id=%s", user.user_id, role, current_user.user_id)
    return to_response(db, user)


def update_user(db: Session, user_id: int, data: AdminUserUpdate, current_user: User) -> Dict:
    user = _get_user(db, user_id)
    next_role = _normalize_role_or_raise(data.role) if data.role is not None else user.role
    next_active = data.is_active if data.is_active is not None else user.is_active
    _ensure_not_last_admin_change(db, user, next_role, next_active)

    if data.full_name is not None:
        user.full_name = data.full_name
    if data.department is not None:
        user.department = data.department
    user.role = next_role
    user.is_active = next_active
    if data.client_ids is not None:
        _set_client_access(db, user.user_id, data.client_ids, current_user.user_id)
    db.commit()
    db.refresh(user)
    return to_response(db, user)


def delete_user(db: Session, user_id: int, current_user: User) -> None:
    user = _get_user(db, user_id)
    if user.user_id == current_user.user_id:
        raise HTTPException(status_code=400, detail="No puedes eliminar tu propia cuenta.")
    _ensure_not_last_admin_change(db, user, next_role="", next_active=False)
    references = _collect_hard_delete_references(db, user.user_id)
    if references:
        raise HTTPException(
            status_code=409,
            detail=f"El usuario tiene registros asociados ({', '.join(references)}); desactívalo en lugar de eliminarlo.",
        )
    db.delete(user)
    db.commit()
    logger.info("[users] deleted user_id=%s by user_id=%s", user_id, current_user.user_id)
