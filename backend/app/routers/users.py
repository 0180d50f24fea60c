"""Administración de usuarios (solo admin y rc_abogados)."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.user import User
from app.schemas.user import AdminUserCreate, AdminUserOut, AdminUserUpdate
from app.services import user_service
from app.utils.permissions import ADMIN, RC_ABOGADOS

router = APIRouter(prefix="/api/admin/users", tags=["admin-users"])

require_user_admin = require_roles(ADMIN, RC_ABOGADOS)


@router.get("", response_model=List[AdminUserOut])
def list_users(
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_user_admin),
):
    return user_service.list_users(db)


@router.post("", response_model=AdminUserOut)
def create_user(
    data: AdminUserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user_admin),
):
    return user_service.create_user(db, data, current_user)


@router.put("/{user_id}", response_model=AdminUserOut)
def update_user(
    user_id: int,
    data: AdminUserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user_admin),
):
    return user_service.update_user(db, user_id, data, current_user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_user_admin),
):
    user_service.delete_user(db, user_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
