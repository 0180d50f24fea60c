"""Esquemas Pydantic de usuarios y administración de cuentas."""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class UserBase(BaseModel):
    email: str
    full_name: str
    department: Optional[str] = None
    role: str


class UserOut(UserBase):
    user_id: int
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    email: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class AdminUserCreate(UserBase):
    client_ids: List[int] = []


class AdminUserUpdate(BaseModel):
    full_name: Optional[str] = None
    department: Optional[str] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None
    client_ids: Optional[List[int]] = None


class AdminUserOut(UserOut):
    client_ids: List[int] = []
