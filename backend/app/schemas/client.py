"""Esquemas Pydantic de la jerarquía Cliente → Sociedad → Gestión."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class ClientCreate(BaseModel):
    name: str
    rut: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    contact_person: Optional[str] = None
    notes: Optional[str] = None


class ClientOut(ClientCreate):
    client_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class EntityCreate(BaseModel):
    name: str
    rut: Optional[str] = None
    entity_type: Optional[str] = None
    legal_representative: Optional[str] = None


class EntityOut(EntityCreate):
    entity_id: int
    client_id: int
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class MovementCreate(BaseModel):
    title: str
    movement_type: Optional[str] = None
    movement_date: Optional[date] = None
    status: str = "pending"
    notes: Optional[str] = None


class MovementOut(MovementCreate):
    movement_id: int
    entity_id: int
    created_at: datetime

    model_config = {"from_attributes": True}
