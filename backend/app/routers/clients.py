"""Clientes, sociedades y gestiones."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.client import Client, Entity, Movement
from app.models.user import User
from app.schemas.client import ClientCreate, ClientOut, EntityCreate, EntityOut, MovementCreate, MovementOut
from app.utils.permissions import (
    accessible_client_ids,
    ensure_staff,
    get_accessible_client,
    get_accessible_entity,
    is_staff,
)

router = APIRouter(tags=["clients"])


@router.get("/api/clients", response_model=List[ClientOut])
def list_clients(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    q = db.query(Client)
    if not is_staff(current_user):
        q = q.filter(Client.client_id.in_(accessible_client_ids(db, current_user)))
    return q.order_by(Client.name).all()


@router.post("/api/clients", response_model=ClientOut)
def create_client(
    data: ClientCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_staff(current_user)
    client = Client(**data.model_dump(), created_by=current_user.user_id)
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


@router.get("/api/clients/{client_id}/entities", response_model=List[EntityOut])
def list_entities(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    get_accessible_client(db, client_id, current_user)
    return db.query(Entity).filter(Entity.client_id == client_id).order_by(Entity.name).all()


@router.post("/api/clients/{client_id}/entities", response_model=EntityOut)
def create_entity(
    client_id: int,
    data: EntityCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_staff(current_user)
    get_accessible_client(db, client_id, current_user)
    entity = Entity(client_id=client_id, **data.model_dump())
    db.add(entity)
    db.commit()
    db.refresh(entity)
    return entity


@router.get("/api/entities/{entity_id}/movements", response_model=List[MovementOut])
def list_movements(entity_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    get_accessible_entity(db, entity_id, current_user)
    return (
        db.query(Movement)
        .filter(Movement.entity_id == entity_id)
        .order_by(Movement.movement_date.desc(), Movement.movement_id.desc())
        .all()
    )


@router.post("/api/entities/{entity_id}/movements", response_model=MovementOut)
def create_movement(
    entity_id: int,
    data: MovementCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_staff(current_user)
    get_accessible_entity(db, entity_id, current_user)
    movement = Movement(entity_id=entity_id, created_by=current_user.user_id, **data.model_dump())
    db.add(movement)
    db.commit()
    db.refresh(movement)
    return movement
