"""Roles y reglas de acceso a clientes, sociedades y documentos."""

from typing import Set

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.client import Client, Entity
from app.models.document import Document
from app.models.user import ClientUser, User


ADMIN = "admin"
RC_ABOGADOS = "rc_abogados"
CLIENTE = "cliente"
USER = "user"

STAFF_ROLES = (ADMIN, RC_ABOGADOS)
ALL_ROLES = (ADMIN, RC_ABOGADOS, CLIENTE, USER)


def is_admin(user: User) -> bool:
    return user.role == ADMIN


def is_staff(user: User) -> bool:
    return user.role in STAFF_ROLES


def accessible_client_ids(db: Session, user: User) -> Set[int]:
    return {
        int(row[0])
        for row in db.query(ClientUser.client_id)
        .filter(ClientUser.user_id == user.user_id)
        .all()
    }


def can_view_client(db: Session, client_id: int, user: User) -> bool:
    if is_staff(user):
        return True
    return client_id in accessible_client_ids(db, user)


def get_accessible_client(db: Session, client_id: int, user: User) -> Client:
    client = db.query(Client).filter(Client.client_id == client_id).first()
    if not client:
        raise HTTPException(status_code=404, detail="Cliente no encontrado.")
    if not can_view_client(db, client.client_id, user):
        raise HTTPException(status_code=403, detail="No tienes acceso a este cliente.")
    return client


def get_accessible_entity(db: Session, entity_id: int, user: User) -> Entity:
    entity = db.query(Entity).filter(Entity.entity_id == entity_id).first()
    if not entity:
        raise HTTPException(status_code=404, detail="Sociedad no encontrada.")
    if not can_view_client(db, entity.client_id, user):
        raise HTTPException(status_code=403, detail="No tienes acceso a esta sociedad.")
    return entity


def get_accessible_document(db: Session, doc_id: int, user: User) -> Document:
    doc = db.query(Document).filter(Document.doc_id == doc_id).first()
    if not doc:
        raise HTTPException(status_code=404, detail="Documento no encontrado.")
    get_accessible_entity(db, doc.entity_id, user)
    return doc


def ensure_staff(user: User) -> None:
    if not is_staff(user):
        raise HTTPException(status_code=403, detail="Se requiere rol admin o rc_abogados.")
