"""Jerarquía Cliente → Sociedad → Gestión."""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Client(Base):
    __tablename__ = "clients"

    client_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    rut = Column(String(20))
    email = Column(String(200))
    phone = Column(String(50))
    contact_person = Column(String(100))
    notes = Column(Text)
    created_by = Column(Integer, ForeignKey("users.user_id"))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    entities = relationship("Entity", back_populates="client", cascade="all, delete-orphan")
    users = relationship("ClientUser", back_populates="client", cascade="all, delete-orphan")


class Entity(Base):
    """Sociedad perteneciente a un cliente."""

    __tablename__ = "entities"

    entity_id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.client_id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    rut = Column(String(20))
    entity_type = Column(String(50))  # spa/ltda/sa/eirl...
    legal_representative = Column(String(100))
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    client = relationship("Client", back_populates="entities")
    movements = relationship("Movement", back_populates="entity", cascade="all, delete-orphan")
    documents = relationship("Document", back_populates="entity", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_entity_client", "client_id"),
    )


class Movement(Base):
    """Gestión: acción fechada sobre una sociedad que agrupa documentos."""

    __tablename__ = "entity_movements"

    movement_id = Column(Integer, primary_key=True, autoincrement=True)
    entity_id = Column(Integer, ForeignKey("entities.entity_id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    movement_type = Column(String(50))
    movement_date = Column(Date)
    status = Column(String(20), default="pending")  # pending/in_progress/completed
    notes = Column(Text)
    created_by = Column(Integer, ForeignKey("users.user_id"))
    created_at = Column(DateTime, server_default=func.now())

    entity = relationship("Entity", back_populates="movements")
    documents = relationship("Document", back_populates="movement")

    __table_args__ = (
        Index("idx_movement_entity", "entity_id", "movement_date"),
    )
