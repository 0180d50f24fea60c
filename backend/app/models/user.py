"""Modelos SQLAlchemy de usuarios y su acceso a clientes."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(200), unique=True, nullable=False)
    full_name = Column(String(100), nullable=False)
    department = Column(String(100))
    role = Column(String(20), nullable=False)  # admin/rc_abogados/cliente/user
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())

    client_access = relationship(
        "ClientUser",
        foreign_keys="ClientUser.user_id",
        back_populates="user",
        cascade="all, delete-orphan",
    )


class ClientUser(Base):
    __tablename__ = "client_users"

    client_user_id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.client_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    granted_by = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"))
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", foreign_keys=[user_id], back_populates="client_access")
    client = relationship("Client", back_populates="users")

    __table_args__ = (
        UniqueConstraint("client_id", "user_id", name="uq_client_users_client_user"),
    )
