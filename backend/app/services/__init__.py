"""Capa de servicios: reglas de negocio sobre la sesión SQLAlchemy."""

from app.services import (
    auth_service,
    diff_service,
    document_service,
    version_service,
    workflow_service,
    ocr_service,
    user_service,
)
