"""Configuración centralizada de la aplicación basada en variables de entorno."""

from pydantic_settings import BaseSettings
from typing import Dict, List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./gestion_documental.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:8000"]

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Almacenamiento de archivos
    MAX_UPLOAD_SIZE: int = 50 * 1024 * 1024  # 50 MB
    ALLOWED_EXTENSIONS: List[str] = [
        "pdf", "jpg", "jpeg", "png", "tif", "tiff", "webp",
        "doc", "docx", "xls", "xlsx", "csv", "txt",
    ]
    UPLOAD_DIR: str = "uploads"
    STORAGE_BUCKET: str = "documents"

    # OCR
    OCR_LANGUAGE: str = "spa"
    OCR_DEFAULT_CONFIDENCE: float = 0.85
    OCR_REPROCESS_DELAY_SECONDS: float = 0.5
    OCR_SERVICE_URL: str = "http://localhost:8000/api/ocr/process"
    OCR_TIMEOUT_SECONDS: float = 60.0

    # Versiones
    REVERT_UNDO_WINDOW_SECONDS: int = 8
    VERSION_ALLOCATION_RETRIES: int = 3

    # Feature flags (valores iniciales por instancia de aplicación)
    FEATURE_WORKFLOW_SYSTEM: bool = True
    FEATURE_SEMANTIC_SEARCH: bool = False
    FEATURE_SHARED_LINKS: bool = True
    FEATURE_TWO_FACTOR_AUTH: bool = True
    FEATURE_TELEMETRY: bool = False
    FEATURE_AUDIT_LOGS: bool = True

    def feature_flag_defaults(self) -> Dict[str, bool]:
        return {
            "enable_workflow_system": self.FEATURE_WORKFLOW_SYSTEM,
            "enable_semantic_search": self.FEATURE_SEMANTIC_SEARCH,
            "enable_shared_links": self.FEATURE_SHARED_LINKS,
            "enable_two_factor_auth": self.FEATURE_TWO_FACTOR_AUTH,
            "enable_telemetry": self.FEATURE_TELEMETRY,
            "enable_audit_logs": self.FEATURE_AUDIT_LOGS,
        }

    def storage_root(self) -> Path:
        return Path(self.UPLOAD_DIR) / self.STORAGE_BUCKET

    class Config:
        # backend/.env se carga sin importar el cwd de ejecución.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
