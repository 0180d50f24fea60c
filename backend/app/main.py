"""Punto de entrada FastAPI: middleware, routers y feature flags por aplicación."""

import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import Base, engine
import app.models  # noqa: F401 - registra los modelos en metadata
from app.routers import auth, clients, documents, feature_flags, ocr, users, workflow
from app.utils.feature_flags import FeatureFlags
from app.utils.logging_setup import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Gestión Documental",
    description="Documentos legales y contables por Cliente → Sociedad → Gestión",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.feature_flags = FeatureFlags(settings.feature_flag_defaults())

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(clients.router)
app.include_router(documents.router)
app.include_router(workflow.router)
app.include_router(ocr.router)
app.include_router(users.router)
app.include_router(feature_flags.router)


@app.on_event("startup")
def ensure_schema():
    Base.metadata.create_all(bind=engine)
    os.makedirs(settings.storage_root(), exist_ok=True)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Gestión Documental"}
