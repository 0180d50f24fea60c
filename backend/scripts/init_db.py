"""Inicializa la base de datos creando todas las tablas."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import engine, Base
import app.models  # noqa: F401 - registra todos los modelos


def init_db():
    print("Creando tablas...")
    Base.metadata.create_all(bind=engine)
    print("Base de datos inicializada.")


if __name__ == "__main__":
    init_db()
