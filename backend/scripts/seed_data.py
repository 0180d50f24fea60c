"""Carga datos de ejemplo en la base de datos."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date
from app.database import SessionLocal, engine, Base
import app.models  # noqa: F401

from app.models.user import User, ClientUser
from app.models.client import Client, Entity, Movement


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("La base de datos ya tiene datos. Se omite.")
            return

        users = [
            User(email="admin@rcabogados.cl", full_name="Administrador", role="admin"),
            User(email="abogado@rcabogados.cl", full_name="Abogada Soto", role="rc_abogados", department="Corporativo"),
            User(email="cliente@empresa.cl", full_name="Cliente Pérez", role="cliente"),
        ]
        db.add_all(users)
        db.flush()

        client = Client(name="Inversiones del Sur", rut="76.123.456-7", created_by=users[0].user_id)
        db.add(client)
        db.flush()
        db.add(ClientUser(client_id=client.client_id, user_id=users[2].user_id, granted_by=users[0].user_id))

        entity = Entity(client_id=client.client_id, name="Inversiones del Sur SpA", rut="76.123.456-7", entity_type="spa")
        db.add(entity)
        db.flush()

        db.add(Movement(
            entity_id=entity.entity_id,
            title="Junta ordinaria de accionistas",
            movement_type="junta",
            movement_date=date(2026, 4, 30),
            created_by=users[1].user_id,
        ))
        db.commit()
        print("Datos de ejemplo cargados.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
