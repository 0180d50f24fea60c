import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.config import settings
from app.database import Base, enable_sqlite_foreign_keys, get_db, get_session_factory
from app.main import app
from app.models.client import Client, Entity
from app.models.user import ClientUser, User
from app.services import document_service
from app.utils.feature_flags import FeatureFlags

TEST_DB_URL = "sqlite:///./test_gestion.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
enable_sqlite_foreign_keys(engine)
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_session_factory] = lambda: TestingSession


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def isolated_app_state(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "OCR_REPROCESS_DELAY_SECONDS", 0.0)
    app.state.feature_flags = FeatureFlags(settings.feature_flag_defaults())
    yield


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "admin": User(email="admin@rc.cl", full_name="Admin", role="admin"),
        "lawyer": User(email="abogado@rc.cl", full_name="Abogado", role="rc_abogados"),
        "cliente": User(email="cliente@empresa.cl", full_name="Cliente", role="cliente"),
        "outsider": User(email="otro@empresa.cl", full_name="Otro Cliente", role="cliente"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_client(db, seed_users):
    c = Client(name="Inversiones del Sur", rut="76.123.456-7", created_by=seed_users["admin"].user_id)
    db.add(c)
    db.commit()
    db.refresh(c)
    db.add(ClientUser(client_id=c.client_id, user_id=seed_users["cliente"].user_id, granted_by=seed_users["admin"].user_id))
    db.commit()
    return c


@pytest.fixture
def seed_entity(db, seed_client):
    entity = Entity(client_id=seed_client.client_id, name="Inversiones del Sur SpA", entity_type="spa")
    db.add(entity)
    db.commit()
    db.refresh(entity)
    return entity


def store_file(name: str, content: bytes, mime_type: str = "text/plain") -> dict:
    folder = settings.storage_root() / "seed"
    folder.mkdir(parents=True, exist_ok=True)
    (folder / name).write_bytes(content)
    return {"filename": name, "path": f"seed/{name}", "size": len(content), "mime_type": mime_type}


@pytest.fixture
def stored_file():
    return store_file


@pytest.fixture
def seed_document(db, seed_users, seed_entity):
    upload = store_file("estatutos.txt", b"Estatutos v1")
    return document_service.create_document(
        db,
        entity=seed_entity,
        upload=upload,
        current_user=seed_users["lawyer"],
        content_text="Estatutos de la sociedad. Capital inicial: 1000.",
    )


def get_token(client, email: str) -> str:
    resp = client.post("/api/auth/login", json={"email": email})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


@pytest.fixture
def auth_headers(client):
    def _headers(email: str) -> dict:
        return {"Authorization": f"Bearer {get_token(client, email)}"}
    return _headers
