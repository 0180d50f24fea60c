def test_login_success(client, seed_users):
    resp = client.post("/api/auth/login", json={"email": "admin@rc.cl"})
    assert resp.status_code == 200
    data = resp.json()
    assert "access_token" in data
    assert data["user"]["role"] == "admin"


def test_login_is_case_insensitive(client, seed_users):
    resp = client.post("/api/auth/login", json={"email": "  ADMIN@rc.cl "})
    assert resp.status_code == 200


def test_login_unknown_email(client, seed_users):
    resp = client.post("/api/auth/login", json={"email": "nadie@rc.cl"})
    assert resp.status_code == 401


def test_login_inactive_user(client, db, seed_users):
    seed_users["outsider"].is_active = False
    db.commit()
    resp = client.post("/api/auth/login", json={"email": "otro@empresa.cl"})
    assert resp.status_code == 401


def test_me_authenticated(client, seed_users, auth_headers):
    resp = client.get("/api/auth/me", headers=auth_headers("abogado@rc.cl"))
    assert resp.status_code == 200
    assert resp.json()["email"] == "abogado@rc.cl"


def test_me_unauthenticated(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code in (401, 403)  # HTTPBearer responde 401 o 403 según la versión


def test_me_invalid_token(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
