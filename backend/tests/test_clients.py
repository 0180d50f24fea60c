"""Acceso a la jerarquía Cliente → Sociedad → Gestión según rol."""


def test_staff_creates_client_entity_and_movement(client, seed_users, auth_headers):
    headers = auth_headers("abogado@rc.cl")
    resp = client.post("/api/clients", json={"name": "Constructora Andes", "rut": "77.000.000-1"}, headers=headers)
    assert resp.status_code == 200
    client_id = resp.json()["client_id"]

    resp = client.post(
        f"/api/clients/{client_id}/entities",
        json={"name": "Constructora Andes Ltda", "entity_type": "ltda"},
        headers=headers,
    )
    assert resp.status_code == 200
    entity_id = resp.json()["entity_id"]

    resp = client.post(
        f"/api/entities/{entity_id}/movements",
        json={"title": "Modificación de estatutos", "movement_date": "2026-03-01"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "pending"

    listed = client.get(f"/api/entities/{entity_id}/movements", headers=headers)
    assert [m["title"] for m in listed.json()] == ["Modificación de estatutos"]


def test_cliente_cannot_create_client(client, seed_users, auth_headers):
    resp = client.post("/api/clients", json={"name": "X"}, headers=auth_headers("cliente@empresa.cl"))
    assert resp.status_code == 403


def test_cliente_only_sees_granted_clients(client, seed_client, auth_headers):
    own = client.get("/api/clients", headers=auth_headers("cliente@empresa.cl"))
    assert [c["client_id"] for c in own.json()] == [seed_client.client_id]

    other = client.get("/api/clients", headers=auth_headers("otro@empresa.cl"))
    assert other.json() == []

    resp = client.get(f"/api/clients/{seed_client.client_id}/entities", headers=auth_headers("otro@empresa.cl"))
    assert resp.status_code == 403


def test_unknown_client_returns_404(client, seed_users, auth_headers):
    resp = client.get("/api/clients/999/entities", headers=auth_headers("admin@rc.cl"))
    assert resp.status_code == 404
