"""Reglas de acceso por rol y por cliente asignado."""

import pytest
from fastapi import HTTPException

from app.utils import permissions


def test_staff_sees_every_client(db, seed_users, seed_client):
    assert permissions.can_view_client(db, seed_client.client_id, seed_users["admin"])
    assert permissions.can_view_client(db, seed_client.client_id, seed_users["lawyer"])


def test_cliente_sees_only_granted_clients(db, seed_users, seed_client):
    assert permissions.accessible_client_ids(db, seed_users["cliente"]) == {seed_client.client_id}
    assert permissions.can_view_client(db, seed_client.client_id, seed_users["cliente"])
    assert not permissions.can_view_client(db, seed_client.client_id, seed_users["outsider"])


def test_document_access_follows_client(db, seed_users, seed_document):
    doc = permissions.get_accessible_document(db, seed_document.doc_id, seed_users["cliente"])
    assert doc.doc_id == seed_document.doc_id

    with pytest.raises(HTTPException) as exc:
        permissions.get_accessible_document(db, seed_document.doc_id, seed_users["outsider"])
    assert exc.value.status_code == 403

    with pytest.raises(HTTPException) as exc:
        permissions.get_accessible_document(db, 9999, seed_users["admin"])
    assert exc.value.status_code == 404


def test_ensure_staff(seed_users):
    permissions.ensure_staff(seed_users["lawyer"])
    with pytest.raises(HTTPException) as exc:
        permissions.ensure_staff(seed_users["cliente"])
    assert exc.value.status_code == 403
