from datetime import date

import pytest
from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.main import app
from app.models.workflow import WorkflowState, WorkflowTransition
from app.services import workflow_service
from app.services.workflow_service import ACTION_TARGETS, STATES, TRANSITIONS


def _force_state(db, doc_id, state_name):
    state = workflow_service.get_or_create_state(db, doc_id)
    state.current_state = state_name
    db.commit()
    return state


def _transition_count(db, doc_id):
    return db.query(WorkflowTransition).filter(WorkflowTransition.doc_id == doc_id).count()


def test_new_document_starts_in_draft(db, seed_document):
    overview = workflow_service.workflow_overview(db, seed_document.doc_id)
    assert overview["state"].current_state == "draft"
    assert overview["state_label"] == "Borrador"
    assert overview["available_actions"] == [
        {"action": "submit", "next_state": "in_review", "next_state_label": "En Revisión"}
    ]
    assert overview["transitions"] == []


@pytest.mark.parametrize(
    "from_state,action,to_state",
    [(src, action, dst) for src, actions in TRANSITIONS.items() for action, dst in actions.items()],
)
def test_every_legal_transition_records_one_row(db, seed_users, seed_document, from_state, action, to_state):
    _force_state(db, seed_document.doc_id, from_state)
    result = workflow_service.transition_workflow_state(
        db,
        doc_id=seed_document.doc_id,
        to_state=to_state,
        transition_type=action,
        user_id=seed_users["lawyer"].user_id,
        comment="motivo",
    )
    assert result.success is True
    state = db.query(WorkflowState).filter(WorkflowState.doc_id == seed_document.doc_id).one()
    assert state.current_state == to_state
    assert state.previous_state == from_state
    rows = db.query(WorkflowTransition).filter(WorkflowTransition.doc_id == seed_document.doc_id).all()
    assert len(rows) == 1
    assert (rows[0].from_state, rows[0].to_state, rows[0].transition_type) == (from_state, to_state, action)


@pytest.mark.parametrize(
    "from_state,to_state",
    [
        (src, dst)
        for src in STATES
        for dst in STATES
        if dst not in TRANSITIONS[src].values()
    ],
)
def test_illegal_transition_changes_nothing(db, seed_users, seed_document, from_state, to_state):
    _force_state(db, seed_document.doc_id, from_state)
    result = workflow_service.transition_workflow_state(
        db,
        doc_id=seed_document.doc_id,
        to_state=to_state,
        transition_type="approve",
        user_id=seed_users["lawyer"].user_id,
        comment="motivo",
    )
    assert result.success is False
    assert result.error_message
    db.expire_all()
    state = db.query(WorkflowState).filter(WorkflowState.doc_id == seed_document.doc_id).one()
    assert state.current_state == from_state
    assert _transition_count(db, seed_document.doc_id) == 0


@pytest.mark.parametrize(
    "from_state,action",
    [(src, action) for src in STATES for action in ACTION_TARGETS if action not in TRANSITIONS[src]],
)
def test_action_not_offered_from_state_is_rejected(db, seed_users, seed_document, from_state, action):
    _force_state(db, seed_document.doc_id, from_state)
    with pytest.raises(HTTPException) as exc:
        workflow_service.transition(db, seed_document.doc_id, action, seed_users["lawyer"], comment="motivo")
    assert exc.value.status_code == 400
    db.expire_all()
    state = db.query(WorkflowState).filter(WorkflowState.doc_id == seed_document.doc_id).one()
    assert state.current_state == from_state
    assert _transition_count(db, seed_document.doc_id) == 0


def test_archived_offers_no_actions():
    assert workflow_service.available_actions("archived") == []
    assert TRANSITIONS["archived"] == {}


def test_unknown_target_state(db, seed_users, seed_document):
    result = workflow_service.transition_workflow_state(
        db,
        doc_id=seed_document.doc_id,
        to_state="deleted",
        transition_type="submit",
        user_id=seed_users["lawyer"].user_id,
    )
    assert result.success is False
    assert "deleted" in result.error_message


@pytest.mark.parametrize("comment", [None, "", "   "])
def test_reject_without_comment_never_reaches_database(db, seed_users, seed_document, monkeypatch, comment):
    _force_state(db, seed_document.doc_id, "in_review")

    def fail(*args, **kwargs):
        raise AssertionError("no debe llamarse")

    monkeypatch.setattr(workflow_service, "transition_workflow_state", fail)
    with pytest.raises(HTTPException) as exc:
        workflow_service.transition(db, seed_document.doc_id, "reject", seed_users["lawyer"], comment=comment)
    assert exc.value.status_code == 400
    assert _transition_count(db, seed_document.doc_id) == 0


def test_comment_is_also_enforced_server_side(db, seed_users, seed_document):
    _force_state(db, seed_document.doc_id, "rejected")
    result = workflow_service.transition_workflow_state(
        db,
        doc_id=seed_document.doc_id,
        to_state="draft",
        transition_type="revise",
        user_id=seed_users["lawyer"].user_id,
        comment="  ",
    )
    assert result.success is False
    assert _transition_count(db, seed_document.doc_id) == 0


def test_unknown_action_is_rejected(db, seed_users, seed_document):
    with pytest.raises(HTTPException) as exc:
        workflow_service.transition(db, seed_document.doc_id, "delete", seed_users["lawyer"])
    assert exc.value.status_code == 400


def test_full_lifecycle(db, seed_users, seed_document):
    doc_id = seed_document.doc_id
    lawyer = seed_users["lawyer"]
    steps = [
        ("submit", None, "in_review"),
        ("reject", "Falta la firma del representante", "rejected"),
        ("revise", "Se agrega la firma", "draft"),
        ("submit", None, "in_review"),
        ("approve", None, "approved"),
        ("publish", None, "published"),
        ("archive", None, "archived"),
    ]
    for action, comment, expected in steps:
        state = workflow_service.transition(db, doc_id, action, lawyer, comment=comment)
        assert state.current_state == expected

    overview = workflow_service.workflow_overview(db, doc_id)
    assert overview["state"].current_state == "archived"
    assert overview["available_actions"] == []
    history = overview["transitions"]
    assert [row["transition_type"] for row in history] == [step[0] for step in steps]
    assert history[1]["comment"] == "Falta la firma del representante"
    assert history[0]["hours_since_last_transition"] is None
    assert all(row["transitioned_by_email"] == "abogado@rc.cl" for row in history)


def test_stale_state_yields_conflict(db, seed_users, seed_document):
    doc_id = seed_document.doc_id
    stale = workflow_service.get_or_create_state(db, doc_id)
    assert stale.current_state == "draft"

    other = Session(bind=db.get_bind())
    try:
        workflow_service.transition(other, doc_id, "submit", seed_users["admin"])
    finally:
        other.close()

    # la sesión original todavía ve "draft" en su mapa de identidad
    result = workflow_service.transition_workflow_state(
        db,
        doc_id=doc_id,
        to_state="in_review",
        transition_type="submit",
        user_id=seed_users["lawyer"].user_id,
    )
    assert result.success is False
    assert result.conflict is True
    assert _transition_count(db, doc_id) == 1


def test_assignment_is_stored_only_when_leaving_draft(db, seed_users, seed_document):
    doc_id = seed_document.doc_id
    lawyer = seed_users["lawyer"]
    state = workflow_service.transition(
        db, doc_id, "submit", lawyer, assigned_to=seed_users["admin"].user_id, due_date=date(2026, 3, 31)
    )
    assert state.assigned_to == seed_users["admin"].user_id
    assert state.due_date == date(2026, 3, 31)

    state = workflow_service.transition(
        db, doc_id, "approve", lawyer, assigned_to=seed_users["cliente"].user_id, due_date=date(2027, 1, 1)
    )
    assert state.assigned_to == seed_users["admin"].user_id
    assert state.due_date == date(2026, 3, 31)


def test_unknown_assignee_is_rejected(db, seed_users, seed_document):
    with pytest.raises(HTTPException) as exc:
        workflow_service.transition(db, seed_document.doc_id, "submit", seed_users["lawyer"], assigned_to=9999)
    assert exc.value.status_code == 400
    assert _transition_count(db, seed_document.doc_id) == 0


def test_workflow_api(client, seed_document, auth_headers):
    headers = auth_headers("abogado@rc.cl")
    base = f"/api/documents/{seed_document.doc_id}/workflow"

    resp = client.get(base, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["state"]["current_state"] == "draft"

    resp = client.post(f"{base}/transition", json={"action": "submit"}, headers=headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["state"]["current_state"] == "in_review"
    assert body["state_label"] == "En Revisión"
    assert {a["action"] for a in body["available_actions"]} == {"approve", "reject"}

    resp = client.post(f"{base}/transition", json={"action": "reject", "comment": ""}, headers=headers)
    assert resp.status_code == 400

    resp = client.post(f"{base}/transition", json={"action": "publish"}, headers=headers)
    assert resp.status_code == 400


def test_workflow_api_hidden_when_flag_disabled(client, seed_document, auth_headers):
    headers = auth_headers("abogado@rc.cl")
    app.state.feature_flags.disable("enable_workflow_system")
    resp = client.get(f"/api/documents/{seed_document.doc_id}/workflow", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Funcionalidad deshabilitada."


def test_outsider_cannot_see_workflow(client, seed_document, auth_headers):
    resp = client.get(
        f"/api/documents/{seed_document.doc_id}/workflow",
        headers=auth_headers("otro@empresa.cl"),
    )
    assert resp.status_code == 403
