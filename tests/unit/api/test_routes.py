"""
Tests for session, conversation, Socratic and diary endpoints.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from socrate.api.app import create_app


@pytest.fixture
def client(mock_gateway):
    """Test client whose controllers talk to the mock gateway."""
    app = create_app(gateway=mock_gateway, vendor_proxy=AsyncMock())
    with TestClient(app) as tc:
        yield tc


@pytest.fixture
def session_id(client):
    response = client.post("/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]


def test_new_session_is_empty(client, session_id):
    data = client.get(f"/sessions/{session_id}").json()

    assert data["conversation"] == []
    assert data["problems"] == []
    assert data["socratic"] == []
    assert data["insights"] == []
    assert data["active_view"] == "find"
    assert data["awaiting_insight"] is False


def test_unknown_session_404(client):
    response = client.get("/sessions/0123456789abcdef0123456789abcdef")

    assert response.status_code == 404


def test_submit_creates_problem(client, session_id, mock_gateway):
    mock_gateway.set_response({
        "response": "...",
        "identified_problems": ["Fear of failure"],
        "needs_more_exploration": True,
    })

    response = client.post(f"/sessions/{session_id}/conversation", json={"text": "I keep procrastinating"})

    assert response.status_code == 200
    data = response.json()
    assert [t["role"] for t in data["conversation"]] == ["user", "assistant"]
    assert [p["text"] for p in data["problems"]] == ["Fear of failure"]
    assert data["problems"][0]["status"] == "pending"
    assert data["conversation_busy"] is False


def test_blank_submit_changes_nothing(client, session_id, mock_gateway):
    data = client.post(f"/sessions/{session_id}/conversation", json={"text": "   "}).json()

    assert data["conversation"] == []
    mock_gateway.generate.assert_not_called()


def test_edit_and_delete_problem(client, session_id, mock_gateway):
    mock_gateway.set_response({"response": "ok", "identified_problems": ["Old"]})
    problem_id = client.post(
        f"/sessions/{session_id}/conversation", json={"text": "hi"}
    ).json()["problems"][0]["id"]

    edited = client.put(f"/sessions/{session_id}/problems/{problem_id}", json={"text": "New"}).json()
    assert edited["problems"][0]["text"] == "New"

    deleted = client.delete(f"/sessions/{session_id}/problems/{problem_id}").json()
    assert deleted["problems"] == []

    missing = client.delete(f"/sessions/{session_id}/problems/{problem_id}")
    assert missing.status_code == 404


def test_socratic_flow_to_insight(client, session_id, mock_gateway):
    mock_gateway.set_response({"response": "ok", "identified_problems": ["Fear of failure"]})
    problem_id = client.post(
        f"/sessions/{session_id}/conversation", json={"text": "hi"}
    ).json()["problems"][0]["id"]

    selected = client.post(f"/sessions/{session_id}/socratic/select", json={"problem_id": problem_id}).json()
    assert selected["active_view"] == "socratic"
    assert len(selected["socratic"]) == 1
    assert "Fear of failure" in selected["socratic"][0]["text"]

    mock_gateway.set_response({
        "response": "Write down your awareness.",
        "dialogue_depth": 5,
        "core_insight_reached": True,
        "ask_for_insight": True,
    })
    answered = client.post(f"/sessions/{session_id}/socratic", json={"text": "Because..."}).json()
    assert answered["awaiting_insight"] is True

    gated = client.post(f"/sessions/{session_id}/socratic", json={"text": "more"})
    assert gated.status_code == 409

    saved = client.post(f"/sessions/{session_id}/socratic/insight", json={"text": "I am enough"}).json()
    assert saved["awaiting_insight"] is False
    assert saved["insights"][0]["text"] == "I am enough"
    assert saved["insights"][0]["problem_id"] == problem_id
    assert saved["socratic"][-1]["dialogue_depth"] == 6


def test_abandon_insight(client, session_id, mock_gateway):
    mock_gateway.set_response({"response": "ok", "identified_problems": ["X"]})
    problem_id = client.post(
        f"/sessions/{session_id}/conversation", json={"text": "hi"}
    ).json()["problems"][0]["id"]
    client.post(f"/sessions/{session_id}/socratic/select", json={"problem_id": problem_id})
    mock_gateway.set_response({"response": "Write it.", "dialogue_depth": 5, "ask_for_insight": True})
    client.post(f"/sessions/{session_id}/socratic", json={"text": "answer"})

    data = client.delete(f"/sessions/{session_id}/socratic/insight").json()

    assert data["awaiting_insight"] is False
    assert data["insights"] == []


def test_select_unknown_problem_404(client, session_id):
    response = client.post(f"/sessions/{session_id}/socratic/select", json={"problem_id": 42})

    assert response.status_code == 404


def test_diary_export_plain_text(client, session_id, mock_gateway):
    mock_gateway.set_response({"response": "ok", "identified_problems": ["Fear of failure"]})
    client.post(f"/sessions/{session_id}/conversation", json={"text": "hi"})

    response = client.get(f"/sessions/{session_id}/diary")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "1. Fear of failure" in response.text
    assert client.get(f"/sessions/{session_id}").json()["active_view"] == "diary"


def test_delete_session(client, session_id):
    assert client.delete(f"/sessions/{session_id}").status_code == 204
    assert client.get(f"/sessions/{session_id}").status_code == 404
