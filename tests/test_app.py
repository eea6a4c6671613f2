"""Tests for the HTTP entry point."""

from __future__ import annotations

from typing import Sequence

import pytest
from fastapi.testclient import TestClient

from app.main import app
from responder.core.memory import ConversationTurn, SessionHistoryStore
from responder.core.reply import TOGGLE_AI_COMMAND
from responder.pipeline import ResponsePipeline


class _CannedClient:
    def __init__(self, output: str) -> None:
        self.output = output

    async def complete(self, user_message: str, history: Sequence[ConversationTurn] = ()) -> str:
        return self.output


@pytest.fixture
def client_for(monkeypatch):
    def _make(output: str) -> TestClient:
        pipeline = ResponsePipeline(SessionHistoryStore(max_turns=4), _CannedClient(output))
        monkeypatch.setattr(app.state, "pipeline", pipeline)
        return TestClient(app)

    return _make


def test_health() -> None:
    resp = TestClient(app).get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_reply_endpoint_returns_structured_reply(client_for) -> None:
    client = client_for('{"response": "Getting those horses ready for you", "command": "!img horse"}')

    resp = client.post("/ai/reply", json={"user_id": "201000000000@c.us", "message": "horse pic"})

    assert resp.status_code == 200
    assert resp.json() == {
        "response": "Getting those horses ready for you",
        "command": "!img horse",
        "terminate": False,
    }


def test_reply_endpoint_degrades_on_bad_output(client_for) -> None:
    client = client_for("not json at all")

    resp = client.post("/ai/reply", json={"user_id": "u1", "message": "hi"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["command"] == TOGGLE_AI_COMMAND
    assert body["terminate"] is True


def test_reply_endpoint_requires_user_id(client_for) -> None:
    client = client_for("{}")

    resp = client.post("/ai/reply", json={"message": "hi"})

    assert resp.status_code == 422


def test_health_reports_session_count(client_for) -> None:
    client = client_for('{"response": "hey"}')
    assert client.get("/health").json()["sessions"] == 0

    client.post("/ai/reply", json={"user_id": "u1", "message": "hi"})
    client.post("/ai/reply", json={"user_id": "u2", "message": "yo"})
    client.post("/ai/reply", json={"user_id": "u1", "message": "again"})

    assert client.get("/health").json()["sessions"] == 2
