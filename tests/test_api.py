"""HTTP API tests using FastAPI's TestClient."""

from __future__ import annotations

from collections.abc import Iterator
from time import sleep

from fastapi.testclient import TestClient
import pytest

from elvia.api.app import create_app
from elvia.runtime import Runtime, build_runtime
from elvia.settings import AppSettings


@pytest.fixture
def runtime() -> Runtime:
    settings = AppSettings(scheduler_enabled=False, notifier="immediate", check_on_start=False)
    return build_runtime(settings)


@pytest.fixture
def client(runtime: Runtime) -> Iterator[TestClient]:
    app = create_app(runtime=runtime, setup_observability=False)
    with TestClient(app) as test_client:
        yield test_client


def test_root_and_health(client: TestClient) -> None:
    root = client.get("/", headers={"x-request-id": "req-123"})
    assert root.status_code == 200
    assert root.headers["x-request-id"] == "req-123"
    assert root.json()["request_id"] == "req-123"

    assert client.get("/healthz").json() == {"status": "ok"}
    health = client.get("/api/health").json()
    assert health["status"] == "healthy"
    assert health["service"] == "elvia-graduation-engagement"


def test_start_conversation_flow(client: TestClient) -> None:
    started = client.post("/api/start-conversation", json={"student_id": 1})
    assert started.status_code == 200
    body = started.json()
    assert body["student"]["name"] == "Ana"
    assert body["conversation"]["state"] == "asking_employment_type"

    duplicate = client.post("/api/start-conversation", json={"studentId": 1})
    assert duplicate.status_code == 409
    assert duplicate.json()["conversation"]["id"] == body["conversation"]["id"]

    reply = client.post("/api/whatsapp-webhook", json={"student_id": 1, "message": "1"})
    assert reply.status_code == 200
    assert reply.json()["conversation_state"] == "asking_work_model"

    reply = client.post("/api/whatsapp-webhook", json={"student_id": 1, "message": "remoto"})
    assert reply.json()["conversation_state"] == "completed"

    detail = client.get("/api/conversations/1").json()["conversation"]
    assert detail["preferences"] == {"employment_type": "full-time", "work_model": "remote"}
    assert detail["student"]["phone"] == "+14155552671"

    completed = client.get("/api/events", params={"event_type": "conversation.completed"}).json()
    assert completed["count"] == 1
    assert [job["id"] for job in completed["events"][0]["matched_jobs"]] == [101]


def test_start_conversation_errors(client: TestClient) -> None:
    assert client.post("/api/start-conversation", json={}).status_code == 400
    missing = client.post("/api/start-conversation", json={"student_id": 999})
    assert missing.status_code == 404
    assert missing.json()["error"] == "Student not found"


def test_webhook_errors(client: TestClient) -> None:
    assert client.post("/api/whatsapp-webhook", json={"student_id": 1}).status_code == 400
    assert (
        client.post("/api/whatsapp-webhook", json={"student_id": 999, "message": "hola"}).status_code
        == 404
    )
    no_conversation = client.post("/api/whatsapp-webhook", json={"student_id": 2, "message": "1"})
    assert no_conversation.status_code == 404
    assert no_conversation.json()["error"] == "No active conversation"
    assert client.get("/api/whatsapp-webhook").status_code == 200


def test_list_and_delete_conversations(client: TestClient) -> None:
    client.post("/api/start-conversation", json={"student_id": 1})
    client.post("/api/start-conversation", json={"student_id": 2})

    listing = client.get("/api/conversations").json()
    assert listing["count"] == 2

    assert client.delete("/api/conversations/1").status_code == 200
    assert client.delete("/api/conversations/1").status_code == 404
    assert client.get("/api/conversations/1").status_code == 404
    assert client.get("/api/conversations").json()["count"] == 1


def test_catalog_and_status(client: TestClient) -> None:
    assert client.get("/api/students").json()["count"] == 2
    assert [job["id"] for job in client.get("/api/jobs").json()["jobs"]] == [101, 102, 103, 104]

    status = client.get("/api/status").json()
    assert status["status"] == "operational"
    assert status["components"]["graduation_scheduler"]["is_running"] is False
    assert status["data"] == {"total_students": 2, "total_jobs": 4}


def test_trigger_graduation_starts_conversations(client: TestClient, runtime: Runtime) -> None:
    response = client.post("/api/trigger-graduation", json={"date": "2025-07-20"})
    assert response.status_code == 200
    assert response.json()["count"] == 2

    for _ in range(50):
        if len(runtime.engine.list_conversations()) == 2:
            break
        sleep(0.05)
    assert {c.student_id for c in runtime.engine.list_conversations()} == {1, 2}


def test_trigger_graduation_rejects_bad_date(client: TestClient) -> None:
    response = client.post("/api/trigger-graduation", json={"date": "July 20th"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid date"


def test_trigger_graduation_without_body_uses_today(client: TestClient) -> None:
    response = client.post("/api/trigger-graduation")
    assert response.status_code == 200
    assert response.json()["date"] == "today"


def test_events_filters(client: TestClient) -> None:
    client.post("/api/start-conversation", json={"student_id": 1})
    client.post("/api/start-conversation", json={"student_id": 2})

    events = client.get("/api/events", params={"student_id": 2}).json()
    assert events["count"] == 2
    assert {e["student_id"] for e in events["events"]} == {2}
    assert client.get("/api/events", params={"event_type": "nope"}).status_code == 400
    assert client.get("/api/events", params={"limit": 1}).json()["count"] == 1


def test_metrics_endpoint(client: TestClient) -> None:
    client.post("/api/start-conversation", json={"student_id": 1})
    text = client.get("/metrics").text
    assert "elvia_conversations_started_total" in text
