from __future__ import annotations

import asyncio
from datetime import datetime

from fastapi.testclient import TestClient

from core.models import RawMessage
from web import TaskRunner, create_app


class RecordingHandler:
    def __init__(self, error: Exception | None = None) -> None:
        self.messages: list[RawMessage] = []
        self.error = error

    async def __call__(self, message: RawMessage) -> None:
        self.messages.append(message)
        if self.error is not None:
            raise self.error


def test_text_message_is_dispatched_and_acknowledged() -> None:
    handler = RecordingHandler()
    with TestClient(create_app(handler)) as client:
        response = client.post("/webhook", json={"update_id": 1, "message": {"chat": {"id": 9}, "text": "claim"}})
        assert response.status_code == 200
        assert response.json() == {"ok": True}

    assert handler.messages == [RawMessage(chat_id=9, text="claim")]


def test_invalid_json_is_acknowledged_and_dropped() -> None:
    handler = RecordingHandler()
    with TestClient(create_app(handler)) as client:
        response = client.post("/webhook", content=b"{not json", headers={"Content-Type": "application/json"})
        empty = client.post("/webhook", content=b"")
        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert empty.json() == {"ok": True}

    assert handler.messages == []


def test_message_without_text_is_acknowledged_and_dropped() -> None:
    handler = RecordingHandler()
    with TestClient(create_app(handler)) as client:
        response = client.post("/webhook", json={"message": {"chat": {"id": 1}, "photo": []}})
        assert response.json() == {"ok": True}

    assert handler.messages == []


def test_handler_failure_does_not_affect_response() -> None:
    handler = RecordingHandler(error=RuntimeError("boom"))
    with TestClient(create_app(handler)) as client:
        response = client.post("/webhook", json={"message": {"chat": {"id": 1}, "text": "x"}})
        assert response.status_code == 200
        assert response.json() == {"ok": True}

    assert len(handler.messages) == 1


def test_health_endpoints() -> None:
    with TestClient(create_app(RecordingHandler(), webhook_path="/hook")) as client:
        for path in ("/hook", "/health"):
            body = client.get(path).json()
            assert body["status"] == "ok"
            assert body["message"] == "Webhook endpoint is ready"
            datetime.fromisoformat(body["timestamp"])


def test_shutdown_hook_runs_after_drain() -> None:
    events = []

    async def on_shutdown() -> None:
        events.append("closed")

    with TestClient(create_app(RecordingHandler(), on_shutdown=on_shutdown)):
        pass

    assert events == ["closed"]


def test_task_runner_logs_failures_and_forgets_finished_tasks(caplog) -> None:
    async def fail() -> None:
        raise ValueError("bad")

    async def scenario() -> int:
        runner = TaskRunner()
        runner.spawn(fail(), name="failing")
        await runner.drain()
        # Done callbacks run on the next loop iteration.
        await asyncio.sleep(0)
        return runner.pending

    assert asyncio.run(scenario()) == 0
    assert "Background task failing failed" in caplog.text
