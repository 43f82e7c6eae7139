from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi.testclient import TestClient

from src.api.main import create_app
from src.llm.prompts import GREETING_MESSAGE
from src.memory.store import SessionStore
from src.models.turn import StructuredTurn
from src.services.form_service import FormAssistantService

SCHEMA = {"name": "string"}


class _DummyGateway:
    def __init__(self, healthy: bool | Exception = True) -> None:
        self.healthy = healthy

    def create_conversation(self, schema: Any) -> object:
        return object()

    def initial_message(self) -> StructuredTurn:
        return StructuredTurn(ai_message=GREETING_MESSAGE, form_data=[])

    async def turn(self, conversation: Any, message: str) -> Any:
        raise AssertionError("not used")

    async def health_check(self) -> bool:
        if isinstance(self.healthy, Exception):
            raise self.healthy
        return self.healthy


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


class HttpRoutesTest(unittest.TestCase):
    def _client(self, gateway: _DummyGateway | None = None, clock: _Clock | None = None) -> TestClient:
        gateway = gateway or _DummyGateway()
        self.service = FormAssistantService(gateway, store=SessionStore(gateway, clock=clock))
        return TestClient(create_app(service=self.service))

    def test_health(self) -> None:
        with self._client() as client:
            self.service.create_session(SCHEMA)
            response = client.get("/health")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "OK")
        self.assertEqual(body["message"], "WebSocket server is running")
        self.assertEqual(body["sessions"], 1)
        self.assertIn("timestamp", body)
        self.assertIn("X-Response-Time", response.headers)

    def test_socket_status(self) -> None:
        with self._client() as client:
            response = client.get("/api/socket/status")

        self.assertEqual(
            response.json(),
            {"message": "WebSocket server is running", "status": "ready", "activeSessions": 0},
        )

    def test_ai_health_ok_and_error(self) -> None:
        with self._client(_DummyGateway(healthy=True)) as client:
            body = client.get("/api/health/ai").json()
        self.assertEqual(body["status"], "OK")
        self.assertEqual(body["service"], "AI Service")
        self.assertNotIn("error", body)

        with self._client(_DummyGateway(healthy=False)) as client:
            response = client.get("/api/health/ai")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ERROR")

    def test_ai_health_exception(self) -> None:
        with self._client(_DummyGateway(healthy=RuntimeError("probe exploded"))) as client:
            response = client.get("/api/health/ai")

        self.assertEqual(response.status_code, 500)
        body = response.json()
        self.assertEqual(body["status"], "ERROR")
        self.assertEqual(body["error"], "probe exploded")

    def test_session_inspection(self) -> None:
        with self._client() as client:
            session_id = self.service.create_session(SCHEMA)["sessionId"]

            listing = client.get("/api/sessions").json()
            self.assertEqual(listing, {"sessions": [session_id], "total": 1})

            info = client.get(f"/api/sessions/{session_id}").json()
            self.assertEqual(info["session_id"], session_id)
            self.assertEqual(info["schema"], SCHEMA)
            self.assertEqual(info["form_data"], {})

            missing = client.get("/api/sessions/unknown")
            self.assertEqual(missing.status_code, 404)
            self.assertEqual(missing.json()["error"], "session_not_found")

    def test_delete_session(self) -> None:
        with self._client() as client:
            session_id = self.service.create_session(SCHEMA)["sessionId"]

            first = client.delete(f"/api/sessions/{session_id}").json()
            second = client.delete(f"/api/sessions/{session_id}").json()

        self.assertTrue(first["deleted"])
        self.assertFalse(second["deleted"])

    def test_cleanup(self) -> None:
        clock = _Clock()
        with self._client(clock=clock) as client:
            self.service.create_session(SCHEMA)
            clock.now += timedelta(minutes=80)
            self.service.create_session(SCHEMA)
            clock.now += timedelta(minutes=10)

            body = client.post("/api/sessions/cleanup", params={"max_age_minutes": 60}).json()
            self.assertEqual(body, {"removed": 1, "remaining": 1, "max_age_minutes": 60.0})

            default_body = client.post("/api/sessions/cleanup").json()
            self.assertEqual(default_body["max_age_minutes"], 60.0)
            self.assertEqual(default_body["removed"], 0)

    def test_unhandled_error_uses_error_body(self) -> None:
        gateway = _DummyGateway()
        service = FormAssistantService(gateway)
        app = create_app(service=service)

        def _broken_count() -> int:
            raise RuntimeError("store exploded")

        service.session_count = _broken_count
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/socket/status")

        self.assertEqual(response.status_code, 500)
        body = response.json()
        self.assertEqual(body["error"], "internal_error")
        self.assertEqual(body["message"], "An unexpected error occurred")
        self.assertIsNone(body["details"])
        self.assertIn("timestamp", body)
        self.assertNotIn("store exploded", response.text)


if __name__ == "__main__":
    unittest.main()
