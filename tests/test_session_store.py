from __future__ import annotations

import asyncio
import unittest
from datetime import datetime, timedelta, timezone
from typing import Any

from src.core.exceptions import GatewayQuotaExceededError, InvalidSchemaError, SessionNotFoundError
from src.memory.store import SessionStore
from src.models.turn import FieldUpdate, PlainText, StructuredTurn

SCHEMA = {"name": "string", "email": "email"}


class _DummyGateway:
    def __init__(self, replies: list[Any] | None = None) -> None:
        self.replies = list(replies or [])
        self.conversations: list[dict[str, Any]] = []
        self.messages: list[str] = []

    def create_conversation(self, schema: Any) -> dict[str, Any]:
        conversation = {"schema": dict(schema)}
        self.conversations.append(conversation)
        return conversation

    async def turn(self, conversation: Any, message: str) -> Any:
        self.messages.append(message)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class _DelayedGateway(_DummyGateway):
    """Replies to each message after a per-message delay."""

    def __init__(self, delays: dict[str, float]) -> None:
        super().__init__()
        self.delays = delays

    async def turn(self, conversation: Any, message: str) -> Any:
        self.messages.append(message)
        await asyncio.sleep(self.delays[message])
        return StructuredTurn(ai_message="ok", form_data=[FieldUpdate("city", message)])


def _extraction(*pairs: tuple[str, str]) -> StructuredTurn:
    return StructuredTurn(ai_message="noted", form_data=[FieldUpdate(k, v) for k, v in pairs])


class SessionLifecycleTest(unittest.TestCase):
    def test_create_has_count_and_delete(self) -> None:
        store = SessionStore(_DummyGateway())
        before = store.count()

        session_id = store.create(SCHEMA)

        self.assertTrue(store.has(session_id))
        self.assertEqual(store.count(), before + 1)
        self.assertEqual(store.list_ids(), [session_id])
        self.assertTrue(store.delete(session_id))
        self.assertFalse(store.delete(session_id))
        self.assertFalse(store.has(session_id))
        self.assertEqual(store.count(), before)

    def test_invalid_schema_creates_nothing(self) -> None:
        gateway = _DummyGateway()
        store = SessionStore(gateway)
        for schema in ({}, [], {"name": "blob"}, None):
            with self.subTest(schema=schema):
                with self.assertRaises(InvalidSchemaError):
                    store.create(schema)
        self.assertEqual(store.count(), 0)
        self.assertEqual(gateway.conversations, [])

    def test_each_session_gets_its_own_conversation(self) -> None:
        gateway = _DummyGateway()
        store = SessionStore(gateway)
        first = store.create(SCHEMA)
        second = store.create(SCHEMA)
        self.assertNotEqual(first, second)
        self.assertEqual(len(gateway.conversations), 2)
        self.assertIsNot(gateway.conversations[0], gateway.conversations[1])

    def test_info_returns_snapshot(self) -> None:
        store = SessionStore(_DummyGateway())
        session_id = store.create(SCHEMA)

        info = store.info(session_id)
        self.assertEqual(info["session_id"], session_id)
        self.assertEqual(info["schema"], SCHEMA)
        self.assertEqual(info["form_data"], {})

        info["form_data"]["name"] = "tampered"
        info["schema"]["extra"] = "string"
        fresh = store.info(session_id)
        self.assertEqual(fresh["form_data"], {})
        self.assertEqual(fresh["schema"], SCHEMA)

    def test_info_for_unknown_session(self) -> None:
        self.assertIsNone(SessionStore(_DummyGateway()).info("missing"))

    def test_schema_cannot_be_mutated_through_caller_reference(self) -> None:
        schema = dict(SCHEMA)
        store = SessionStore(_DummyGateway())
        session_id = store.create(schema)
        schema["phone"] = "phone"
        self.assertNotIn("phone", store.info(session_id)["schema"])


class SweepExpiredTest(unittest.TestCase):
    def test_removes_only_sessions_past_threshold(self) -> None:
        now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        current = [now - timedelta(minutes=90)]
        store = SessionStore(_DummyGateway(), clock=lambda: current[0])

        old = store.create(SCHEMA)
        current[0] = now - timedelta(minutes=10)
        recent = store.create(SCHEMA)
        current[0] = now

        self.assertEqual(store.sweep_expired(60), 1)
        self.assertFalse(store.has(old))
        self.assertTrue(store.has(recent))

    def test_nothing_to_sweep(self) -> None:
        store = SessionStore(_DummyGateway())
        store.create(SCHEMA)
        self.assertEqual(store.sweep_expired(60), 0)
        self.assertEqual(store.count(), 1)


class SendMessageTest(unittest.IsolatedAsyncioTestCase):
    async def test_accumulates_across_turns(self) -> None:
        gateway = _DummyGateway([
            _extraction(("name", "Ada")),
            _extraction(("email", "ada@example.com"), ("name", "Ada Lovelace")),
        ])
        store = SessionStore(gateway)
        session_id = store.create(SCHEMA)

        first = await store.send_message(session_id, "I'm Ada")
        self.assertEqual(first.form_data, {"name": "Ada"})

        second = await store.send_message(session_id, "ada@example.com, full name Ada Lovelace")
        self.assertEqual(second.ai_message, "noted")
        self.assertEqual(second.form_data, {"name": "Ada Lovelace", "email": "ada@example.com"})
        self.assertEqual(store.info(session_id)["form_data"], second.form_data)

    async def test_plain_text_passes_through(self) -> None:
        store = SessionStore(_DummyGateway([PlainText("hello there")]))
        session_id = store.create(SCHEMA)

        result = await store.send_message(session_id, "hi")

        self.assertEqual(result, PlainText("hello there"))
        self.assertEqual(store.info(session_id)["form_data"], {})

    async def test_unknown_session_raises_without_calling_gateway(self) -> None:
        gateway = _DummyGateway([_extraction(("name", "Ada"))])
        store = SessionStore(gateway)

        with self.assertRaises(SessionNotFoundError):
            await store.send_message("never-created", "hi")
        self.assertEqual(gateway.messages, [])

    async def test_deleted_session_raises(self) -> None:
        gateway = _DummyGateway([_extraction(("name", "Ada"))])
        store = SessionStore(gateway)
        session_id = store.create(SCHEMA)
        store.delete(session_id)

        with self.assertRaises(SessionNotFoundError):
            await store.send_message(session_id, "hi")
        self.assertEqual(gateway.messages, [])

    async def test_gateway_errors_propagate_and_leave_data_untouched(self) -> None:
        gateway = _DummyGateway([_extraction(("name", "Ada")), GatewayQuotaExceededError()])
        store = SessionStore(gateway)
        session_id = store.create(SCHEMA)
        await store.send_message(session_id, "I'm Ada")

        with self.assertRaises(GatewayQuotaExceededError):
            await store.send_message(session_id, "more")
        self.assertEqual(store.info(session_id)["form_data"], {"name": "Ada"})

    async def test_turns_for_one_session_merge_in_request_order(self) -> None:
        gateway = _DelayedGateway({"Paris": 0.05, "Lyon": 0.0})
        store = SessionStore(gateway)
        session_id = store.create(SCHEMA)

        await asyncio.gather(
            store.send_message(session_id, "Paris"),
            store.send_message(session_id, "Lyon"),
        )

        self.assertEqual(gateway.messages, ["Paris", "Lyon"])
        self.assertEqual(store.info(session_id)["form_data"], {"city": "Lyon"})


if __name__ == "__main__":
    unittest.main()
