"""
Session Store - lifecycle management for form sessions.

This module keeps every live form session in process memory:
- Create sessions (schema validated, conversation opened)
- Route messages through the gateway and the accumulator
- Delete, inspect and count sessions
- Sweep sessions older than a maximum age

Architecture note:
The store runs on a single asyncio event loop. No mutating method awaits
mid-mutation; the only suspension point is the gateway call inside
send_message, which is guarded by the session's own lock so that turns
for one session are merged in the order they were requested.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from src.core.exceptions import InvalidSchemaError, SessionNotFoundError
from src.core.logging_config import get_logger
from src.core.validators import validate_schema
from src.memory.accumulator import apply_turn
from src.memory.session import FormSession
from src.models.turn import RawTurnResult

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """
    In-memory mapping from session id to FormSession.

    Example:
        >>> store = SessionStore(gateway)
        >>> session_id = store.create({"name": "string", "email": "email"})
        >>> result = await store.send_message(session_id, "I'm Ada")
        >>> store.info(session_id)["form_data"]
        {'name': 'Ada'}
    """

    def __init__(self, gateway, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize the session store.

        Args:
            gateway: Conversation gateway providing create_conversation()
                     and turn()
            clock: Returns the current aware datetime; defaults to UTC now
        """
        self.gateway = gateway
        self._clock = clock or _utc_now
        self._sessions: Dict[str, FormSession] = {}

        logger.info("SessionStore initialized")

    def create(self, schema: Any) -> str:
        """
        Create a new form session.

        Args:
            schema: Field name -> type tag mapping

        Returns:
            The new session id

        Raises:
            InvalidSchemaError: If the schema fails validation
        """
        if not validate_schema(schema):
            raise InvalidSchemaError()

        conversation = self.gateway.create_conversation(schema)

        session_id = str(uuid.uuid4())
        self._sessions[session_id] = FormSession(
            id=session_id,
            schema=schema,
            conversation=conversation,
            created_at=self._clock(),
        )

        logger.info(f"Created session: {session_id} (fields={list(schema.keys())})")
        return session_id

    async def send_message(self, session_id: str, message: str) -> RawTurnResult:
        """
        Run one conversation turn for a session.

        Args:
            session_id: Target session
            message: The user's message

        Returns:
            PlainText unchanged, or a StructuredTurn whose form_data is a
            snapshot of everything accumulated so far

        Raises:
            SessionNotFoundError: If the session does not exist
            GatewayError: If the AI service call fails
        """
        session = self._sessions.get(session_id) if session_id else None
        if session is None:
            raise SessionNotFoundError(session_id)

        async with session.lock:
            raw = await self.gateway.turn(session.conversation, message)
            return apply_turn(raw, session.form_data)

    def delete(self, session_id: str) -> bool:
        """
        Remove a session and its conversation handle.

        Returns:
            True if a session was removed, False if it did not exist
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        logger.info(f"Deleted session: {session_id}")
        return True

    def has(self, session_id: str) -> bool:
        """Check if a session exists."""
        return session_id in self._sessions

    def info(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Snapshot of a session, or None if not found."""
        session = self._sessions.get(session_id)
        return session.get_summary() if session else None

    def count(self) -> int:
        """Number of live sessions."""
        return len(self._sessions)

    def list_ids(self) -> List[str]:
        """Ids of all live sessions."""
        return list(self._sessions.keys())

    def sweep_expired(self, max_age_minutes: float = 60) -> int:
        """
        Delete sessions created more than max_age_minutes ago.

        Age is measured from creation only; activity does not extend it.

        Args:
            max_age_minutes: Sessions strictly older than this are removed

        Returns:
            Number of sessions removed
        """
        now = self._clock()
        expired = [
            sid for sid, session in self._sessions.items()
            if session.age_minutes(now) > max_age_minutes
        ]

        for session_id in expired:
            del self._sessions[session_id]

        if expired:
            logger.info(f"Cleaned up {len(expired)} expired sessions")

        return len(expired)
