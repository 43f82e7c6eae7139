"""
Form Assistant Service - Business logic behind the realtime channel.

This service orchestrates each client request:
1. Session creation (schema validation, conversation, greeting)
2. Message turns (sanitize, gateway call, accumulation)
3. Session teardown and expiry sweeps

One instance is built at process start and handed to every handler;
tests build their own with a fake gateway.
"""
from typing import Any, Dict, Optional

from src.core.logging_config import get_logger
from src.core.validators import sanitize_message
from src.llm.gateway import GeminiGateway
from src.memory.store import SessionStore
from src.models.turn import response_form_data, response_text

logger = get_logger(__name__)


class FormAssistantService:
    """
    Service for form-filling conversations.

    Example:
        >>> service = FormAssistantService(gateway)
        >>> created = service.create_session({"name": "string"})
        >>> reply = await service.send_message(created["sessionId"], "I'm Ada")
        >>> reply["formData"]
        {'name': 'Ada'}
    """

    def __init__(
        self,
        gateway,
        store: Optional[SessionStore] = None,
        session_max_age_minutes: float = 60,
    ):
        """
        Initialize the service.

        Args:
            gateway: Conversation gateway (GeminiGateway in production)
            store: Optional SessionStore; a new one is built on the gateway
                   if not provided
            session_max_age_minutes: Default threshold for expiry sweeps
        """
        self.gateway = gateway
        self.store = store or SessionStore(gateway)
        self.session_max_age_minutes = session_max_age_minutes
        logger.info("FormAssistantService initialized")

    def create_session(self, schema: Any) -> Dict[str, Any]:
        """
        Create a session and return the session-created payload.

        Raises:
            InvalidSchemaError: If the schema is malformed
        """
        session_id = self.store.create(schema)
        greeting = self.gateway.initial_message()

        return {
            "sessionId": session_id,
            "initialMessage": greeting.ai_message,
            "formData": {},
        }

    async def send_message(self, session_id: str, message: str) -> Dict[str, Any]:
        """
        Run one turn and return the message-response payload.

        Raises:
            SessionNotFoundError: If the session does not exist
            GatewayError: If the AI service call fails
        """
        result = await self.store.send_message(session_id, sanitize_message(message))
        form_data = response_form_data(result)

        logger.info(
            f"Turn processed: session={session_id}, "
            f"fields={len(form_data)}"
        )

        return {
            "response": response_text(result),
            "formData": form_data,
        }

    def end_session(self, session_id: str) -> bool:
        """Delete a session; False if it did not exist."""
        return self.store.delete(session_id)

    def session_count(self) -> int:
        """Number of live sessions."""
        return self.store.count()

    def sweep_expired(self, max_age_minutes: Optional[float] = None) -> int:
        """Delete sessions older than max_age_minutes (service default if None)."""
        if max_age_minutes is None:
            max_age_minutes = self.session_max_age_minutes
        return self.store.sweep_expired(max_age_minutes)

    async def ai_health(self) -> bool:
        """Probe the AI service with a throwaway conversation."""
        return await self.gateway.health_check()


def build_service(settings) -> FormAssistantService:
    """
    Build the production service graph from settings.

    Raises:
        ValueError: If the Gemini API key is unusable
    """
    gateway = GeminiGateway.from_settings(settings)
    return FormAssistantService(
        gateway,
        session_max_age_minutes=settings.session_max_age_minutes,
    )
