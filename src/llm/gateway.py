"""
Conversation Gateway - Google Gemini integration for form conversations.

This module wraps Gemini's multi-turn chat API:
- One chat session per form session, seeded with a fixed greeting turn
- JSON replies constrained by a response schema
- Reply parsing into PlainText / StructuredTurn
- URL-like fields normalized to https://
- SDK errors mapped onto the application's error hierarchy

Failures are never retried here; the caller decides what to tell the user.
"""
import json
import re
from typing import Any, List, Mapping

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from src.core.exceptions import GatewayError, GatewayQuotaExceededError, GatewaySafetyError
from src.core.logging_config import get_logger
from src.llm.prompts import (
    FALLBACK_MESSAGE,
    GREETING_MESSAGE,
    SEED_USER_MESSAGE,
    get_form_system_prompt,
)
from src.models.turn import FieldUpdate, PlainText, RawTurnResult, StructuredTurn, to_payload

logger = get_logger(__name__)

# Key fragments that mark a field as holding a link
URL_KEY_HINTS = ("url", "profile", "link", "website")
# Any "scheme://" prefix counts as an explicit scheme
URL_SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)
DEFAULT_URL_SCHEME = "https://"

# Candidate finish reasons that mean the reply was withheld
SAFETY_FINISH_REASONS = {"SAFETY", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"}

RESPONSE_SCHEMA = genai.protos.Schema(
    type=genai.protos.Type.OBJECT,
    properties={
        "ai_message": genai.protos.Schema(
            type=genai.protos.Type.STRING,
            description="The conversational response to the user",
        ),
        "form_data": genai.protos.Schema(
            type=genai.protos.Type.ARRAY,
            description="Extracted form fields from the current message",
            items=genai.protos.Schema(
                type=genai.protos.Type.OBJECT,
                properties={
                    "key": genai.protos.Schema(
                        type=genai.protos.Type.STRING,
                        description="The name of the form field extracted",
                    ),
                    "value": genai.protos.Schema(
                        type=genai.protos.Type.STRING,
                        description="The value of the form field extracted",
                    ),
                },
                required=["key", "value"],
            ),
        ),
    },
    required=["ai_message", "form_data"],
)


def is_url_field(key: str) -> bool:
    """Check whether a field key looks like it holds a link."""
    lowered = key.lower()
    return any(hint in lowered for hint in URL_KEY_HINTS)


def normalize_url_fields(updates: List[FieldUpdate]) -> List[FieldUpdate]:
    """
    Prefix scheme-less values of URL-like fields with https://.

    Values that already carry a scheme (http, https, ftp, ...) are kept.

    Args:
        updates: Fields extracted from one reply

    Returns:
        New list with URL-like values normalized; other fields untouched
    """
    normalized = []
    for update in updates:
        value = update.value
        if (
            update.key
            and isinstance(value, str)
            and value
            and is_url_field(update.key)
            and not URL_SCHEME_PATTERN.match(value)
        ):
            update = FieldUpdate(key=update.key, value=f"{DEFAULT_URL_SCHEME}{value}")
        normalized.append(update)
    return normalized


def parse_turn_payload(text: str) -> RawTurnResult:
    """
    Resolve a raw model reply into a turn result.

    Unparsable replies degrade to a StructuredTurn carrying the raw text
    and no extracted fields instead of failing the turn.

    Args:
        text: Reply text, expected to be JSON

    Returns:
        PlainText for a bare JSON string, otherwise a StructuredTurn
    """
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        logger.error(f"Failed to parse AI response as JSON: {text!r}")
        return StructuredTurn(ai_message=(text or "").strip() or FALLBACK_MESSAGE, form_data=[])

    if isinstance(parsed, str):
        return PlainText(parsed)

    if not isinstance(parsed, dict):
        logger.error(f"AI response is not a JSON object: {text!r}")
        return StructuredTurn(ai_message=text.strip() or FALLBACK_MESSAGE, form_data=[])

    ai_message = parsed.get("ai_message")
    ai_message = FALLBACK_MESSAGE if ai_message is None else str(ai_message)
    form_data = parsed.get("form_data")

    if isinstance(form_data, list):
        updates = [
            FieldUpdate(key=str(item.get("key") or ""), value=item.get("value"))
            for item in form_data
            if isinstance(item, dict)
        ]
        return StructuredTurn(ai_message=ai_message, form_data=normalize_url_fields(updates))

    if isinstance(form_data, dict):
        return StructuredTurn(ai_message=ai_message, form_data=dict(form_data))

    return StructuredTurn(ai_message=ai_message, form_data=None)


def classify_error(exc: Exception) -> GatewayError:
    """Map an SDK exception onto the gateway error hierarchy."""
    if isinstance(exc, google_exceptions.ResourceExhausted):
        return GatewayQuotaExceededError()
    if isinstance(exc, (genai.types.BlockedPromptException, genai.types.StopCandidateException)):
        return GatewaySafetyError()

    text = str(exc).lower()
    if "quota" in text:
        return GatewayQuotaExceededError()
    if "safety" in text:
        return GatewaySafetyError()
    return GatewayError()


def _was_safety_blocked(response: Any) -> bool:
    feedback = getattr(response, "prompt_feedback", None)
    if feedback is not None and getattr(feedback, "block_reason", 0):
        return True

    for candidate in getattr(response, "candidates", None) or []:
        reason = getattr(candidate, "finish_reason", None)
        if getattr(reason, "name", None) in SAFETY_FINISH_REASONS:
            return True
    return False


def _response_text(response: Any) -> str:
    if _was_safety_blocked(response):
        raise GatewaySafetyError()
    try:
        text = response.text
    except ValueError as e:
        raise classify_error(e) from e

    if not text or not text.strip():
        logger.error("No response received from AI")
        raise GatewayError()
    return text


class GeminiGateway:
    """
    Gateway to Gemini chat sessions.

    Each call to create_conversation() returns a fresh ChatSession that
    belongs to exactly one form session.

    Example:
        >>> gateway = GeminiGateway(api_key="...")
        >>> chat = gateway.create_conversation({"name": "string"})
        >>> result = await gateway.turn(chat, "I'm Ada")
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.5-flash",
        temperature: float = 0.7,
        max_output_tokens: int = 1000,
    ):
        """
        Configure the Gemini client.

        Raises:
            ValueError: If no usable API key is given
        """
        if not api_key or api_key == "YOUR_API_KEY":
            raise ValueError("Valid Google AI API key is required")

        genai.configure(api_key=api_key)

        self.model_name = model_name
        self.generation_config = genai.GenerationConfig(
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            response_mime_type="application/json",
            response_schema=RESPONSE_SCHEMA,
        )

        logger.info(f"Gemini gateway initialized (model={model_name})")

    @classmethod
    def from_settings(cls, settings) -> "GeminiGateway":
        """Build a gateway from application Settings."""
        return cls(
            api_key=settings.gemini_api_key,
            model_name=settings.gemini_model,
            temperature=settings.llm_temperature,
            max_output_tokens=settings.llm_max_tokens,
        )

    def initial_message(self) -> StructuredTurn:
        """The greeting every conversation opens with."""
        return StructuredTurn(ai_message=GREETING_MESSAGE, form_data=[])

    def create_conversation(self, schema: Mapping[str, str]):
        """
        Start a chat session configured for a form schema.

        The session history is seeded with one greeting exchange so the
        model sees the expected reply format before the first real turn.

        Args:
            schema: Validated field name -> type tag mapping

        Returns:
            A Gemini ChatSession (opaque to callers)
        """
        model = genai.GenerativeModel(
            model_name=self.model_name,
            system_instruction=get_form_system_prompt(schema),
            generation_config=self.generation_config,
        )
        history = [
            {"role": "user", "parts": [SEED_USER_MESSAGE]},
            {"role": "model", "parts": [json.dumps(to_payload(self.initial_message()))]},
        ]
        return model.start_chat(history=history)

    async def turn(self, conversation, message: str) -> RawTurnResult:
        """
        Send one user message and resolve the reply.

        Args:
            conversation: ChatSession from create_conversation()
            message: The user's message (trimmed before sending)

        Returns:
            PlainText or StructuredTurn

        Raises:
            GatewayQuotaExceededError: Quota exhausted
            GatewaySafetyError: Message or reply blocked by safety filters
            GatewayError: Any other failure
        """
        if conversation is None or not message or not message.strip():
            logger.error("AI Service Error: chat instance and message are required")
            raise GatewayError()

        try:
            response = await conversation.send_message_async(message.strip())
            text = _response_text(response)
        except GatewayError as e:
            logger.error(f"AI Service Error: {e}")
            raise
        except Exception as e:
            logger.exception(f"AI Service Error: {e}")
            raise classify_error(e) from e

        return parse_turn_payload(text)

    async def health_check(self) -> bool:
        """Run a throwaway conversation turn; False on any failure."""
        try:
            conversation = self.create_conversation({"test": "string"})
            await self.turn(conversation, "test")
            return True
        except Exception as e:
            logger.error(f"AI Service health check failed: {e}")
            return False
