"""
Realtime Routes - WebSocket channel for form conversations.

Clients exchange JSON frames {"event": <name>, "data": <payload>},
sent as text or as UTF-8 binary messages:

    create-session {schema}             -> session-created {sessionId, initialMessage, formData}
    send-message   {sessionId, message} -> typing true, typing false,
                                           message-response {response, formData}
    end-session    {sessionId}          -> session-ended

Any failure is reported as an `error {message}` frame; the connection
stays open. Frames from one connection are handled one at a time, in
the order they arrive.
"""
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PydanticValidationError

from src.api.dependencies import get_service
from src.core.exceptions import FormAssistantException, SessionNotFoundError
from src.core.logging_config import get_logger
from src.models import events
from src.models.events import (
    CreateSessionPayload,
    EndSessionPayload,
    EventFrame,
    SendMessagePayload,
    frame,
)
from src.services.form_service import FormAssistantService

logger = get_logger(__name__)

router = APIRouter(tags=["Realtime"])

EventHandler = Callable[[WebSocket, FormAssistantService, Dict[str, Any]], Awaitable[None]]


async def _emit(websocket: WebSocket, event: str, data: Any = None) -> None:
    await websocket.send_json(frame(event, data))


async def _emit_error(websocket: WebSocket, message: str) -> None:
    await _emit(websocket, events.ERROR, {"message": message})


async def handle_create_session(
    websocket: WebSocket, service: FormAssistantService, data: Dict[str, Any]
) -> None:
    payload = CreateSessionPayload.model_validate(data)
    logger.info(f"Creating session with schema: {payload.form_schema}")

    created = service.create_session(payload.form_schema)

    await _emit(websocket, events.SESSION_CREATED, created)
    logger.info(f"Session created: {created['sessionId']}")


async def handle_send_message(
    websocket: WebSocket, service: FormAssistantService, data: Dict[str, Any]
) -> None:
    payload = SendMessagePayload.model_validate(data)
    logger.info(f"Message from {payload.session_id}: {payload.message}")

    await _emit(websocket, events.TYPING, True)
    try:
        reply = await service.send_message(payload.session_id, payload.message)
    finally:
        await _emit(websocket, events.TYPING, False)

    await _emit(websocket, events.MESSAGE_RESPONSE, reply)

    logger.info(f"AI Response: {reply['response']}")
    if reply["formData"]:
        logger.debug(f"Form Data: {reply['formData']}")


async def handle_end_session(
    websocket: WebSocket, service: FormAssistantService, data: Dict[str, Any]
) -> None:
    payload = EndSessionPayload.model_validate(data)

    if not service.end_session(payload.session_id):
        raise SessionNotFoundError(payload.session_id)

    await _emit(websocket, events.SESSION_ENDED)
    logger.info(f"Session ended: {payload.session_id}")


HANDLERS: Dict[str, EventHandler] = {
    events.CREATE_SESSION: handle_create_session,
    events.SEND_MESSAGE: handle_send_message,
    events.END_SESSION: handle_end_session,
}


async def dispatch_frame(websocket: WebSocket, service: FormAssistantService, raw: Optional[str]) -> None:
    """
    Decode one inbound frame and run its handler.

    Every exception is converted into an error frame here.
    """
    if raw is None:
        logger.warning("Malformed frame: binary payload is not UTF-8 text")
        await _emit_error(websocket, "Malformed event frame")
        return

    try:
        envelope = EventFrame.model_validate_json(raw)
    except PydanticValidationError:
        logger.warning(f"Malformed frame: {raw[:200]!r}")
        await _emit_error(websocket, "Malformed event frame")
        return

    handler = HANDLERS.get(envelope.event)
    if handler is None:
        logger.warning(f"Unknown event: {envelope.event}")
        await _emit_error(websocket, f"Unknown event: {envelope.event}")
        return

    data = envelope.data if isinstance(envelope.data, dict) else {}

    try:
        await handler(websocket, service, data)
    except PydanticValidationError as e:
        logger.warning(f"Invalid payload for {envelope.event}: {e}")
        await _emit_error(websocket, f"Invalid payload for {envelope.event}")
    except FormAssistantException as e:
        logger.error(f"{envelope.event} failed: {e.message}")
        await _emit_error(websocket, e.message)
    except WebSocketDisconnect:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error handling {envelope.event}: {e}")
        await _emit_error(websocket, "An unexpected error occurred")


async def receive_frame(websocket: WebSocket) -> Optional[str]:
    """
    Wait for the next frame and return its text.

    Binary frames are decoded as UTF-8; None means the bytes were not
    valid UTF-8.

    Raises:
        WebSocketDisconnect: If the client closed the connection
    """
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))

    text = message.get("text")
    if text is not None:
        return text

    try:
        return (message.get("bytes") or b"").decode("utf-8")
    except UnicodeDecodeError:
        return None


@router.websocket("/ws")
async def realtime_channel(websocket: WebSocket):
    """Accept a client and serve its events until it disconnects."""
    service = get_service(websocket)
    client_id = uuid.uuid4().hex[:8]

    await websocket.accept()
    logger.info(f"Client connected: {client_id}")

    try:
        while True:
            raw = await receive_frame(websocket)
            await dispatch_frame(websocket, service, raw)
    except WebSocketDisconnect as e:
        logger.info(f"Client disconnected: {client_id}, code={e.code}")
