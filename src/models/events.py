"""
Realtime event payloads.

Every WebSocket frame is a JSON object {"event": <name>, "data": <payload>}.
The inbound payload models below accept the camelCase keys the browser
client sends.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# Inbound event names
CREATE_SESSION = "create-session"
SEND_MESSAGE = "send-message"
END_SESSION = "end-session"

# Outbound event names
SESSION_CREATED = "session-created"
MESSAGE_RESPONSE = "message-response"
SESSION_ENDED = "session-ended"
TYPING = "typing"
ERROR = "error"


class EventFrame(BaseModel):
    """Envelope shared by inbound and outbound frames."""
    event: str = Field(..., min_length=1)
    data: Any = None


class CreateSessionPayload(BaseModel):
    """Payload of create-session. The schema is checked by the store."""
    model_config = ConfigDict(populate_by_name=True)

    form_schema: Any = Field(default=None, alias="schema")


class SendMessagePayload(BaseModel):
    """Payload of send-message."""
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")
    message: Optional[str] = None


class EndSessionPayload(BaseModel):
    """Payload of end-session."""
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")


def frame(event: str, data: Any = None) -> dict:
    """Build an outbound frame."""
    return EventFrame(event=event, data=data).model_dump()
