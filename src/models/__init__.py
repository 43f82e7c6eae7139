"""
Models module - data shapes shared across layers.

This module defines:
- turn.py      : Turn results produced by the gateway (dataclasses)
- events.py    : WebSocket event envelope and payloads (Pydantic)
- responses.py : HTTP response bodies (Pydantic)
"""
from src.models.responses import (
    AIHealthResponse,
    CleanupResponse,
    ErrorResponse,
    HealthResponse,
    SessionDeleteResponse,
    SessionInfoResponse,
    SessionListResponse,
    SocketStatusResponse,
)
from src.models.turn import FieldUpdate, PlainText, RawTurnResult, StructuredTurn

__all__ = [
    "AIHealthResponse",
    "CleanupResponse",
    "ErrorResponse",
    "HealthResponse",
    "SessionDeleteResponse",
    "SessionInfoResponse",
    "SessionListResponse",
    "SocketStatusResponse",
    "FieldUpdate",
    "PlainText",
    "RawTurnResult",
    "StructuredTurn",
]
