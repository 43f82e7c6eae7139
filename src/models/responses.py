"""
Response models for the HTTP API.

These Pydantic models define the contract between client and server.
Field names follow the JSON keys the browser client already consumes,
hence the camelCase in a few places.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class HealthResponse(BaseModel):
    """Response model for the /health endpoint."""
    status: str = Field(default="OK")
    message: str = Field(default="WebSocket server is running")
    timestamp: datetime = Field(default_factory=_utc_now)
    sessions: int = Field(..., description="Number of live sessions")


class SocketStatusResponse(BaseModel):
    """Response model for /api/socket/status."""
    message: str = Field(default="WebSocket server is running")
    status: str = Field(default="ready")
    activeSessions: int


class AIHealthResponse(BaseModel):
    """Response model for /api/health/ai."""
    status: str = Field(..., description="OK or ERROR")
    service: str = Field(default="AI Service")
    timestamp: datetime = Field(default_factory=_utc_now)
    error: Optional[str] = None


class SessionInfoResponse(BaseModel):
    """Snapshot of one session."""
    session_id: str
    schema_: Dict[str, str] = Field(..., alias="schema")
    created_at: str
    form_data: Dict[str, Any]

    model_config = ConfigDict(populate_by_name=True)


class SessionListResponse(BaseModel):
    """Ids of all live sessions."""
    sessions: List[str]
    total: int


class SessionDeleteResponse(BaseModel):
    """Response for session deletion."""
    session_id: str
    message: str
    deleted: bool


class CleanupResponse(BaseModel):
    """Result of an expiry sweep."""
    removed: int
    remaining: int
    max_age_minutes: float


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    message: str
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=_utc_now)
