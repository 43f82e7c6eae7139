"""
Session Management Routes - HTTP view of the session store.

Endpoints:
- GET /api/sessions: List live session ids
- GET /api/sessions/{id}: Get session info
- DELETE /api/sessions/{id}: Delete a session
- POST /api/sessions/cleanup: Sweep sessions past a maximum age

Sessions are created and driven over the WebSocket channel; these
endpoints only inspect and prune them.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_service
from src.core.exceptions import SessionNotFoundError
from src.core.logging_config import get_logger
from src.models.responses import (
    CleanupResponse,
    SessionDeleteResponse,
    SessionInfoResponse,
    SessionListResponse,
)
from src.services.form_service import FormAssistantService

logger = get_logger(__name__)
router = APIRouter(prefix="/api/sessions", tags=["Session Management"])


@router.get(
    "",
    response_model=SessionListResponse,
    summary="List Sessions",
)
async def list_sessions(service: FormAssistantService = Depends(get_service)):
    """List the ids of all live sessions."""
    ids = service.store.list_ids()
    return SessionListResponse(sessions=ids, total=len(ids))


@router.post(
    "/cleanup",
    response_model=CleanupResponse,
    summary="Sweep Expired Sessions",
    description="Delete every session created more than max_age_minutes ago."
)
async def cleanup_sessions(
    max_age_minutes: Optional[float] = Query(default=None, gt=0, description="Maximum session age"),
    service: FormAssistantService = Depends(get_service),
):
    """Run the expiry sweep now."""
    if max_age_minutes is None:
        max_age_minutes = service.session_max_age_minutes

    removed = service.sweep_expired(max_age_minutes)
    return CleanupResponse(
        removed=removed,
        remaining=service.session_count(),
        max_age_minutes=max_age_minutes,
    )


@router.get(
    "/{session_id}",
    response_model=SessionInfoResponse,
    summary="Get Session Info",
)
async def get_session_info(session_id: str, service: FormAssistantService = Depends(get_service)):
    """Return the schema, creation time and accumulated data of a session."""
    info = service.store.info(session_id)
    if info is None:
        raise SessionNotFoundError(session_id)
    return SessionInfoResponse(**info)


@router.delete(
    "/{session_id}",
    response_model=SessionDeleteResponse,
    summary="Delete Session",
)
async def delete_session(session_id: str, service: FormAssistantService = Depends(get_service)):
    """Delete a session. Deleting an unknown session is not an error."""
    deleted = service.end_session(session_id)

    if not deleted:
        return SessionDeleteResponse(
            session_id=session_id,
            message="Session not found (may have already expired)",
            deleted=False
        )

    logger.info(f"Deleted session via API: {session_id}")

    return SessionDeleteResponse(
        session_id=session_id,
        message="Session deleted successfully",
        deleted=True
    )
