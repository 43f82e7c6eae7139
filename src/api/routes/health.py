"""
Health Check Routes - System health and monitoring endpoints.

These endpoints are used for:
1. Load balancer health checks
2. Checking the realtime channel is accepting clients
3. Probing the AI service end to end
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.api.dependencies import get_service
from src.core.logging_config import get_logger
from src.models.responses import AIHealthResponse, HealthResponse, SocketStatusResponse
from src.services.form_service import FormAssistantService

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])

SERVER_MESSAGE = "WebSocket server is running"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description="Returns 200 OK with the number of live sessions."
)
async def health_check(service: FormAssistantService = Depends(get_service)) -> HealthResponse:
    """Report that the server is up."""
    logger.debug("Health check requested")

    return HealthResponse(
        status="OK",
        message=SERVER_MESSAGE,
        sessions=service.session_count(),
    )


@router.get(
    "/api/socket/status",
    response_model=SocketStatusResponse,
    summary="Realtime channel status",
)
async def socket_status(service: FormAssistantService = Depends(get_service)) -> SocketStatusResponse:
    """Report that the WebSocket endpoint is ready."""
    return SocketStatusResponse(
        message=SERVER_MESSAGE,
        status="ready",
        activeSessions=service.session_count(),
    )


@router.get(
    "/api/health/ai",
    response_model=AIHealthResponse,
    response_model_exclude_none=True,
    summary="AI service health check",
    description="""
    Runs a throwaway conversation turn against the AI service.

    Returns status OK or ERROR; responds 500 if the probe itself fails.
    """
)
async def ai_health_check(service: FormAssistantService = Depends(get_service)):
    """Probe the AI service."""
    try:
        is_healthy = await service.ai_health()
    except Exception as e:
        logger.exception(f"AI health probe failed: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "status": "ERROR",
                "service": "AI Service",
                "error": str(e),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    return AIHealthResponse(status="OK" if is_healthy else "ERROR")
