"""
API Routes module - Endpoint definitions.

Each file in this module defines routes for a specific domain:
- realtime.py : WebSocket channel for form conversations
- health.py   : Health check endpoints
- session.py  : Session inspection and cleanup endpoints
"""
from src.api.routes.health import router as health_router
from src.api.routes.realtime import router as realtime_router
from src.api.routes.session import router as session_router

__all__ = [
    "health_router",
    "realtime_router",
    "session_router",
]
