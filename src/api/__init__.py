"""
API module - FastAPI app, HTTP routes and the realtime WebSocket channel.

This module handles:
- Event frame parsing and dispatch on /ws
- Health and session inspection endpoints
- Error mapping to HTTP responses and error frames
"""
from src.api.main import app

__all__ = ["app"]
