"""
Services module - Business logic and orchestration.

Services contain the core application logic:
- No HTTP or WebSocket concerns (those belong in api/)
- Orchestrate between the LLM gateway and the session store
"""
from src.services.form_service import FormAssistantService, build_service

__all__ = [
    "FormAssistantService",
    "build_service",
]
