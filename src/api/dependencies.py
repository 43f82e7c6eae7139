"""
FastAPI dependencies.

The FormAssistantService is built once in the application lifespan and
kept on app.state; handlers receive it through these helpers.
"""
from starlette.requests import HTTPConnection

from src.services.form_service import FormAssistantService


def get_service(connection: HTTPConnection) -> FormAssistantService:
    """Return the service bound to the running application."""
    return connection.app.state.service
