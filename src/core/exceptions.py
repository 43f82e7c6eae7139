"""
Custom Exceptions - Application-specific error classes.

This module defines a hierarchy of exceptions for clean error handling:
- Each exception has a status code and error code
- The message is safe to show to end users
- Used by both the HTTP layer and the WebSocket layer, which turn
  them into an error body or an `error` event respectively
"""
from typing import Optional


class FormAssistantException(Exception):
    """
    Base exception for all form assistant errors.

    Subclass this for specific error types.
    """
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert to error response dict."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


class InvalidSchemaError(FormAssistantException):
    """Raised when a session is requested with a malformed form schema."""
    status_code = 400
    error_code = "invalid_schema"

    def __init__(self, message: str = "Invalid schema format"):
        super().__init__(message)


class SessionNotFoundError(FormAssistantException):
    """Raised when a session is not found."""
    status_code = 404
    error_code = "session_not_found"

    def __init__(self, session_id: Optional[str] = None):
        super().__init__(
            message="Session not found",
            details=f"session_id={session_id}" if session_id else None
        )
        self.session_id = session_id


class GatewayError(FormAssistantException):
    """Raised when the AI service fails to produce a turn."""
    status_code = 502
    error_code = "ai_service_error"

    def __init__(self, message: str = "Failed to get AI response. Please try again."):
        super().__init__(message)


class GatewayQuotaExceededError(GatewayError):
    """Raised when the AI service reports an exhausted quota."""
    status_code = 429
    error_code = "ai_quota_exceeded"

    def __init__(self):
        super().__init__("AI service quota exceeded. Please try again later.")


class GatewaySafetyError(GatewayError):
    """Raised when the AI service blocks a message on safety grounds."""
    status_code = 422
    error_code = "ai_safety_rejected"

    def __init__(self):
        super().__init__("Message flagged by safety filters. Please rephrase your message.")
