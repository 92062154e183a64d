"""
Error taxonomy for the rotator.

Every error carries the HTTP status it maps to. A single exception handler
registered in main.py renders them as {"success": false, "error": ...}.
"""

from typing import Any, Dict, Optional


class RotatorError(Exception):
    """Base class for all rotator errors"""

    status_code: int = 500
    default_message: str = "Internal error."

    def __init__(self, message: Optional[str] = None, extra: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.extra = extra or {}
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message, **self.extra}


class ConfigurationError(RotatorError):
    """Missing or unwritable directory. Reported by the health check only."""
    status_code = 500
    default_message = "Configuration error."


class ValidationError(RotatorError):
    """Malformed request body or invalid URL list"""
    status_code = 400
    default_message = "Invalid request."


class AuthError(RotatorError):
    status_code = 401
    default_message = "Invalid or missing token."

    def __init__(self):
        # Never leak why authentication failed
        super().__init__(self.default_message)


class RateLimitError(RotatorError):
    status_code = 429
    default_message = "Too many requests. Retry in a few seconds."


class NoDestinationError(RotatorError):
    """Neither the active URL set nor the fallback set has a URL"""
    status_code = 503
    default_message = "Service temporarily unavailable."


class StorageError(RotatorError):
    """A state file (URL set, rate limit) could not be written"""
    status_code = 500
    default_message = "Error while writing the file."


class EventLogError(StorageError):
    """Append or rotation of the event log failed"""
    default_message = "Could not write the redirection log."


class ExternalServiceError(RotatorError):
    """Geolocation lookup failed or timed out"""
    status_code = 502
    default_message = "External service unavailable."
