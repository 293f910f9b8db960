"""Error handling utilities."""

from typing import Optional


class StayKoError(Exception):
    """Base exception for StayKo backend."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str = "", user_message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.user_message = user_message or self.default_message


class UnauthorizedError(StayKoError):
    """Action requires a missing or invalid session, or a foreign row."""
    default_message = "Unauthorized"


class ValidationError(StayKoError):
    """Required input field missing or malformed."""
    default_message = "Please fill in all required fields."


class UpstreamError(StayKoError):
    """Backend read/write failure."""
    default_message = "The request failed. Please try again."


class SupabaseError(UpstreamError):
    """Supabase operation error."""
    pass


class NetworkError(StayKoError):
    """Routing, geocoding or upload call failed."""
    default_message = "Network request failed."


class NotFoundError(StayKoError):
    """Referenced entity is absent."""
    default_message = "Not found"


HTTP_STATUS = {
    UnauthorizedError: 401,
    ValidationError: 400,
    NotFoundError: 404,
    UpstreamError: 502,
    NetworkError: 502,
}


def http_status_for(error: Exception) -> int:
    """HTTP status an API handler answers with for a given failure."""
    for error_type, status in HTTP_STATUS.items():
        if isinstance(error, error_type):
            return status
    return 500
