from typing import Optional


class ESignBaseError(Exception):
    """Base SDK error. Carries the HTTP status code when one applies."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(ESignBaseError, ValueError):
    """Invalid client configuration, raised before any network call."""


class NotConnectedError(ESignBaseError):
    """Authenticated call attempted before a successful connect()."""


class AuthenticationError(ESignBaseError):
    """Token exchange failures."""


class APIError(ESignBaseError):
    """Non-2xx response from an authenticated endpoint."""


class AuthorizationError(APIError):
    """401/403 that survived reauthentication, or was not retried."""


class NotFoundError(APIError):
    """404 for templates/documents not found."""


class RateLimitError(APIError):
    """429 Too Many Requests (rate-limited)."""


class ServerError(APIError):
    """5xx errors."""
