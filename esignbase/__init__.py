from .auth import GrantConfig, GrantType, Scope
from .client import ESignBaseClient
from .documents import DocumentStream, Recipient
from .exceptions import (
    ESignBaseError,
    ValidationError,
    NotConnectedError,
    AuthenticationError,
    APIError,
    AuthorizationError,
    NotFoundError,
    RateLimitError,
    ServerError,
)

__all__ = [
    "ESignBaseClient",
    "GrantConfig",
    "GrantType",
    "Scope",
    "DocumentStream",
    "Recipient",
    "ESignBaseError",
    "ValidationError",
    "NotConnectedError",
    "AuthenticationError",
    "APIError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
]
