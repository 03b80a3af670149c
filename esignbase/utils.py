from datetime import date, datetime, time, timezone
from typing import Any
from urllib.parse import quote

import httpx

from .exceptions import (
    APIError,
    AuthorizationError,
    NotFoundError,
    RateLimitError,
    ServerError,
)

UNKNOWN_ERROR = "Unknown error"


def quote_segment(value: Any) -> str:
    """Percent-encode a single path segment, slashes included.

    Leaves ``!'()*`` alone, like JavaScript's encodeURIComponent.
    """
    return quote(str(value), safe="!'()*")


def read_error_text(resp: httpx.Response) -> str:
    """Read an error body as text; streamed bodies are read first."""
    try:
        resp.read()
        return resp.text
    except (httpx.HTTPError, httpx.StreamError, UnicodeDecodeError):
        return UNKNOWN_ERROR


def raise_for_status_mapped(resp: httpx.Response) -> None:
    """Map HTTP errors to SDK exceptions carrying the body text and status."""
    if resp.is_success:
        return
    status = resp.status_code
    message = read_error_text(resp)
    if status in (401, 403):
        raise AuthorizationError(message, status)
    if status == 404:
        raise NotFoundError(message, status)
    if status == 429:
        raise RateLimitError(message, status)
    if 500 <= status < 600:
        raise ServerError(message, status)
    raise APIError(message, status)


def to_iso8601_utc(value: date) -> str:
    """Format a date or datetime as ``YYYY-MM-DDTHH:MM:SS.sssZ``.

    Naive datetimes are taken as UTC; plain dates mean midnight UTC.
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
