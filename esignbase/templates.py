from typing import Any, Callable

import httpx

from .config import API_ROOT
from .utils import quote_segment


class TemplatesAPI:
    """Read-only template endpoints."""

    def __init__(self, *, request: Callable[..., httpx.Response]):
        self._request = request

    def list(self) -> Any:
        resp = self._request("GET", f"{API_ROOT}/templates")
        return resp.json()

    def get(self, template_id: Any) -> Any:
        resp = self._request("GET", f"{API_ROOT}/template/{quote_segment(template_id)}")
        return resp.json()
