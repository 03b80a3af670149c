from typing import Any, Callable

import httpx

from .config import API_ROOT


class CreditsAPI:
    def __init__(self, *, request: Callable[..., httpx.Response]):
        self._request = request

    def get(self) -> Any:
        resp = self._request("GET", f"{API_ROOT}/credits")
        return resp.json()
