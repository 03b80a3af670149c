import os
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping, Optional, Union

import httpx

from .config import API_ROOT, DEFAULT_DOCUMENTS_LIMIT, DEFAULT_DOCUMENTS_OFFSET
from .utils import quote_segment, to_iso8601_utc

RECIPIENT_FIELDS = ("email", "first_name", "last_name", "role_name", "locale")


@dataclass(frozen=True)
class Recipient:
    email: str
    first_name: str
    last_name: str
    role_name: str
    locale: str


def _recipient_payload(recipient: Union[Recipient, Mapping[str, Any]]) -> Dict[str, Any]:
    source = asdict(recipient) if isinstance(recipient, Recipient) else recipient
    return {key: source.get(key) for key in RECIPIENT_FIELDS}


class DocumentStream:
    """
    Byte stream over a downloaded document body.
    Iterate for chunks, or use read()/save(). The underlying response is
    closed once the stream is exhausted, closed, or leaves a ``with`` block.
    """

    def __init__(self, response: httpx.Response):
        self._response = response

    @property
    def response(self) -> httpx.Response:
        return self._response

    @property
    def content_type(self) -> Optional[str]:
        return self._response.headers.get("Content-Type")

    def iter_bytes(self, chunk_size: Optional[int] = None) -> Iterator[bytes]:
        try:
            yield from self._response.iter_bytes(chunk_size)
        finally:
            self._response.close()

    def __iter__(self) -> Iterator[bytes]:
        return self.iter_bytes()

    def read(self) -> bytes:
        try:
            return self._response.read()
        finally:
            self._response.close()

    def save(self, dest_path: str) -> str:
        """Write the whole body to dest_path and return it."""
        os.makedirs(os.path.dirname(os.path.abspath(dest_path)), exist_ok=True)
        with open(dest_path, "wb") as f:
            for chunk in self.iter_bytes():
                f.write(chunk)
        return dest_path

    def close(self) -> None:
        self._response.close()

    @property
    def closed(self) -> bool:
        return self._response.is_closed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class DocumentsAPI:
    """
    Document endpoints: list/get/create/download/delete.
    All calls go through the client's authenticated request pipeline.
    """

    def __init__(self, *, request: Callable[..., httpx.Response]):
        self._request = request

    def _path(self, document_id: Any, *suffix: str) -> str:
        return "/".join((API_ROOT, "document", quote_segment(document_id)) + suffix)

    def list(
        self,
        *,
        limit: int = DEFAULT_DOCUMENTS_LIMIT,
        offset: int = DEFAULT_DOCUMENTS_OFFSET,
    ) -> Any:
        resp = self._request(
            "GET",
            f"{API_ROOT}/documents",
            params={"limit": limit, "offset": offset},
        )
        return resp.json()

    def get(self, document_id: Any) -> Any:
        resp = self._request("GET", self._path(document_id))
        return resp.json()

    def create(
        self,
        *,
        template_id: str,
        document_name: str,
        recipients: Iterable[Union[Recipient, Mapping[str, Any]]],
        user_defined_metadata: Optional[Mapping[str, Any]] = None,
        expiration_date: Optional[date] = None,
    ) -> Any:
        body: Dict[str, Any] = {
            "name": document_name,
            "template_id": template_id,
            "recipients": [_recipient_payload(r) for r in recipients],
        }
        if user_defined_metadata:
            body["user_defined_metadata"] = dict(user_defined_metadata)
        if isinstance(expiration_date, date):
            body["expiration_date"] = to_iso8601_utc(expiration_date)
        resp = self._request("POST", f"{API_ROOT}/document", json=body)
        return resp.json()

    def download(self, document_id: Any) -> DocumentStream:
        # No reauthentication for downloads; a 401 is raised as-is.
        resp = self._request(
            "GET",
            self._path(document_id, "download"),
            allow_retry=False,
            stream=True,
        )
        return DocumentStream(resp)

    def delete(self, document_id: Any) -> bool:
        self._request("DELETE", self._path(document_id))
        return True
