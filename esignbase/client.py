import logging
import os
import re
from datetime import date
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import httpx

from .auth import AuthManager, GrantConfig, GrantType, Scope, validate_grant_config
from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_DOCUMENTS_LIMIT,
    DEFAULT_DOCUMENTS_OFFSET,
    DEFAULT_TIMEOUT,
    ENV_BASE_URL,
    ENV_CLIENT_ID,
    ENV_CLIENT_SECRET,
    ENV_GRANT_TYPE,
    ENV_PASSWORD,
    ENV_SCOPE,
    ENV_USERNAME,
)
from .credits import CreditsAPI
from .documents import DocumentsAPI, DocumentStream, Recipient
from .exceptions import NotConnectedError
from .templates import TemplatesAPI
from .utils import raise_for_status_mapped

logger = logging.getLogger(__name__)

NOT_CONNECTED_MESSAGE = "Client is not connected. Call connect() first."


class ESignBaseClient:
    """
    Top-level SDK entry point.
    - Validates credentials up front (no client exists for a bad config)
    - Holds httpx.Client and the AuthManager
    - Runs every API call through one authenticated request pipeline
    - Exposes TemplatesAPI, DocumentsAPI, CreditsAPI
    """

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        grant_type: Union[GrantType, str],
        scope: Iterable[Union[Scope, str]],
        username: Optional[str] = None,
        password: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        http: Optional[httpx.Client] = None,
    ):
        self.config: GrantConfig = validate_grant_config(
            client_id=client_id,
            client_secret=client_secret,
            grant_type=grant_type,
            scope=scope,
            username=username,
            password=password,
            base_url=base_url,
        )

        # Shared HTTP client; only closed by us if we created it
        self._owns_http = http is None
        self.http = http if http is not None else httpx.Client()
        self.auth = AuthManager(config=self.config, http=self.http)

        # APIs
        self.templates = TemplatesAPI(request=self._request)
        self.documents = DocumentsAPI(request=self._request)
        self.credits = CreditsAPI(request=self._request)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> "ESignBaseClient":
        """Build a client from ``ESIGNBASE_*`` environment variables.

        ``ESIGNBASE_SCOPE`` may be space or comma separated. Keyword
        overrides win over the environment.
        """
        env = os.environ if environ is None else environ
        scope = [s for s in re.split(r"[\s,]+", env.get(ENV_SCOPE, "")) if s]
        kwargs: Dict[str, Any] = {
            "client_id": env.get(ENV_CLIENT_ID),
            "client_secret": env.get(ENV_CLIENT_SECRET),
            "grant_type": env.get(ENV_GRANT_TYPE, GrantType.CLIENT_CREDENTIALS.value),
            "scope": scope,
            "username": env.get(ENV_USERNAME),
            "password": env.get(ENV_PASSWORD),
            "base_url": env.get(ENV_BASE_URL) or DEFAULT_BASE_URL,
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def is_connected(self) -> bool:
        return self.auth.is_connected

    # ---------- OAuth ----------
    def connect(self) -> None:
        """Run the token exchange. Call again at any time to reauthenticate."""
        self.auth.exchange_token()

    # ---------- Request pipeline ----------
    def _build_headers(self, extra: Optional[Mapping[str, str]]) -> Dict[str, str]:
        h: Dict[str, str] = {}
        if extra:
            for key, value in extra.items():
                # The bearer token always comes from the pipeline
                if key.lower() == "authorization":
                    continue
                h[key] = value
        h["Authorization"] = f"Bearer {self.auth.access_token}"
        return h

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
        content: Optional[Union[str, bytes]] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        allow_retry: bool = True,
        stream: bool = False,
    ) -> httpx.Response:
        """Send an authenticated request and return the 2xx response.

        A 401 on the first attempt triggers one full reauthentication
        (``connect()``) and one redispatch; ``allow_retry=False`` turns
        that off. Other non-2xx statuses raise the mapped
        :class:`~esignbase.exceptions.APIError`. Transport errors and
        timeouts propagate from httpx unchanged.

        With ``stream=True`` the body of the returned response is left
        unread and the caller is responsible for closing it.
        """
        if not self.is_connected:
            raise NotConnectedError(NOT_CONNECTED_MESSAGE)

        url = f"{self.base_url}{path.lstrip('/')}"
        max_attempts = 2 if allow_retry else 1

        for attempt in range(1, max_attempts + 1):
            request = self.http.build_request(
                method.upper(),
                url,
                params=params,
                json=json,
                content=content,
                headers=self._build_headers(headers),
                timeout=timeout,
            )
            logger.debug("%s %s (attempt %d/%d)", request.method, url, attempt, max_attempts)
            # Body is read below, after the status check
            resp = self.http.send(request, stream=True)

            if resp.status_code == 401 and attempt < max_attempts:
                resp.close()
                logger.debug("401 from %s; reauthenticating", url)
                self.connect()
                continue
            break

        try:
            raise_for_status_mapped(resp)
            if not stream:
                resp.read()
        except Exception:
            resp.close()
            raise
        return resp

    # ---------- Convenience ----------
    def get_templates(self) -> Any:
        return self.templates.list()

    def get_template(self, template_id: Any) -> Any:
        return self.templates.get(template_id)

    def get_documents(
        self,
        limit: int = DEFAULT_DOCUMENTS_LIMIT,
        offset: int = DEFAULT_DOCUMENTS_OFFSET,
    ) -> Any:
        return self.documents.list(limit=limit, offset=offset)

    def get_document(self, document_id: Any) -> Any:
        return self.documents.get(document_id)

    def create_document(
        self,
        *,
        template_id: str,
        document_name: str,
        recipients: Iterable[Union[Recipient, Mapping[str, Any]]],
        user_defined_metadata: Optional[Mapping[str, Any]] = None,
        expiration_date: Optional[date] = None,
    ) -> Any:
        return self.documents.create(
            template_id=template_id,
            document_name=document_name,
            recipients=recipients,
            user_defined_metadata=user_defined_metadata,
            expiration_date=expiration_date,
        )

    def download_document(self, document_id: Any) -> DocumentStream:
        return self.documents.download(document_id)

    def delete_document(self, document_id: Any) -> bool:
        return self.documents.delete(document_id)

    def get_credits(self) -> Any:
        return self.credits.get()

    # ---------- Cleanup ----------
    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
