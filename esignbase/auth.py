import base64
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Tuple, Union

import httpx

from .config import DEFAULT_BASE_URL, OAUTH_TOKEN_PATH, TOKEN_TIMEOUT
from .exceptions import AuthenticationError, ValidationError
from .utils import read_error_text

logger = logging.getLogger(__name__)


class GrantType(str, Enum):
    CLIENT_CREDENTIALS = "client_credentials"
    AUTHORIZATION_CODE = "authorization_code"


class Scope(str, Enum):
    ALL = "all"
    READ = "read"
    CREATE_DOCUMENT = "create_document"
    DELETE = "delete"
    SANDBOX = "sandbox"


@dataclass(frozen=True)
class GrantConfig:
    """Validated, immutable credentials. Build with :func:`validate_grant_config`."""

    client_id: str
    client_secret: str = field(repr=False)
    grant_type: GrantType
    scope: Tuple[Scope, ...]
    base_url: str
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    @property
    def token_url(self) -> str:
        return f"{self.base_url}{OAUTH_TOKEN_PATH}"


def normalize_base_url(base_url: str) -> str:
    return base_url.rstrip("/") + "/"


def validate_grant_config(
    *,
    client_id: Optional[str],
    client_secret: Optional[str],
    grant_type: Union[GrantType, str, None],
    scope: Optional[Iterable[Union[Scope, str]]],
    username: Optional[str] = None,
    password: Optional[str] = None,
    base_url: str = DEFAULT_BASE_URL,
) -> GrantConfig:
    """Check credentials in a fixed order; the first broken rule wins.

    Order: client id, client secret, grant type (presence then membership),
    scope (non-empty then membership), username/password for
    ``authorization_code``.
    """
    if not client_id:
        raise ValidationError("Client ID is required")
    if not client_secret:
        raise ValidationError("Client secret is required")
    if not grant_type:
        raise ValidationError("Grant type is required")
    try:
        grant = GrantType(grant_type)
    except ValueError:
        raise ValidationError("Invalid grant type") from None

    if not scope:
        raise ValidationError("At least one scope must be provided")
    # A bare string (or Scope member) is one value, not a collection
    if isinstance(scope, str):
        raise ValidationError("Invalid scope value provided")
    try:
        scopes = list(scope)
    except TypeError:
        raise ValidationError("Invalid scope value provided") from None
    if not scopes:
        raise ValidationError("At least one scope must be provided")
    try:
        parsed_scopes = tuple(Scope(s) for s in scopes)
    except ValueError:
        raise ValidationError("Invalid scope value provided") from None

    if grant is GrantType.AUTHORIZATION_CODE and (not username or not password):
        raise ValidationError(
            "Username and password are required for authorization_code grant type"
        )

    return GrantConfig(
        client_id=client_id,
        client_secret=client_secret,
        grant_type=grant,
        scope=parsed_scopes,
        base_url=normalize_base_url(base_url or DEFAULT_BASE_URL),
        username=username,
        password=password,
    )


class AuthManager:
    """
    Runs the token exchange for a GrantConfig and holds the access token.
    Stores the token in memory only; exchange_token() is the sole writer.
    """

    def __init__(self, *, config: GrantConfig, http: httpx.Client):
        self.config = config
        self._http = http
        self._access_token: Optional[str] = None

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    @property
    def is_connected(self) -> bool:
        return bool(self._access_token)

    def _basic_auth_header(self) -> str:
        raw = f"{self.config.client_id}:{self.config.client_secret}".encode("utf-8")
        return "Basic " + base64.b64encode(raw).decode("ascii")

    def _token_form(self) -> dict:
        data = {
            "grant_type": self.config.grant_type.value,
            "scope": " ".join(s.value for s in self.config.scope),
        }
        if self.config.grant_type is GrantType.AUTHORIZATION_CODE:
            data["username"] = self.config.username
            data["password"] = self.config.password
        return data

    def exchange_token(self) -> str:
        """Run the full grant exchange and store the resulting access token.

        Raises :class:`AuthenticationError` on a non-2xx response or a
        response without ``access_token``. Transport errors and timeouts
        propagate from httpx unchanged. Never retries.
        """
        logger.debug("Requesting access token (%s)", self.config.grant_type.value)
        request = self._http.build_request(
            "POST",
            self.config.token_url,
            data=self._token_form(),
            headers={
                "Authorization": self._basic_auth_header(),
                "Content-Type": "application/x-www-form-urlencoded",
            },
            timeout=TOKEN_TIMEOUT,
        )
        resp = self._http.send(request, stream=True)
        try:
            if not resp.is_success:
                raise AuthenticationError(read_error_text(resp), resp.status_code)
            resp.read()
        finally:
            resp.close()

        try:
            payload = resp.json()
        except ValueError as exc:
            raise AuthenticationError(
                f"Token response is not valid JSON: {exc}", resp.status_code
            ) from exc
        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise AuthenticationError(
                "Token response did not contain an access_token", resp.status_code
            )
        self._access_token = access_token
        logger.debug("Access token obtained")
        return access_token
