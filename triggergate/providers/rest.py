"""Shared httpx plumbing for REST provider clients."""

from __future__ import annotations

import base64
import binascii
import typing as typ

import httpx
import msgspec

from .errors import (
    ProviderAPIError,
    ProviderConfigError,
    ResponseShapeError,
    TransportError,
)

if typ.TYPE_CHECKING:
    import types

    from .config import ProviderConfig

_HTTP_ERROR_STATUS_THRESHOLD = 400
_HTTP_SERVER_ERROR_THRESHOLD = 500
_HTTP_NOT_FOUND = 404
# Statuses that mean the gateway's credentials or quota failed, as opposed to
# the provider answering "no".
_AUTH_FAILURE_STATUSES = frozenset({401, 403, 407, 429})
_MAX_PAGES = 100

T = typ.TypeVar("T")


def is_transport_failure(status_code: int) -> bool:
    """Return whether ``status_code`` is an auth, quota or server failure."""
    return (
        status_code in _AUTH_FAILURE_STATUSES
        or status_code >= _HTTP_SERVER_ERROR_THRESHOLD
    )


def is_not_found(status_code: int) -> bool:
    """Return whether ``status_code`` reports a missing resource."""
    return status_code == _HTTP_NOT_FOUND


def is_error_status(status_code: int) -> bool:
    """Return whether ``status_code`` is any 4xx or 5xx status."""
    return status_code >= _HTTP_ERROR_STATUS_THRESHOLD


class ContentsEnvelope(msgspec.Struct, kw_only=True):
    """JSON envelope wrapping base64 file content (GitHub, Gitea, GitLab)."""

    content: str
    encoding: str = "base64"


class RestProviderClient:
    """Base class owning the HTTP client, headers and error mapping.

    Subclasses set :attr:`provider_name` and implement :meth:`_auth_headers`
    plus the :class:`~triggergate.providers.protocol.ProviderClient` methods.
    """

    provider_name: typ.ClassVar[str] = "provider"
    accept: typ.ClassVar[str] = "application/json"

    def __init__(
        self,
        config: ProviderConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        if not config.token.strip():
            raise ProviderConfigError.empty_token()

        self._config = config
        self._headers = {
            **self._auth_headers(config.token),
            "User-Agent": config.user_agent,
            "Accept": self.accept,
        }
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)

    def _auth_headers(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> typ.Self:
        """Return the client for use as an async context manager."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Close owned HTTP resources on exit."""
        await self.aclose()

    def _url(self, path: str) -> str:
        return f"{self._config.api_url.rstrip('/')}{path}"

    async def _send(
        self, url: str, *, params: dict[str, str | int] | None = None
    ) -> httpx.Response:
        """Issue one GET, translating httpx failures into ``TransportError``."""
        try:
            return await self._client.get(url, params=params, headers=self._headers)
        except httpx.TimeoutException as exc:
            raise TransportError.timeout(self.provider_name) from exc
        except httpx.RequestError as exc:
            raise TransportError.network_error(self.provider_name, exc) from exc

    async def _get(
        self, url: str, *, params: dict[str, str | int] | None = None
    ) -> httpx.Response:
        """Issue one GET and raise ``ProviderAPIError`` for any error status."""
        response = await self._send(url, params=params)
        self._raise_for_status(response)
        return response

    def _raise_for_status(self, response: httpx.Response) -> None:
        if is_error_status(response.status_code):
            raise ProviderAPIError.http_error(
                self.provider_name, response.status_code, response.url.path
            )

    async def _iter_link_pages(
        self, url: str, *, params: dict[str, str | int] | None = None
    ) -> typ.AsyncIterator[httpx.Response]:
        """Yield successive pages, following ``Link: rel="next"`` headers."""
        next_url: str | None = url
        next_params = params
        for _ in range(_MAX_PAGES):
            if next_url is None:
                return
            response = await self._get(next_url, params=next_params)
            yield response
            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string.
            next_params = None
        if next_url is not None:
            raise ResponseShapeError.too_many_pages(self.provider_name, _MAX_PAGES)

    def _decode(self, response: httpx.Response, target: type[T]) -> T:
        """Decode a JSON response body into ``target``."""
        try:
            return msgspec.json.decode(response.content, type=target)
        except msgspec.DecodeError as exc:
            raise ResponseShapeError.undecodable(self.provider_name, exc) from exc

    def _decode_contents(self, response: httpx.Response) -> bytes:
        """Decode a base64 :class:`ContentsEnvelope` response into raw bytes."""
        envelope = self._decode(response, ContentsEnvelope)
        if envelope.encoding != "base64":
            raise ResponseShapeError.missing(self.provider_name, "content.encoding")
        try:
            return base64.b64decode(envelope.content)
        except binascii.Error as exc:
            raise ResponseShapeError.undecodable(self.provider_name, exc) from exc
