"""Shared request plumbing for the registry clients.

Each registry client owns one pre-configured ``httpx.AsyncClient`` (user
agent, Accept-Crs, timeouts, base URL) built by a ``ClientBuilder``. Once
built, a client holds no mutable state and can serve many concurrent
resolutions. No retries: one timeout or transport error ends the call.
"""

from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Self

import httpx

from pdokapis.core.errors import DecodeFailure, NetworkFailure
from pdokapis.geometry.projection import CoordinateSpace

logger = logging.getLogger(__name__)


class ClientBuilder(ABC):
    """Chainable configuration for a registry client.

    Subclasses set the class-level defaults and implement ``build()``.
    """

    default_accept_crs: CoordinateSpace = CoordinateSpace.RIJKSDRIEHOEK
    default_connection_timeout_secs: float = 5
    default_request_timeout_secs: float = 20

    def __init__(self, user_agent: str):
        if not user_agent:
            raise ValueError("A user agent is required")
        self._user_agent = user_agent
        self._accept_crs = self.default_accept_crs
        self._connection_timeout_secs = self.default_connection_timeout_secs
        self._request_timeout_secs = self.default_request_timeout_secs
        self._base_url = self._default_base_url()
        self._transport: httpx.AsyncBaseTransport | None = None

    @abstractmethod
    def _default_base_url(self) -> str:
        """Base URL used unless overridden with ``base_url()``."""

    def accept_crs(self, accept_crs: CoordinateSpace | str) -> Self:
        self._accept_crs = CoordinateSpace(accept_crs)
        return self

    def connection_timeout_secs(self, secs: float) -> Self:
        self._connection_timeout_secs = secs
        return self

    def request_timeout_secs(self, secs: float) -> Self:
        self._request_timeout_secs = secs
        return self

    def base_url(self, url: str) -> Self:
        self._base_url = url.rstrip("/")
        return self

    def transport(self, transport: httpx.AsyncBaseTransport) -> Self:
        """Use a custom transport, e.g. ``httpx.MockTransport`` in tests."""
        self._transport = transport
        return self

    def _headers(self) -> dict[str, str]:
        return {
            "User-Agent": self._user_agent,
            "Accept": "application/json",
            "Accept-Crs": self._accept_crs.value,
        }

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self._headers(),
            timeout=httpx.Timeout(
                self._request_timeout_secs, connect=self._connection_timeout_secs,
            ),
            transport=self._transport,
        )

    @abstractmethod
    def build(self) -> RegistryClient:
        """Create the client; the builder can be reused afterwards."""


class RegistryClient:
    """Issues requests against one registry and returns decoded JSON payloads."""

    registry = "registry"

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        accept_crs: CoordinateSpace,
        request_timeout_secs: float,
    ):
        self._http = http
        self.base_url = base_url
        self.accept_crs = accept_crs
        self.request_timeout_secs = request_timeout_secs

    async def request_json(
        self,
        method: str,
        url: str,
        params: dict | None = None,
        json: Any = None,
    ) -> Any:
        """Send one request and return the parsed JSON body.

        Raises NetworkFailure when no response arrives within the request
        timeout, and DecodeFailure for non-2xx responses, bodies that do not
        match their Content-Encoding, or invalid JSON.
        """
        t0 = time.monotonic()
        try:
            resp = await asyncio.wait_for(
                self._http.request(method, url, params=params, json=json),
                timeout=self.request_timeout_secs,
            )
        except httpx.DecodingError as e:
            # Body did not match its Content-Encoding
            raise DecodeFailure(url, f"undecodable body: {e}") from e
        except (httpx.RequestError, asyncio.TimeoutError) as e:
            logger.warning(
                "%s request failed: %s", self.registry, e,
                extra={"registry": self.registry, "url": url},
            )
            raise NetworkFailure(url, e) from e

        duration_ms = round((time.monotonic() - t0) * 1000, 1)
        logger.debug(
            "%s %s -> %d", method, url, resp.status_code,
            extra={
                "registry": self.registry,
                "url": url,
                "status_code": resp.status_code,
                "duration_ms": duration_ms,
            },
        )

        if not resp.is_success:
            raise DecodeFailure(url, resp.text[:200], status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            raise DecodeFailure(url, f"invalid JSON: {e}") from e

    async def get_json(self, url: str, params: dict | None = None) -> Any:
        return await self.request_json("GET", url, params=params)

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._http.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
