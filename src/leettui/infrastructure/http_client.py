"""Async HTTP client built on curl_cffi."""

import json
from dataclasses import dataclass
from typing import Any

from curl_cffi.requests import AsyncSession
from curl_cffi.requests.exceptions import RequestException
from loguru import logger

from leettui.domain.exceptions import TransportError


@dataclass(frozen=True)
class HTTPResponse:
    """Status and body of a completed HTTP exchange."""

    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        return json.loads(self.text)


class AsyncHTTPClient:
    """Thin wrapper around a lazily created curl_cffi AsyncSession."""

    def __init__(self, timeout: float = 30, impersonate: str = "chrome"):
        """
        Initialize HTTP client.

        Args:
            timeout: Per-request timeout in seconds
            impersonate: Browser fingerprint curl_cffi presents to the server
        """
        self.timeout = timeout
        self.impersonate = impersonate
        self._session: AsyncSession | None = None

    def _get_session(self) -> AsyncSession:
        if self._session is None:
            self._session = AsyncSession()
        return self._session

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        *,
        headers: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
    ) -> HTTPResponse:
        """
        POST a JSON payload.

        Raises:
            TransportError: On timeouts, connection failures and other
                transport-level problems. HTTP error statuses are returned,
                not raised.
        """
        return await self._request("POST", url, json=payload, headers=headers, cookies=cookies)

    async def get(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
    ) -> HTTPResponse:
        """GET a resource. Errors behave as in ``post_json``."""
        return await self._request("GET", url, headers=headers, cookies=cookies)

    async def _request(self, method: str, url: str, **kwargs: Any) -> HTTPResponse:
        logger.debug(f"{method} {url}")
        try:
            response = await self._get_session().request(
                method, url, timeout=self.timeout, impersonate=self.impersonate, **kwargs
            )
        except RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        return HTTPResponse(status=response.status_code, text=response.text)

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
