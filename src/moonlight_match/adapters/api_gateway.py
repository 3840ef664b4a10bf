"""Authenticated HTTP gateway to the Moonlight Match API."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from moonlight_match.adapters.storage import KeyValueStorage, StorageError
from moonlight_match.domain.session import TOKEN_KEY

_logger = logging.getLogger(__name__)


class ApiGateway(Protocol):
    """Interface for outbound API calls."""

    async def request(  # noqa: PLR0913
        self,
        method: str,
        path: str,
        *,
        json: object | None = None,
        params: dict[str, str] | None = None,
        authenticated: bool = True,
    ) -> httpx.Response:
        """Issue a call and return the raw response."""


@dataclass
class HttpxApiGateway(ApiGateway):
    """Gateway implemented with httpx.

    The bearer token is read from storage on every call rather than cached,
    so a logout racing an in-flight call may still send the old token.
    """

    base_url: str
    storage: KeyValueStorage
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(
        cls, base_url: str, storage: KeyValueStorage, timeout: float = 10.0
    ) -> "HttpxApiGateway":
        """Create a gateway with a managed httpx session."""
        return cls(
            base_url=base_url,
            storage=storage,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def request(  # noqa: PLR0913
        self,
        method: str,
        path: str,
        *,
        json: object | None = None,
        params: dict[str, str] | None = None,
        authenticated: bool = True,
    ) -> httpx.Response:
        """Issue a call, attaching the stored bearer token when present."""
        headers: dict[str, str] = {}
        if authenticated:
            token = self._read_token()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return await self.http_client.request(
            method,
            f"{self.base_url}{path}",
            json=json,
            params=params,
            headers=headers,
            timeout=self.timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _read_token(self) -> str | None:
        try:
            return self.storage.get_item(TOKEN_KEY)
        except StorageError:
            _logger.warning("Could not read bearer token; sending request without it")
            return None
