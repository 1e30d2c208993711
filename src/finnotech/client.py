"""Base HTTP client for the Finnotech API.

Wraps ``httpx.AsyncClient``. Makes exactly one request per call: no retry,
no caching, no status-code branching. Any httpx failure, including a
non-2xx response, surfaces as ``TransportError`` wrapping the original.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from finnotech.utils.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class FinnotechClient:
    """Async HTTP client bound to one Finnotech environment."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        json: Any = None,
        files: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Make a single API request.

        Args:
            method: HTTP method (GET, POST).
            path: API path (e.g. "/oak/v2/clients/abc/ibanInquiry").
            params: Query parameters.
            headers: Request headers (auth is the caller's responsibility).
            json: JSON request body.
            files: Multipart parts, in httpx ``files=`` form.

        Returns:
            The httpx.Response object.

        Raises:
            TransportError: On any network error or non-2xx response.
        """
        url = self._base_url + path
        track_id = (params or {}).get("trackId", "-")
        logger.info(f"{method} {path} trackId={track_id}")

        try:
            response = await self._http.request(
                method,
                url,
                params=params,
                headers=headers,
                json=json,
                files=files,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise TransportError(f"{method} {path}", e) from e

        logger.debug(f"Response: {response.status_code}")
        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for GET requests."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for POST requests."""
        return await self.request("POST", path, **kwargs)

    async def aclose(self) -> None:
        """Close the underlying HTTP client, unless it was supplied by the caller."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> FinnotechClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def unwrap(response: httpx.Response) -> Any:
    """Return the response body: parsed JSON, or text for anything else."""
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return response.json()
    return response.text
