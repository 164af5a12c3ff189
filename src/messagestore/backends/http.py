"""HttpBackend — messages kept by a remote key/value service over HTTP.

Endpoints:
- Write: PUT  {base_url}/messages/{id}  text/plain body
- Read:  GET  {base_url}/messages/{id}  -> text/plain body, 404 when absent

Any other non-2xx status is a BackendError.
"""

from __future__ import annotations

import httpx

from messagestore.constants import HTTP_MESSAGES_PATH
from messagestore.errors import (
    BackendConnectionError,
    BackendError,
    BackendTimeoutError,
    MessageNotFoundError,
)


class HttpBackend:
    """Async HTTP message backend.

    Constructor accepts explicit params — no env-var loading. Uses a
    Bearer token when ``api_key`` is given.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: httpx.Timeout | float | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout
            if timeout is not None
            else httpx.Timeout(connect=5.0, read=15.0, write=10.0, pool=5.0),
        )

    def locate(self, message_id: int) -> str:
        return f"{HTTP_MESSAGES_PATH}/{message_id}"

    # -- internal request dispatcher -----------------------------------------

    async def _request(
        self, method: str, path: str, content: str | None = None
    ) -> httpx.Response:
        """Send a request and map transport errors to BackendError."""
        headers = {"Content-Type": "text/plain; charset=utf-8"} if content is not None else None
        try:
            return await self._client.request(
                method, path, content=content, headers=headers
            )
        except httpx.ConnectError as exc:
            raise BackendConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise BackendTimeoutError(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise BackendError(str(exc)) from exc

    # -- MessageBackend protocol ---------------------------------------------

    async def write(self, location: str, payload: str) -> None:
        response = await self._request("PUT", location, content=payload)
        if not response.is_success:
            raise BackendError(
                f"PUT {location} failed: {response.text}",
                status_code=response.status_code,
            )

    async def read(self, location: str) -> str:
        response = await self._request("GET", location)
        if response.status_code == 404:
            raise MessageNotFoundError(location)
        # Redirects are not followed, so a 3xx body is never a payload
        if not response.is_success:
            raise BackendError(
                f"GET {location} failed: {response.text}",
                status_code=response.status_code,
            )
        return response.text

    # -- lifecycle ------------------------------------------------------------

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> HttpBackend:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
