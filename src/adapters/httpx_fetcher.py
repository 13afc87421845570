"""HTTP list-source adapter.

Implements the core FetcherPort on top of httpx so that the refresh cycle
can await every source concurrently.
"""

from __future__ import annotations

from typing import Optional

import httpx

from core.errors import TransportError

DEFAULT_USER_AGENT = "lookout/1.0 PhishingList"


class HttpxFetcher:
    """Fetch list sources with a shared httpx.AsyncClient."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": user_agent},
            follow_redirects=True,
        )

    async def fetch(self, url: str) -> bytes:
        """GET a list source and return the body, raising TransportError on failure."""

        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(url, f"HTTP {exc.response.status_code}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            # InvalidURL is not an HTTPError; a bad configured URL is just another dead source.
            raise TransportError(url, f"{type(exc).__name__}: {exc}") from exc
        return response.content

    async def aclose(self) -> None:
        # Injected clients belong to the caller.
        if self._owns_client:
            await self._client.aclose()
