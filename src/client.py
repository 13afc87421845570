"""HTTP fetcher factory for lookout.

The fetcher owns a long-lived httpx.AsyncClient, so it must be created inside
the event loop that will use it and closed explicitly on shutdown.
"""

from __future__ import annotations

import logging

import settings
from adapters.httpx_fetcher import HttpxFetcher


def build_fetcher() -> HttpxFetcher:
    """Create the list-source fetcher from settings.

    Proxy variables (HTTPS_PROXY and friends) are picked up by httpx from the
    environment, which settings has already populated via python-dotenv.
    """

    logging.getLogger(__name__).info(
        "Initializing HTTP fetcher (timeout=%ss)", settings.FETCH_TIMEOUT_SECONDS
    )

    return HttpxFetcher(timeout=settings.FETCH_TIMEOUT_SECONDS, user_agent=settings.USER_AGENT)
