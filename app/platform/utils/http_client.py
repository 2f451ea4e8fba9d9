from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import httpx

from app.platform.config import Settings


def browser_headers(settings: Settings) -> Dict[str, str]:
    """Headers sent with every outbound request so targets do not trivially block us as a bot."""
    return {
        "User-Agent": settings.USER_AGENT,
        "Accept-Language": "en-US,en;q=0.9",
    }


def build_async_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers=browser_headers(settings),
        follow_redirects=True,
        timeout=httpx.Timeout(settings.PAGE_FETCH_TIMEOUT),
    )


@asynccontextmanager
async def http_session(
    settings: Settings, client: Optional[httpx.AsyncClient] = None
) -> AsyncIterator[httpx.AsyncClient]:
    """
    Yields `client` untouched when the caller owns one, otherwise a
    request-scoped client that is closed on exit.
    """
    if client is not None:
        yield client
        return

    async with build_async_client(settings) as owned:
        yield owned
