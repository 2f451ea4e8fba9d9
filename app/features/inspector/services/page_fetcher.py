import asyncio
from dataclasses import dataclass

import httpx

from app.platform.exceptions import PageFetchError
from app.platform.logger import get_logger
from app.platform.utils.url_validator import get_origin

logger = get_logger("page_fetcher")

UNREACHABLE_MESSAGE = "Could not reach the URL. Make sure it's correct and the site is online."


@dataclass(frozen=True)
class FetchedPage:
    base_url: str
    html: str


async def fetch_page(client: httpx.AsyncClient, url: str, timeout: float) -> FetchedPage:
    """
    Primary fetch of the page under inspection.

    Args:
        client: Shared request-scoped client (carries the browser User-Agent)
        url: Normalized absolute URL
        timeout: Seconds allowed for the whole request, body included

    Returns:
        FetchedPage with the decoded body and the origin of the requested URL

    Raises:
        PageFetchError: On transport failure, timeout, a URL the client rejects
            or a non-success status
    """
    try:
        # httpx timeouts are per phase; wait_for bounds a slowly trickled body too
        response = await asyncio.wait_for(client.get(url, timeout=timeout), timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        logger.error(f"Timed out fetching {url} after {timeout}s")
        raise PageFetchError(UNREACHABLE_MESSAGE) from e
    except httpx.InvalidURL as e:
        logger.error(f"Refused to fetch malformed URL {url!r}: {e}")
        raise PageFetchError(f"Failed to fetch URL: {e}") from e
    except httpx.HTTPError as e:
        logger.error(f"Transport error fetching {url}: {e}")
        raise PageFetchError(UNREACHABLE_MESSAGE) from e

    if not response.is_success:
        logger.error(f"Fetching {url} returned status {response.status_code}")
        reason = response.reason_phrase or str(response.status_code)
        raise PageFetchError(f"Failed to fetch URL: {reason}")

    logger.info(f"Fetched {url} ({response.status_code}, {len(response.content)} bytes)")
    return FetchedPage(base_url=get_origin(url), html=response.text)
