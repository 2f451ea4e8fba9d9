import asyncio
from itertools import islice
from typing import Iterable, List, Optional, Union

import httpx

from app.platform.logger import get_logger

logger = get_logger("link_auditor")

DEFAULT_MAX_LINKS = 50


class LinkAuditor:
    """
    Checks internal links with concurrent HEAD requests.

    Every probe is awaited independently: a failure or timeout on one link is
    recorded for that link only and never cancels the others.
    """

    def __init__(self, client: httpx.AsyncClient, timeout: float, max_links: int = DEFAULT_MAX_LINKS):
        self.client = client
        self.timeout = timeout
        self.max_links = max_links

    async def _probe(self, url: str) -> int:
        response = await self.client.head(url, follow_redirects=True, timeout=self.timeout)
        return response.status_code

    @staticmethod
    def classify(url: str, outcome: Union[int, BaseException]) -> Optional[str]:
        """Broken-link description for one probe outcome, None when healthy."""
        if isinstance(outcome, BaseException):
            return f"{url} (Error: Failed to connect)"
        if outcome >= 400:
            return f"{url} (Error: {outcome})"
        return None

    async def audit(self, internal_links: Iterable[str]) -> List[str]:
        to_check = list(islice(internal_links, self.max_links))
        if not to_check:
            return []

        logger.info(f"Probing {len(to_check)} internal links")
        outcomes = await asyncio.gather(
            *(self._probe(url) for url in to_check),
            return_exceptions=True,
        )

        # gather keeps argument order, so outcomes[i] belongs to to_check[i]
        broken = []
        for url, outcome in zip(to_check, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"Link probe failed for {url}: {outcome!r}")
            description = self.classify(url, outcome)
            if description:
                broken.append(description)

        logger.info(f"Link audit finished: {len(broken)} broken of {len(to_check)} checked")
        return broken
