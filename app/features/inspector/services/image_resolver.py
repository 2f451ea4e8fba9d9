import asyncio
import base64
from typing import Optional
from urllib.parse import urljoin, urlparse

import httpx

from app.features.inspector.schemas.inspect import ImageCandidate, ParsedDocument, ResolvedImage
from app.platform.logger import get_logger

logger = get_logger("image_resolver")

DEFAULT_IMAGE_MIME_TYPE = "image/png"


class ImageResolver:
    """
    Picks the preview image of a page and inlines it as base64.
    Any failure yields an empty ResolvedImage, never an exception.
    """

    def __init__(self, client: httpx.AsyncClient, timeout: float):
        self.client = client
        self.timeout = timeout

    @staticmethod
    def pick_candidate(doc: ParsedDocument) -> Optional[ImageCandidate]:
        # candidates are stored in priority order by the analyzer
        for candidate in doc.image_candidates:
            if candidate.ref:
                return candidate
        return None

    @staticmethod
    def to_absolute(ref: str, base_url: str) -> Optional[str]:
        try:
            absolute = urljoin(base_url + "/", ref.strip())
            parsed = urlparse(absolute)
        except ValueError:
            return None

        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            return None
        return absolute

    async def resolve(self, doc: ParsedDocument, base_url: str) -> ResolvedImage:
        candidate = self.pick_candidate(doc)
        if candidate is None:
            logger.info(f"No preview image candidates on {base_url}")
            return ResolvedImage()

        image_url = self.to_absolute(candidate.ref, base_url)
        if image_url is None:
            logger.warning(f"Invalid {candidate.source.value} reference on {base_url}: {candidate.ref!r}")
            return ResolvedImage()

        try:
            response = await asyncio.wait_for(self.client.get(image_url, timeout=self.timeout), self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Timed out fetching preview image {image_url} after {self.timeout}s")
            return ResolvedImage()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Failed to fetch preview image {image_url}: {e}")
            return ResolvedImage()

        if not response.is_success:
            logger.warning(f"Failed to fetch preview image. Status: {response.status_code}, URL: {image_url}")
            return ResolvedImage()

        mime_type = response.headers.get("content-type") or DEFAULT_IMAGE_MIME_TYPE
        logger.info(f"Resolved {candidate.source.value} image {image_url} ({mime_type})")
        return ResolvedImage(
            absolute_url=image_url,
            mime_type=mime_type,
            encoded_bytes=base64.b64encode(response.content).decode("ascii"),
        )
