import asyncio
from typing import Optional

import httpx
from openai import AsyncOpenAI

from app.features.inspector.schemas.inspect import InspectionResult, LinkClassification
from app.features.inspector.services.document_analyzer import DocumentAnalyzer
from app.features.inspector.services.image_resolver import ImageResolver
from app.features.inspector.services.link_auditor import LinkAuditor
from app.features.inspector.services.page_fetcher import fetch_page
from app.features.inspector.services.summarizer import Summarizer, build_llm_client
from app.platform.config import Settings, require_gemini_key
from app.platform.exceptions import InvalidURLError
from app.platform.logger import get_logger
from app.platform.utils.http_client import http_session
from app.platform.utils.url_validator import validate_url

logger = get_logger("inspection_service")


class InspectionService:
    """
    Runs one site inspection end to end.

    Process:
    1. Check the model credential and validate/normalize the URL
    2. Fetch the page (fatal on failure)
    3. Analyze the HTML
    4. Audit links, summarize text and resolve the preview image concurrently
    5. Assemble the InspectionResult

    Only steps 1 and 2 can fail the request; the stages in step 4 degrade
    to empty or placeholder values on their own.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
        llm_client: Optional[AsyncOpenAI] = None,
    ):
        self.settings = settings
        self.http_client = http_client
        self.llm_client = llm_client

    async def inspect(self, url: Optional[str]) -> InspectionResult:
        require_gemini_key(self.settings)

        if not url or not url.strip():
            raise InvalidURLError("URL is required")
        is_valid, full_url, error = validate_url(url)
        if not is_valid:
            raise InvalidURLError(error)

        logger.info(f"Starting inspection for URL: {full_url}")

        async with http_session(self.settings, self.http_client) as client:
            page = await fetch_page(client, full_url, self.settings.PAGE_FETCH_TIMEOUT)
            doc = DocumentAnalyzer.analyze(page.html, page.base_url)

            llm_client = self.llm_client or build_llm_client(self.settings)
            try:
                link_auditor = LinkAuditor(
                    client,
                    timeout=self.settings.LINK_CHECK_TIMEOUT,
                    max_links=self.settings.MAX_LINKS_TO_CHECK,
                )
                image_resolver = ImageResolver(client, timeout=self.settings.IMAGE_FETCH_TIMEOUT)
                summarizer = Summarizer(llm_client, self.settings)

                broken_links, ai_summary, image = await asyncio.gather(
                    link_auditor.audit(doc.internal_links),
                    summarizer.summarize(doc.summary_text()),
                    image_resolver.resolve(doc, page.base_url),
                )
            finally:
                if self.llm_client is None:
                    await llm_client.close()

        result = InspectionResult(
            title=doc.title,
            ai_summary=ai_summary,
            image=image,
            links=LinkClassification(
                total=doc.total_anchors,
                internal=doc.internal_count,
                external=doc.external_count,
                broken=broken_links,
            ),
        )
        logger.info(
            f"Inspection complete for {full_url}: {len(broken_links)} broken links, "
            f"image {'found' if not image.is_empty else 'not found'}"
        )
        return result
