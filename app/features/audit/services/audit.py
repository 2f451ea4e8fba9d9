import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

import httpx

from app.features.audit.schemas.audit import AuditScores
from app.platform.config import Settings, require_pagespeed_key
from app.platform.exceptions import AuditError, InvalidURLError
from app.platform.logger import get_logger
from app.platform.utils.http_client import browser_headers, http_session
from app.platform.utils.url_validator import validate_url

logger = get_logger("pagespeed_client")

CATEGORIES = ("performance", "accessibility", "seo")


class PageSpeedClient:
    """
    Client for the PageSpeed Insights (Lighthouse) API.

    The upstream body is treated as untrusted: status, content type, JSON
    validity and every nesting level of the score structure are checked
    before anything is extracted.
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.http_client = http_client

    def _build_params(self, url: str, api_key: str) -> List[Tuple[str, str]]:
        params = [
            ("url", url),
            ("key", api_key),
            ("strategy", self.settings.PAGESPEED_STRATEGY),
        ]
        params.extend(("category", category.upper()) for category in CATEGORIES)
        return params

    async def run_audit(self, url: Optional[str]) -> AuditScores:
        api_key = require_pagespeed_key(self.settings)

        is_valid, full_url, error = validate_url(url)
        if not is_valid:
            raise InvalidURLError(error)

        logger.info(f"Starting PageSpeed audit for URL: {full_url}")

        headers = {**browser_headers(self.settings), "Accept": "application/json"}
        async with http_session(self.settings, self.http_client) as client:
            try:
                response = await client.get(
                    self.settings.PAGESPEED_API_URL,
                    params=self._build_params(full_url, api_key),
                    headers=headers,
                    timeout=self.settings.AUDIT_TIMEOUT,
                )
            except httpx.HTTPError as e:
                logger.error(f"PageSpeed request for {full_url} failed: {e!r}")
                detail = str(e) or e.__class__.__name__
                raise AuditError(f"PageSpeed API request failed: {detail}") from e

        if not response.is_success:
            message = self.error_message(response)
            logger.error(f"PageSpeed API Error ({response.status_code}) for {full_url}: {message}")
            raise AuditError(message)

        data = self.parse_body(response)
        scores = self.extract_scores(data)
        logger.info(f"PageSpeed audit complete for {full_url}: {scores.model_dump()}")
        return scores

    @staticmethod
    def error_message(response: httpx.Response) -> str:
        """Prefer the service's own `error.message`, fall back to the status code."""
        fallback = f"PageSpeed API request failed with status {response.status_code}"
        try:
            payload = response.json()
        except ValueError:
            return fallback

        error = payload.get("error") if isinstance(payload, dict) else None
        message = error.get("message") if isinstance(error, dict) else None
        if isinstance(message, str) and message.strip():
            return message
        return fallback

    @staticmethod
    def parse_body(response: httpx.Response) -> Dict[str, Any]:
        content_type = response.headers.get("content-type", "")
        media_type = content_type.split(";")[0].strip().lower()
        if not (media_type == "application/json" or media_type.endswith("+json")):
            raise AuditError(
                f"PageSpeed API returned a non-JSON response ({content_type or 'no content type'})"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise AuditError("PageSpeed API returned an invalid JSON body") from e

        if not isinstance(data, dict):
            raise AuditError("PageSpeed API returned an invalid JSON body")
        return data

    @staticmethod
    def extract_scores(data: Dict[str, Any]) -> AuditScores:
        lighthouse = data.get("lighthouseResult")
        categories = lighthouse.get("categories") if isinstance(lighthouse, dict) else None
        if not isinstance(categories, dict):
            raise AuditError("PageSpeed API response is missing lighthouse category scores")

        scores = {}
        for name in CATEGORIES:
            category = categories.get(name)
            raw = category.get("score") if isinstance(category, dict) else None
            scores[name] = PageSpeedClient.to_percent(raw)
        return AuditScores(**scores)

    @staticmethod
    def to_percent(raw: Any) -> int:
        """Lighthouse fraction (0-1) to a 0-100 integer, half-up; absent or junk is 0."""
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            return 0
        if isinstance(raw, float) and not math.isfinite(raw):
            return 0
        try:
            # str() keeps 0.895 from turning into 89.4999...
            percent = (Decimal(str(raw)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        except InvalidOperation:
            return 0
        return max(0, min(100, int(percent)))
