from typing import Any, Optional

from openai import AsyncOpenAI

from app.platform.config import Settings, require_gemini_key
from app.platform.logger import get_logger

logger = get_logger("summarizer")

SYSTEM_PROMPT = (
    "You are an expert web analyst. A user will provide you with the raw text content "
    "of a webpage. Your job is to return a concise, one-paragraph summary of the "
    "website's purpose, written in a professional and informative tone. Start directly "
    "with the summary, do not add 'This website is about...'"
)

SAFETY_BLOCKED_SUMMARY = "(AI summary was blocked by content safety filters.)"
TRUNCATED_SUMMARY = "(AI summary failed: Model ran out of tokens.)"
UNAVAILABLE_SUMMARY = "(AI summary could not be generated.)"

# The OpenAI-compatible endpoint reports "content_filter"/"length"; the native
# Gemini names are accepted too since the SDK passes unknown values through.
SAFETY_FINISH_REASONS = {"content_filter", "safety", "blocklist", "prohibited_content"}
LENGTH_FINISH_REASONS = {"length", "max_tokens"}


def build_llm_client(settings: Settings) -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=require_gemini_key(settings),
        base_url=settings.GEMINI_BASE_URL,
        timeout=settings.SUMMARY_TIMEOUT,
        max_retries=0,
        default_headers={"User-Agent": settings.USER_AGENT},
    )


class Summarizer:
    """
    One-paragraph site summary from the language model.

    summarize() never raises: every failure becomes a fixed placeholder so the
    summary cannot fail the inspection it belongs to.
    """

    def __init__(self, client: AsyncOpenAI, settings: Settings):
        self.client = client
        self.model = settings.GEMINI_MODEL
        self.max_chars = settings.SUMMARY_MAX_CHARS
        self.temperature = settings.SUMMARY_TEMPERATURE
        self.max_tokens = settings.SUMMARY_MAX_TOKENS
        self.timeout = settings.SUMMARY_TIMEOUT

    async def summarize(self, text: str) -> str:
        if not text or not text.strip():
            logger.info("No summarizable text on page, skipping model call")
            return UNAVAILABLE_SUMMARY

        try:
            response = await self._call_llm(text[: self.max_chars])
            return self.normalize_response(response)
        except Exception as e:
            logger.error(f"Error generating AI summary: {e}")
            return UNAVAILABLE_SUMMARY

    async def _call_llm(self, text: str) -> Any:
        return await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": f'Here is the website text: "{text}"'},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout=self.timeout,
        )

    @staticmethod
    def normalize_response(response: Any) -> str:
        """
        Map a chat completion to summary text.

        Raises:
            ValueError: If the response carries neither text nor a known finish reason
        """
        choices = getattr(response, "choices", None)
        if not choices:
            raise ValueError("Invalid response structure from AI: no choices")

        choice = choices[0]
        message = getattr(choice, "message", None)
        content: Optional[str] = getattr(message, "content", None) if message is not None else None
        if isinstance(content, str) and content.strip():
            return content.strip()

        finish_reason = str(getattr(choice, "finish_reason", None) or "").lower()
        if finish_reason in SAFETY_FINISH_REASONS:
            logger.warning("AI summary blocked by content safety filters")
            return SAFETY_BLOCKED_SUMMARY
        if finish_reason in LENGTH_FINISH_REASONS:
            logger.warning("AI summary truncated, model ran out of tokens")
            return TRUNCATED_SUMMARY

        raise ValueError(f"Invalid response structure from AI (finish_reason={finish_reason or None})")
