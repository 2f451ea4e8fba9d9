import httpx
import openai
import pytest

from app.features.inspector.services.summarizer import (
    SAFETY_BLOCKED_SUMMARY,
    SYSTEM_PROMPT,
    TRUNCATED_SUMMARY,
    UNAVAILABLE_SUMMARY,
    Summarizer,
)


class TestSummarizer:

    @pytest.mark.asyncio
    async def test_returns_trimmed_model_text(self, settings, llm_stub):
        llm = llm_stub(content="  A shop selling handmade mugs.\n")
        summary = await Summarizer(llm, settings).summarize("Welcome to the mug shop")
        assert summary == "A shop selling handmade mugs."

    @pytest.mark.asyncio
    async def test_sends_system_prompt_and_generation_limits(self, settings, llm_stub):
        llm = llm_stub(content="Summary")
        await Summarizer(llm, settings).summarize("Page text")

        kwargs = llm.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == settings.GEMINI_MODEL
        assert kwargs["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert "Page text" in kwargs["messages"][1]["content"]
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 800
        assert kwargs["timeout"] == settings.SUMMARY_TIMEOUT

    @pytest.mark.asyncio
    async def test_truncates_input_to_character_budget(self, make_settings, llm_stub):
        llm = llm_stub(content="Summary")
        await Summarizer(llm, make_settings(SUMMARY_MAX_CHARS=10)).summarize("abcdefghijKLMNOP")

        user_message = llm.chat.completions.create.await_args.kwargs["messages"][1]["content"]
        assert "abcdefghij" in user_message
        assert "K" not in user_message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("finish_reason", ["content_filter", "SAFETY"])
    async def test_safety_block_returns_placeholder(self, settings, llm_stub, finish_reason):
        llm = llm_stub(content=None, finish_reason=finish_reason)
        summary = await Summarizer(llm, settings).summarize("Some text")
        assert summary == SAFETY_BLOCKED_SUMMARY

    @pytest.mark.asyncio
    @pytest.mark.parametrize("finish_reason", ["length", "MAX_TOKENS"])
    async def test_token_exhaustion_returns_placeholder(self, settings, llm_stub, finish_reason):
        llm = llm_stub(content="", finish_reason=finish_reason)
        summary = await Summarizer(llm, settings).summarize("Some text")
        assert summary == TRUNCATED_SUMMARY

    @pytest.mark.asyncio
    async def test_text_wins_over_finish_reason(self, settings, llm_stub):
        llm = llm_stub(content="Partial summary", finish_reason="length")
        assert await Summarizer(llm, settings).summarize("Some text") == "Partial summary"

    @pytest.mark.asyncio
    async def test_unexplained_empty_response_is_generic_placeholder(self, settings, llm_stub):
        llm = llm_stub(content=None, finish_reason="stop")
        assert await Summarizer(llm, settings).summarize("Some text") == UNAVAILABLE_SUMMARY

    @pytest.mark.asyncio
    async def test_missing_choices_is_generic_placeholder(self, settings, llm_stub):
        llm = llm_stub(choices=[])
        assert await Summarizer(llm, settings).summarize("Some text") == UNAVAILABLE_SUMMARY

    @pytest.mark.asyncio
    async def test_network_failure_is_generic_placeholder(self, settings, llm_stub):
        request = httpx.Request("POST", settings.GEMINI_BASE_URL)
        llm = llm_stub(error=openai.APIConnectionError(request=request))
        assert await Summarizer(llm, settings).summarize("Some text") == UNAVAILABLE_SUMMARY

    @pytest.mark.asyncio
    async def test_api_status_error_is_generic_placeholder(self, settings, llm_stub):
        request = httpx.Request("POST", settings.GEMINI_BASE_URL)
        response = httpx.Response(429, request=request, json={"error": {"message": "quota"}})
        llm = llm_stub(error=openai.RateLimitError("quota", response=response, body=None))
        assert await Summarizer(llm, settings).summarize("Some text") == UNAVAILABLE_SUMMARY

    @pytest.mark.asyncio
    async def test_empty_text_skips_model_call(self, settings, llm_stub):
        llm = llm_stub(content="unused")
        assert await Summarizer(llm, settings).summarize("   ") == UNAVAILABLE_SUMMARY
        llm.chat.completions.create.assert_not_awaited()
