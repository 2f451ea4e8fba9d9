from functools import lru_cache
from pathlib import Path
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings

from app.platform.exceptions import ConfigurationError


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "Site Tools API"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = False
    CORS_ORIGINS: List[str] = ["*"]
    LOG_DIR: str = "logs"

    # ── Language model (Gemini, OpenAI-compatible endpoint) ──
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    GEMINI_MODEL: str = "gemini-2.5-flash"
    SUMMARY_MAX_CHARS: int = 100_000
    SUMMARY_TEMPERATURE: float = 0.2
    SUMMARY_MAX_TOKENS: int = 800

    # ── PageSpeed Insights ──────────────────────
    PAGESPEED_API_KEY: Optional[str] = None
    PAGESPEED_API_URL: str = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
    PAGESPEED_STRATEGY: Literal["mobile", "desktop"] = "mobile"

    # ── Outbound HTTP ───────────────────────────
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )
    PAGE_FETCH_TIMEOUT: float = 20.0
    IMAGE_FETCH_TIMEOUT: float = 15.0
    LINK_CHECK_TIMEOUT: float = 8.0
    SUMMARY_TIMEOUT: float = 30.0
    AUDIT_TIMEOUT: float = 60.0

    # ── Inspection limits ───────────────────────
    MAX_LINKS_TO_CHECK: int = 50

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def require_gemini_key(settings: Settings) -> str:
    if not settings.GEMINI_API_KEY:
        raise ConfigurationError("Server is missing API key.")
    return settings.GEMINI_API_KEY


def require_pagespeed_key(settings: Settings) -> str:
    if not settings.PAGESPEED_API_KEY:
        raise ConfigurationError("Server is missing PageSpeed API key.")
    return settings.PAGESPEED_API_KEY


def missing_credentials(settings: Settings) -> List[str]:
    """Names of third-party credentials that are not provisioned."""
    missing = []
    if not settings.GEMINI_API_KEY:
        missing.append("GEMINI_API_KEY")
    if not settings.PAGESPEED_API_KEY:
        missing.append("PAGESPEED_API_KEY")
    return missing
