"""Central configuration for the news-client project."""

import os
from dataclasses import dataclass

# API
DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 30.0
# Upper bound for the previous/next lookup; navigation is never worth a long wait
NAVIGATION_TIMEOUT = 5.0

# Content
SUPPORTED_LANGUAGES = ("en", "fr", "ar")
DEFAULT_LANGUAGE = "en"
DEFAULT_AUTHOR = "Sedki B.Haouala"
DEFAULT_AUTHOR_IMAGE = "/uploads/profile/bild3.jpg"
SEARCH_MIN_QUERY_LENGTH = 2
SEARCH_DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved from the environment.

    Attributes:
        api_url: Base URL of the REST API (``NEWS_API_URL``).
        api_token: Optional bearer token (``NEWS_API_TOKEN``).
        timeout: Request timeout in seconds (``NEWS_API_TIMEOUT``).
        navigation_timeout: Timeout for navigation refreshes in seconds.
        language: Default content language (``NEWS_LANGUAGE``).
    """

    api_url: str = DEFAULT_API_URL
    api_token: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    navigation_timeout: float = NAVIGATION_TIMEOUT
    language: str = DEFAULT_LANGUAGE


def load_settings() -> Settings:
    """Build Settings from environment variables, falling back to defaults."""
    language = os.environ.get("NEWS_LANGUAGE", DEFAULT_LANGUAGE).lower()
    if language not in SUPPORTED_LANGUAGES:
        language = DEFAULT_LANGUAGE

    return Settings(
        api_url=os.environ.get("NEWS_API_URL", DEFAULT_API_URL).rstrip("/"),
        api_token=os.environ.get("NEWS_API_TOKEN") or None,
        timeout=_float_env("NEWS_API_TIMEOUT", DEFAULT_TIMEOUT),
        navigation_timeout=_float_env("NAVIGATION_TIMEOUT", NAVIGATION_TIMEOUT),
        language=language,
    )


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default
