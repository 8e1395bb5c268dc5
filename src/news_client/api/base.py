"""Contract between the article core and whatever fetches content."""

from __future__ import annotations

from typing import Any, Protocol


class ApiError(Exception):
    """Exception raised when a request to the content API fails."""

    def __init__(
        self, message: str, url: str | None = None, status_code: int | None = None
    ) -> None:
        """Initialize ApiError.

        Args:
            message: Error description, preferably the server's own message.
            url: The URL that failed.
            status_code: HTTP status, or None for transport failures.
        """
        self.message = message
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ArticleNotFoundError(ApiError):
    """Raised when an article lookup answers 404 for every identifier form."""

    def __init__(self, identifier: str, url: str | None = None) -> None:
        self.identifier = identifier
        super().__init__(f"Article not found: {identifier}", url=url, status_code=404)


class ContentFetchService(Protocol):
    """Source of raw article payloads.

    Payloads are returned as decoded JSON objects; normalization and
    ordering are the caller's job.
    """

    def fetch_published_articles_by_category(
        self, category: str, *, timeout: float | None = None
    ) -> list[dict[str, Any]]:
        """Return all published articles in ``category``, in any order."""
        ...

    def fetch_article_by_identifier(self, identifier: str) -> dict[str, Any]:
        """Return one article by slug or id.

        Raises:
            ArticleNotFoundError: If no article has that slug or id.
            ApiError: On transport or server failure.
        """
        ...
