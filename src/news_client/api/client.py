"""HTTP client for the sports-news REST API."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx

from news_client.api.base import ApiError, ArticleNotFoundError
from news_client.config import DEFAULT_TIMEOUT, SEARCH_DEFAULT_LIMIT, Settings
from news_client.logging import get_logger
from news_client.normalize import backend_origin

PUBLISHED = "published"


class ApiClient:
    """Thin wrapper over the site's REST endpoints.

    Implements :class:`~news_client.api.base.ContentFetchService` plus the
    engagement endpoints (likes, shares, comments, newsletter) whose results
    the article cache reflects. All failures surface as :class:`ApiError`.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = backend_origin(base_url)
        self._token = token
        self._timeout = timeout
        self._transport = transport
        self._client = client or self._build_client()
        self._owns_client = client is None
        self._log = get_logger()

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: httpx.BaseTransport | None = None
    ) -> ApiClient:
        return cls(
            settings.api_url,
            token=settings.api_token,
            timeout=settings.timeout,
            transport=transport,
        )

    def _build_client(self) -> httpx.Client:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        kwargs: dict[str, Any] = {
            "base_url": self.base_url,
            "timeout": self._timeout,
            "headers": headers,
            "follow_redirects": True,
        }
        if self._transport:
            kwargs["transport"] = self._transport
        return httpx.Client(**kwargs)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()

    # Articles

    def fetch_published_articles(self) -> list[dict[str, Any]]:
        """Return every published article."""
        payload = self._request("GET", "/api/articles", params={"status": PUBLISHED})
        return _extract_list(payload, "articles")

    def fetch_published_articles_by_category(
        self, category: str, *, timeout: float | None = None
    ) -> list[dict[str, Any]]:
        """Return the published articles of one category, in server order."""
        payload = self._request(
            "GET",
            f"/api/articles/type/{_segment(category)}",
            params={"status": PUBLISHED},
            timeout=timeout,
        )
        return _extract_list(payload, "articles")

    def fetch_article_by_slug(self, slug: str) -> dict[str, Any]:
        return self._expect_object(
            self._request("GET", f"/api/articles/slug/{_segment(slug)}")
        )

    def fetch_article_by_id(self, article_id: str) -> dict[str, Any]:
        return self._expect_object(
            self._request("GET", f"/api/articles/{_segment(article_id)}")
        )

    def fetch_article_by_identifier(self, identifier: str) -> dict[str, Any]:
        """Fetch an article by slug, retrying as an id if that fails.

        Raises:
            ArticleNotFoundError: If both lookups answer 404.
            ApiError: If the id lookup fails for any other reason.
        """
        try:
            return self.fetch_article_by_slug(identifier)
        except ApiError as slug_error:
            self._log.debug(
                "Slug lookup failed, trying id",
                identifier=identifier,
                status_code=slug_error.status_code,
            )
            try:
                return self.fetch_article_by_id(identifier)
            except ApiError as id_error:
                if slug_error.status_code == 404 and id_error.status_code == 404:
                    raise ArticleNotFoundError(identifier, url=id_error.url) from id_error
                raise

    def search_articles(
        self,
        query: str,
        *,
        category: str | None = None,
        limit: int = SEARCH_DEFAULT_LIMIT,
    ) -> list[dict[str, Any]]:
        """Full-text search over published articles."""
        params: dict[str, Any] = {"q": query, "limit": limit}
        if category:
            params["category"] = category
        payload = self._request("GET", "/api/articles/search", params=params)
        return _extract_list(payload, "articles")

    def toggle_like(self, article_id: str) -> dict[str, Any]:
        """Like or unlike an article as the signed-in user."""
        return self._expect_object(
            self._request("POST", f"/api/articles/{_segment(article_id)}/like")
        )

    def share_article(self, article_id: str, platform: str) -> dict[str, Any]:
        """Record a share of an article on ``platform``."""
        return self._expect_object(
            self._request(
                "POST",
                f"/api/articles/{_segment(article_id)}/share",
                json={"platform": platform},
            )
        )

    # Comments

    def fetch_comments(
        self, article_id: str, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        payload = self._request(
            "GET",
            f"/api/comments/article/{_segment(article_id)}",
            params=dict(params or {}),
        )
        return _extract_list(payload, "comments")

    def post_comment(
        self, article_id: str, content: str, parent_id: str | None = None
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"content": content}
        if parent_id:
            body["parentComment"] = parent_id
        return self._expect_object(
            self._request(
                "POST", f"/api/comments/article/{_segment(article_id)}", json=body
            )
        )

    # Newsletter

    def subscribe_newsletter(
        self, email: str, preferences: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        return self._expect_object(
            self._request(
                "POST",
                "/api/newsletter/subscribe",
                json={"email": email, "preferences": dict(preferences or {})},
            )
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        timeout: float | None = None,
    ) -> Any:
        """Send a request and decode its JSON body.

        Raises:
            ApiError: On transport failure, non-2xx status or invalid JSON.
        """
        kwargs: dict[str, Any] = {}
        if params:
            kwargs["params"] = params
        if json is not None:
            kwargs["json"] = json
        if timeout is not None:
            kwargs["timeout"] = timeout

        url = f"{self.base_url}{path}"
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise ApiError(str(e) or type(e).__name__, url=url) from e

        if response.is_error:
            raise ApiError(
                _error_message(response), url=url, status_code=response.status_code
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(
                "Invalid JSON in response", url=url, status_code=response.status_code
            ) from e

    @staticmethod
    def _expect_object(payload: Any) -> dict[str, Any]:
        if isinstance(payload, dict):
            return payload
        raise ApiError(f"Expected a JSON object, got {type(payload).__name__}")


def _segment(value: str) -> str:
    """Quote a value for use as a single URL path segment."""
    return quote(str(value), safe="")


def _extract_list(payload: Any, key: str) -> list[dict[str, Any]]:
    """Pull a list of objects out of ``{key: [...]}``; anything else is empty."""
    if isinstance(payload, dict):
        items = payload.get(key)
    elif isinstance(payload, list):
        items = payload
    else:
        items = None
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def _error_message(response: httpx.Response) -> str:
    """Prefer the server's own ``message`` over a generic status line."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Unexpected status {response.status_code}"
