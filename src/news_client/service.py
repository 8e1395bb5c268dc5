"""Article use cases shared by every front-end."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from news_client.api import ApiClient, ApiError, ArticleNotFoundError
from news_client.cache import ArticleCache
from news_client.config import (
    NAVIGATION_TIMEOUT,
    SEARCH_DEFAULT_LIMIT,
    SEARCH_MIN_QUERY_LENGTH,
)
from news_client.logging import get_logger
from news_client.models import ArticleRecord, Likes
from news_client.navigation import Navigation, NavigationResolver
from news_client.normalize import normalize_articles


class ArticleService:
    """Fetches articles through the API and keeps the cache current.

    Network and server failures are absorbed here: list operations return an
    empty list, single lookups return None, and the message is kept in
    :attr:`last_error` so a front-end can offer a retry.
    """

    def __init__(
        self,
        client: ApiClient,
        cache: ArticleCache,
        *,
        navigation_timeout: float = NAVIGATION_TIMEOUT,
    ) -> None:
        self._client = client
        self._cache = cache
        self._backend_url = client.base_url
        self._navigator = NavigationResolver(
            cache,
            client,
            backend_url=self._backend_url,
            timeout=navigation_timeout,
        )
        self._log = get_logger()
        self.last_error: str | None = None

    @property
    def cache(self) -> ArticleCache:
        return self._cache

    def fetch_all_articles(self) -> list[ArticleRecord]:
        """Fetch every published article and cache it."""
        self.last_error = None
        try:
            payloads = self._client.fetch_published_articles()
        except ApiError as e:
            return self._absorb(e, "Failed to fetch articles", [])

        records = normalize_articles(payloads, self._backend_url)
        self._cache.cache_articles(records)
        self._log.info("Articles fetched", count=len(records))
        return records

    def fetch_articles_by_category(
        self, category: str, use_cache: bool = True
    ) -> list[ArticleRecord]:
        """Return a category's articles newest first, from cache when possible.

        Args:
            category: Category slug.
            use_cache: Whether a previously cached list may be returned.
        """
        self.last_error = None
        if use_cache:
            cached = self._cache.get_category_articles(category)
            if cached is not None:
                self._log.debug("Using cached category", category=category, count=len(cached))
                return list(cached)

        try:
            payloads = self._client.fetch_published_articles_by_category(category)
        except ApiError as e:
            return self._absorb(e, "Failed to fetch articles", [], category=category)

        records = normalize_articles(payloads, self._backend_url)
        ordered = self._cache.cache_category_articles(category, records)
        self._log.info("Category fetched", category=category, count=len(ordered))
        return list(ordered)

    def fetch_article(self, identifier: str) -> ArticleRecord | None:
        """Fetch one article by slug or id and cache it.

        Returns:
            The article, or None if it does not exist or the request failed.
        """
        self.last_error = None
        try:
            payload = self._client.fetch_article_by_identifier(identifier)
        except ArticleNotFoundError as e:
            self.last_error = e.message
            self._log.info("Article not found", identifier=identifier)
            return None
        except ApiError as e:
            return self._absorb(e, "Failed to fetch article", None, identifier=identifier)

        records = normalize_articles([payload], self._backend_url)
        if not records:
            self.last_error = "Invalid article data"
            return None
        self._cache.cache_articles(records)
        return records[0]

    def get_navigation(self, current: ArticleRecord) -> Navigation:
        """Return the previous/next articles around ``current``."""
        return self._navigator.resolve(current)

    def update_comment_count(self, article_id: str, count: int) -> ArticleRecord | None:
        """Set the cached comment count of an article and notify views."""
        return self._cache.update_article(article_id, {"comments": count})

    def post_comment(
        self, article_id: str, content: str, parent_id: str | None = None
    ) -> dict[str, Any] | None:
        """Post a comment and bump the cached comment count.

        Returns:
            The created comment, or None if posting failed.
        """
        self.last_error = None
        try:
            comment = self._client.post_comment(article_id, content, parent_id)
        except ApiError as e:
            return self._absorb(e, "Failed to post comment", None, article_id=article_id)

        current = self._cache.get_article(article_id)
        if current is not None:
            self.update_comment_count(article_id, current.comments + 1)
        return comment

    def toggle_like(self, article_id: str) -> ArticleRecord | None:
        """Like or unlike an article and apply the new counter to the cache.

        Returns:
            The updated cached record, or None if the request failed or the
            article is not cached.
        """
        self.last_error = None
        try:
            result = self._client.toggle_like(article_id)
        except ApiError as e:
            return self._absorb(e, "Failed to toggle like", None, article_id=article_id)

        fields: dict[str, Any] = {}
        likes = result.get("likes")
        if isinstance(likes, Mapping):
            fields["likes"] = Likes(
                count=int(likes.get("count") or 0),
                users=tuple(str(user) for user in likes.get("users") or ()),
            )
        elif isinstance(likes, int):
            current = self._cache.get_article(article_id)
            users = current.likes.users if current is not None else ()
            fields["likes"] = Likes(count=likes, users=users)
        if "isLiked" in result:
            fields["is_liked_by_current_user"] = bool(result["isLiked"])

        if not fields:
            return self._cache.get_article(article_id)
        return self._cache.update_article(article_id, fields)

    def share(self, article_id: str, platform: str) -> bool:
        """Record a share; returns whether the API accepted it."""
        self.last_error = None
        try:
            self._client.share_article(article_id, platform)
        except ApiError as e:
            return self._absorb(e, "Failed to share article", False, article_id=article_id)
        return True

    def search(
        self,
        query: str,
        category: str | None = None,
        limit: int = SEARCH_DEFAULT_LIMIT,
    ) -> list[ArticleRecord]:
        """Search published articles.

        Queries shorter than two characters return nothing without a request.
        """
        self.last_error = None
        query = query.strip()
        if len(query) < SEARCH_MIN_QUERY_LENGTH:
            return []
        try:
            payloads = self._client.search_articles(query, category=category, limit=limit)
        except ApiError as e:
            return self._absorb(e, "Search failed", [], query=query)
        return normalize_articles(payloads, self._backend_url)

    def subscribe_newsletter(
        self, email: str, preferences: Mapping[str, Any] | None = None
    ) -> bool:
        """Subscribe an address to the newsletter."""
        self.last_error = None
        try:
            self._client.subscribe_newsletter(email, preferences)
        except ApiError as e:
            return self._absorb(e, "Newsletter subscription failed", False)
        return True

    def _absorb(self, error: ApiError, event: str, fallback: Any, **context: Any) -> Any:
        """Log a failed request, remember its message and return ``fallback``."""
        self.last_error = error.message
        self._log.error(
            event, error=error.message, status_code=error.status_code, **context
        )
        return fallback
