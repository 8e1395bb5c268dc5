"""Previous/next article resolution within a category."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from news_client.api.base import ApiError, ContentFetchService
from news_client.cache import ArticleCache
from news_client.config import DEFAULT_API_URL, NAVIGATION_TIMEOUT
from news_client.logging import get_logger
from news_client.models import ArticleRecord
from news_client.normalize import normalize_articles


@dataclass(frozen=True)
class Navigation:
    """Chronological neighbours of an article.

    Attributes:
        previous_article: The next older article in the category.
        next_article: The next newer article in the category.
    """

    previous_article: ArticleRecord | None = None
    next_article: ArticleRecord | None = None

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to link to and the controls are hidden."""
        return self.previous_article is None and self.next_article is None


NO_NAVIGATION = Navigation()


def find_article_index(
    records: Sequence[ArticleRecord], current: ArticleRecord
) -> int:
    """Return the position of ``current`` in ``records``, or -1.

    A record matches on id or on slug, since the same article may arrive
    from endpoints that disagree on which key they fill in.
    """
    for index, record in enumerate(records):
        if record.matches(current.id) or record.matches(current.slug):
            return index
    return -1


class NavigationResolver:
    """Finds the older and newer neighbours of an article in its category.

    The category list is read from the cache first. It is refreshed from
    the fetch service when it is missing, has at most one entry, or does not
    contain the current article, so a cold or stale cache never yields wrong
    neighbours. Every failure degrades to fewer links; nothing is raised.
    """

    def __init__(
        self,
        cache: ArticleCache,
        fetcher: ContentFetchService,
        *,
        backend_url: str = DEFAULT_API_URL,
        timeout: float = NAVIGATION_TIMEOUT,
    ) -> None:
        self._cache = cache
        self._fetcher = fetcher
        self._backend_url = backend_url
        self._timeout = timeout
        self._log = get_logger()

    def resolve(self, current: ArticleRecord) -> Navigation:
        """Compute previous/next links for ``current``.

        Args:
            current: The article being viewed.

        Returns:
            The neighbours; either or both may be None.
        """
        category = current.category
        if not category:
            self._log.debug("Article has no category", article_id=current.id)
            return NO_NAVIGATION

        cached = self._cache.get_category_articles(category)
        records: Sequence[ArticleRecord] = cached or ()

        if not self._is_usable(cached, current):
            self._log.debug(
                "Category cache unusable for navigation, refreshing",
                category=category,
                cached=cached is not None,
                count=len(records),
            )
            refreshed = self._refresh(category)
            if refreshed is not None:
                records = refreshed

        index = find_article_index(records, current)
        if index == -1:
            self._log.warning(
                "Current article not found in its category",
                article_id=current.id,
                slug=current.slug,
                category=category,
                count=len(records),
            )
            return NO_NAVIGATION

        # Newest first: a larger index is further back in time
        previous_article = records[index + 1] if index + 1 < len(records) else None
        next_article = records[index - 1] if index > 0 else None
        return Navigation(previous_article=previous_article, next_article=next_article)

    @staticmethod
    def _is_usable(
        cached: Sequence[ArticleRecord] | None, current: ArticleRecord
    ) -> bool:
        if cached is None or len(cached) <= 1:
            return False
        return find_article_index(cached, current) != -1

    def _refresh(self, category: str) -> tuple[ArticleRecord, ...] | None:
        """Refetch a category into the cache; None if the fetch failed."""
        try:
            payloads = self._fetcher.fetch_published_articles_by_category(
                category, timeout=self._timeout
            )
        except ApiError as e:
            self._log.error(
                "Failed to refresh category for navigation",
                category=category,
                error=e.message,
                status_code=e.status_code,
            )
            return None
        except Exception:
            self._log.exception("Unexpected error refreshing category", category=category)
            return None

        records = normalize_articles(payloads, self._backend_url)
        return self._cache.cache_category_articles(category, records)
