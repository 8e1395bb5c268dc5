"""Shared in-memory article cache with change notification."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from news_client.logging import get_logger
from news_client.models import ArticleRecord

ArticleSubscriber = Callable[[str, ArticleRecord], None]
Unsubscribe = Callable[[], None]


class ArticleCache:
    """Registry of ArticleRecords by id, plus newest-first lists per category.

    One instance is created by the composition root (the CLI, or a test) and
    handed to every component that reads or writes articles, so views built
    from the same cache stay consistent without refetching.

    Entries are never expired; they live as long as the cache object and are
    only replaced by fresher records with the same id.

    Category lists are a derived view: the records in them are also stored
    by id, which remains the source of truth for a single article.

    A re-entrant lock guards all state so the cache can be shared between
    threads. Subscribers are always invoked outside the lock.
    """

    def __init__(self) -> None:
        self._articles: dict[str, ArticleRecord] = {}
        self._categories: dict[str, tuple[ArticleRecord, ...]] = {}
        self._subscribers: list[ArticleSubscriber] = []
        self._lock = threading.RLock()
        self._log = get_logger()

    def __len__(self) -> int:
        with self._lock:
            return len(self._articles)

    def __contains__(self, article_id: object) -> bool:
        with self._lock:
            return article_id in self._articles

    def get_article(self, article_id: str) -> ArticleRecord | None:
        """Return the cached record for ``article_id``, if any."""
        with self._lock:
            return self._articles.get(article_id)

    def find_article(self, identifier: str) -> ArticleRecord | None:
        """Look up a record by id, falling back to a slug scan."""
        with self._lock:
            record = self._articles.get(identifier)
            if record is not None:
                return record
            for candidate in self._articles.values():
                if candidate.slug == identifier:
                    return candidate
        return None

    def cache_articles(self, records: Iterable[ArticleRecord]) -> None:
        """Insert or overwrite records by id.

        Records without an id are skipped. Subscribers are not notified;
        this is the bulk path used after a fetch.
        """
        with self._lock:
            for record in records:
                if record.id:
                    self._articles[record.id] = record

    def update_article(
        self, article_id: str, fields: Mapping[str, Any]
    ) -> ArticleRecord | None:
        """Apply a partial update to a cached record and notify subscribers.

        The merged record is stored before any subscriber runs, so a
        subscriber that reads the cache sees the updated state. A subscriber
        that raises is logged and does not stop delivery to the others.

        Args:
            article_id: Id of the record to update.
            fields: Top-level fields to replace.

        Returns:
            The merged record, or None if ``article_id`` is not cached.

        Raises:
            ValueError: If ``fields`` names an unknown field or ``id``.
        """
        with self._lock:
            current = self._articles.get(article_id)
            if current is None:
                # Usually a view finishing a request after the article left it
                self._log.warning(
                    "Article not found in cache, cannot update",
                    article_id=article_id,
                    fields=sorted(fields),
                    cached_count=len(self._articles),
                )
                return None

            updated = current.merged(fields)
            self._articles[article_id] = updated
            self._replace_in_categories(updated)
            subscribers = list(self._subscribers)

        self._log.debug(
            "Article updated",
            article_id=article_id,
            fields=sorted(fields),
            subscriber_count=len(subscribers),
        )
        for callback in subscribers:
            try:
                callback(article_id, updated)
            except Exception:
                self._log.exception(
                    "Article subscriber failed",
                    article_id=article_id,
                    subscriber=getattr(callback, "__qualname__", repr(callback)),
                )
        return updated

    def subscribe(self, callback: ArticleSubscriber) -> Unsubscribe:
        """Register ``callback`` for every future update of any article.

        Callbacks receive ``(article_id, merged_record)`` and filter by id
        themselves.

        Returns:
            A function that removes the registration. Calling it more than
            once is harmless.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                try:
                    self._subscribers.remove(callback)
                except ValueError:
                    pass

        return unsubscribe

    def cache_category_articles(
        self, category: str, records: Iterable[ArticleRecord]
    ) -> tuple[ArticleRecord, ...]:
        """Store a category's articles sorted newest first.

        The sort is stable, so records with equal dates keep their fetch
        order. The whole list is replaced at once, and the records are also
        cached by id.

        Returns:
            The sorted sequence as stored.
        """
        records = list(records)
        ordered = tuple(sorted(records, key=lambda r: r.sort_key, reverse=True))
        with self._lock:
            self._categories[category] = ordered
            self.cache_articles(records)
        self._log.debug("Category cached", category=category, count=len(ordered))
        return ordered

    def get_category_articles(self, category: str) -> tuple[ArticleRecord, ...] | None:
        """Return the cached newest-first list for ``category``.

        Returns:
            None if the category was never populated (the caller must fetch),
            an empty tuple if it was fetched and has no articles.
        """
        with self._lock:
            return self._categories.get(category)

    def _replace_in_categories(self, updated: ArticleRecord) -> None:
        # Keep category lists showing the same record as the id map
        for category, records in self._categories.items():
            if any(record.id == updated.id for record in records):
                self._categories[category] = tuple(
                    updated if record.id == updated.id else record
                    for record in records
                )
