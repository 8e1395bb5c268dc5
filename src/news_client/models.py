"""Article records as held by the client cache."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

from news_client.config import DEFAULT_AUTHOR, DEFAULT_LANGUAGE
from news_client.content import ContentBlock

DISPLAY_DATE_FORMAT = "%B %d, %Y"
_EPOCH_MIN = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class Translation:
    """Title, excerpt and body of an article in one language."""

    title: str = ""
    excerpt: str = ""
    content: tuple[ContentBlock, ...] = ()


@dataclass(frozen=True)
class Likes:
    """Like counter plus the ids of users who liked."""

    count: int = 0
    users: tuple[str, ...] = ()


@dataclass(frozen=True)
class ArticleRecord:
    """Normalized in-memory representation of one published article.

    Records are immutable; partial updates produce a new record through
    :meth:`merged`. Alternate identity keys are folded into ``id`` when the
    record is built, so ``id`` is the only primary key the cache uses.

    Attributes:
        id: Canonical identifier. Records without one are never cached.
        slug: Human-readable alternate key.
        translations: Language code to localized content.
        category: Category slug.
        author: Author display name.
        author_image: Absolute URL of the author's picture.
        image: Absolute URL of the cover image.
        date: Locale-formatted display date. Never used for ordering.
        raw_date: Sortable publication timestamp.
        likes: Like counter and likers.
        comments: Number of comments.
        views: Number of views.
        status: Publication status (published, draft, archived).
        tags: Free-form tags.
        is_liked_by_current_user: Whether the signed-in user liked it.
    """

    id: str | None
    slug: str | None = None
    translations: Mapping[str, Translation] = field(default_factory=dict)
    category: str | None = None
    author: str = DEFAULT_AUTHOR
    author_image: str | None = None
    image: str | None = None
    date: str = ""
    raw_date: datetime | None = None
    likes: Likes = Likes()
    comments: int = 0
    views: int = 0
    status: str | None = None
    tags: tuple[str, ...] = ()
    is_liked_by_current_user: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "translations", MappingProxyType(dict(self.translations))
        )

    @property
    def sort_key(self) -> datetime:
        """Timestamp used for chronological ordering.

        Falls back to parsing the display date, then to the earliest
        representable time so undated records sink to the end.
        """
        if self.raw_date is not None:
            return _as_aware(self.raw_date)
        if self.date:
            try:
                return _as_aware(datetime.strptime(self.date, DISPLAY_DATE_FORMAT))
            except ValueError:
                pass
        return _EPOCH_MIN

    def title(self, language: str = DEFAULT_LANGUAGE) -> str:
        return self.localized(language).title

    def localized(self, language: str = DEFAULT_LANGUAGE) -> Translation:
        """Return content in ``language``, falling back to English, then empty."""
        translation = self.translations.get(language)
        if translation is None:
            translation = self.translations.get(DEFAULT_LANGUAGE)
        return translation if translation is not None else Translation()

    def matches(self, identifier: str | None) -> bool:
        """Check whether ``identifier`` names this record by id or slug."""
        if not identifier:
            return False
        return identifier == self.id or identifier == self.slug

    def merged(self, fields: Mapping[str, Any]) -> ArticleRecord:
        """Return a copy with the given top-level fields replaced.

        The id is the cache key and cannot be replaced.

        Raises:
            ValueError: If a field name is not an ArticleRecord field, or is ``id``.
        """
        unknown = set(fields) - _FIELD_NAMES
        if unknown:
            raise ValueError(f"Unknown article fields: {', '.join(sorted(unknown))}")
        if "id" in fields:
            raise ValueError("Article id cannot be changed")
        return dataclasses.replace(self, **fields)


_FIELD_NAMES = frozenset(f.name for f in dataclasses.fields(ArticleRecord))


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
