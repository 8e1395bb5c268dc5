"""Normalization of raw API article payloads into ArticleRecords."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any
from urllib.parse import urlparse

from news_client.config import DEFAULT_AUTHOR, DEFAULT_AUTHOR_IMAGE
from news_client.content import parse_blocks
from news_client.logging import get_logger
from news_client.models import ArticleRecord, Likes, Translation


def backend_origin(api_url: str) -> str:
    """Return the backend origin media paths are served from.

    The API may be configured with a trailing ``/api`` segment; uploaded
    media lives beside it, not under it.
    """
    origin = api_url.strip().rstrip("/")
    if origin.endswith("/api"):
        origin = origin[: -len("/api")]
    return origin


def resolve_media_url(backend_url: str, path: str | None) -> str | None:
    """Resolve an image path to an absolute URL.

    Rules:
    - Empty paths resolve to None.
    - Fully-qualified http(s) URLs (CDN uploads) pass through unchanged.
    - Protocol-relative URLs get an https scheme.
    - Anything else is treated as a path on the backend origin.
    """
    stripped = (path or "").strip()
    if not stripped:
        return None

    if urlparse(stripped).scheme in {"http", "https"}:
        return stripped
    if stripped.startswith("//"):
        return f"https:{stripped}"

    if not stripped.startswith("/"):
        stripped = f"/{stripped}"
    return f"{backend_origin(backend_url)}{stripped}"


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp as sent by the API.

    Returns:
        The parsed datetime, or None if the value is missing or malformed.
    """
    if isinstance(value, datetime):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def format_display_date(value: datetime | None) -> str:
    """Format a timestamp the way article cards show it (``March 5, 2024``)."""
    if value is None:
        return ""
    return f"{value:%B} {value.day}, {value.year}"


def canonical_id(payload: Mapping[str, Any]) -> str | None:
    """Fold the API's alternate identity keys into one identifier."""
    for key in ("_id", "id"):
        value = payload.get(key)
        if value:
            return str(value)
    return None


def parse_translations(raw: Any) -> dict[str, Translation]:
    """Parse the per-language ``translations`` object of an article."""
    if not isinstance(raw, Mapping):
        return {}
    translations: dict[str, Translation] = {}
    for language, entry in raw.items():
        if not isinstance(entry, Mapping):
            continue
        translations[str(language)] = Translation(
            title=str(entry.get("title") or ""),
            excerpt=str(entry.get("excerpt") or ""),
            content=parse_blocks(entry.get("content")),
        )
    return translations


def normalize_article(payload: Mapping[str, Any], backend_url: str) -> ArticleRecord:
    """Build an ArticleRecord from one article as returned by the API.

    Args:
        payload: Raw article object.
        backend_url: API base URL; relative media paths are resolved against
            its origin.

    Returns:
        The normalized record. Its ``id`` is None when the payload carries no
        identifier; such records can be displayed but are never cached.
    """
    published = parse_timestamp(payload.get("publishedAt") or payload.get("createdAt"))

    author = payload.get("author")
    author_name = author.get("name") if isinstance(author, Mapping) else None

    likes = payload.get("likes")
    if not isinstance(likes, Mapping):
        likes = {}

    return ArticleRecord(
        id=canonical_id(payload),
        slug=payload.get("slug") or None,
        translations=parse_translations(payload.get("translations")),
        category=payload.get("category") or None,
        author=author_name or DEFAULT_AUTHOR,
        author_image=(
            resolve_media_url(backend_url, payload.get("authorImage"))
            or resolve_media_url(backend_url, DEFAULT_AUTHOR_IMAGE)
        ),
        image=resolve_media_url(backend_url, payload.get("image")),
        date=format_display_date(published),
        raw_date=published,
        likes=Likes(
            count=int(likes.get("count") or 0),
            users=tuple(str(user) for user in likes.get("users") or ()),
        ),
        comments=int(payload.get("commentCount") or 0),
        views=int(payload.get("views") or 0),
        status=payload.get("status") or None,
        tags=tuple(str(tag) for tag in payload.get("tags") or ()),
        is_liked_by_current_user=bool(payload.get("isLikedByCurrentUser")),
    )


def normalize_articles(
    payloads: Iterable[Any], backend_url: str
) -> list[ArticleRecord]:
    """Normalize a batch of payloads, skipping entries that fail to parse."""
    log = get_logger()
    records: list[ArticleRecord] = []
    for index, payload in enumerate(payloads):
        if not isinstance(payload, Mapping):
            log.warning("Skipping non-object article payload", position=index)
            continue
        try:
            records.append(normalize_article(payload, backend_url))
        except (AttributeError, TypeError, ValueError):
            log.exception(
                "Failed to normalize article",
                article_id=canonical_id(payload),
                position=index,
            )
    return records
