"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import datetime, timezone
from typing import Any

import httpx
import pytest

from news_client.api import ApiClient
from news_client.cache import ArticleCache
from news_client.models import ArticleRecord, Translation

API_URL = "https://api.example.com"

RecordFactory = Callable[..., ArticleRecord]
PayloadFactory = Callable[..., dict[str, Any]]


@pytest.fixture
def cache() -> ArticleCache:
    """Fresh, empty article cache."""
    return ArticleCache()


@pytest.fixture
def make_record() -> RecordFactory:
    """Factory for ArticleRecords dated on a given day of March 2024."""

    def factory(
        article_id: str | None,
        day: int | None = 1,
        *,
        category: str = "etoile-du-sahel",
        slug: str | None = None,
        title: str | None = None,
        **fields: Any,
    ) -> ArticleRecord:
        if day:
            fields.setdefault("raw_date", datetime(2024, 3, day, tzinfo=timezone.utc))
        return ArticleRecord(
            id=article_id,
            slug=slug if slug is not None else (f"{article_id}-slug" if article_id else None),
            translations={"en": Translation(title=title or f"Article {article_id}")},
            category=category,
            **fields,
        )

    return factory


@pytest.fixture
def make_payload() -> PayloadFactory:
    """Factory for raw article objects as the API returns them."""

    def factory(
        article_id: str | None,
        published_at: str | None = "2024-03-01T10:00:00Z",
        **overrides: Any,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "translations": {
                "en": {
                    "title": f"Article {article_id}",
                    "excerpt": "",
                    "content": [{"type": "paragraph", "content": "<p>Body</p>"}],
                }
            },
            "category": "etoile-du-sahel",
            "slug": f"{article_id}-slug" if article_id else None,
            "status": "published",
            "likes": {"count": 0, "users": []},
            "commentCount": 0,
            "views": 0,
        }
        if article_id is not None:
            payload["_id"] = article_id
        if published_at is not None:
            payload["publishedAt"] = published_at
        payload.update(overrides)
        return payload

    return factory


ApiFactory = Callable[[Callable[[httpx.Request], httpx.Response]], ApiClient]


@pytest.fixture
def make_api() -> Generator[ApiFactory, None, None]:
    """Factory for an ApiClient backed by an httpx.MockTransport handler."""
    clients: list[ApiClient] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> ApiClient:
        client = ApiClient(API_URL, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
