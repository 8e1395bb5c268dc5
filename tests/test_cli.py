"""Tests for the CLI module."""

from __future__ import annotations

from collections.abc import Callable, Generator
from contextlib import contextmanager
from typing import Any

import httpx
import pytest
from typer.testing import CliRunner

from news_client import __version__
from news_client.api import ApiClient
from news_client.cache import ArticleCache
from news_client.cli import app
from news_client.service import ArticleService

runner = CliRunner()

PayloadFactory = Callable[..., dict[str, Any]]
Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def serve(monkeypatch: pytest.MonkeyPatch) -> Callable[[Handler], list[str]]:
    """Route CLI requests to a mock HTTP handler; returns the requested paths."""

    def install(handler: Handler) -> list[str]:
        paths: list[str] = []

        def recording(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return handler(request)

        @contextmanager
        def mock_open_service() -> Generator[ArticleService, None, None]:
            transport = httpx.MockTransport(recording)
            with ApiClient("https://api.example.com", transport=transport) as client:
                yield ArticleService(client, ArticleCache())

        monkeypatch.setattr("news_client.cli.open_service", mock_open_service)
        return paths

    return install


class TestCliBasics:
    """Tests for global options."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("category", "article", "search"):
            assert command in result.stdout


class TestCliCategory:
    """Tests for the category command."""

    def test_lists_newest_first(
        self, serve: Callable[[Handler], list[str]], make_payload: PayloadFactory
    ) -> None:
        payloads = [
            make_payload("older", "2024-03-01T00:00:00Z"),
            make_payload("newer", "2024-03-02T00:00:00Z"),
        ]
        paths = serve(lambda request: httpx.Response(200, json={"articles": payloads}))

        result = runner.invoke(app, ["category", "etoile-du-sahel"])

        assert result.exit_code == 0
        assert paths == ["/api/articles/type/etoile-du-sahel"]
        assert "Etoile Du Sahel" in result.stdout
        assert result.stdout.index("Article newer") < result.stdout.index("Article older")

    def test_localized_category_name(
        self, serve: Callable[[Handler], list[str]], make_payload: PayloadFactory
    ) -> None:
        serve(lambda request: httpx.Response(200, json={"articles": [make_payload("a")]}))

        result = runner.invoke(app, ["category", "the-beautiful-game", "--lang", "fr"])

        assert result.exit_code == 0
        assert "Le Beau Jeu" in result.stdout

    def test_case_insensitive(
        self, serve: Callable[[Handler], list[str]]
    ) -> None:
        paths = serve(lambda request: httpx.Response(200, json={"articles": []}))

        result = runner.invoke(app, ["category", "ARCHIVE"])

        assert result.exit_code == 0
        assert paths == ["/api/articles/type/archive"]
        assert "No articles found." in result.stdout

    def test_unknown_category(self, serve: Callable[[Handler], list[str]]) -> None:
        paths = serve(lambda request: httpx.Response(200, json={"articles": []}))

        result = runner.invoke(app, ["category", "cricket"])

        assert result.exit_code == 1
        assert "category must be one of" in result.stdout
        assert paths == []

    def test_unknown_language(self, serve: Callable[[Handler], list[str]]) -> None:
        serve(lambda request: httpx.Response(200, json={"articles": []}))

        result = runner.invoke(app, ["category", "archive", "--lang", "de"])

        assert result.exit_code == 1
        assert "language must be one of" in result.stdout

    def test_api_failure(self, serve: Callable[[Handler], list[str]]) -> None:
        serve(lambda request: httpx.Response(500, json={"message": "Database down"}))

        result = runner.invoke(app, ["category", "archive"])

        assert result.exit_code == 1
        assert "Database down" in result.stdout


class TestCliArticle:
    """Tests for the article command."""

    def test_shows_article_and_navigation(
        self, serve: Callable[[Handler], list[str]], make_payload: PayloadFactory
    ) -> None:
        a = make_payload("a", "2024-03-03T00:00:00Z")
        b = make_payload(
            "b",
            "2024-03-02T00:00:00Z",
            translations={
                "en": {
                    "title": "Derby report",
                    "content": [
                        {"type": "heading", "content": "First half"},
                        {"type": "paragraph", "content": "<p>A tense <b>start</b>.</p>"},
                    ],
                }
            },
        )
        c = make_payload("c", "2024-03-01T00:00:00Z")

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/articles/slug/b-slug":
                return httpx.Response(200, json=b)
            return httpx.Response(200, json={"articles": [c, b, a]})

        serve(handler)

        result = runner.invoke(app, ["article", "b-slug"])

        assert result.exit_code == 0
        assert "Derby report" in result.stdout
        assert "FIRST HALF" in result.stdout
        assert "A tense start." in result.stdout
        assert "Previous: Article c" in result.stdout
        assert "Next: Article a" in result.stdout

    def test_navigation_hidden_when_unavailable(
        self, serve: Callable[[Handler], list[str]], make_payload: PayloadFactory
    ) -> None:
        only = make_payload("only")

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.startswith("/api/articles/slug/"):
                return httpx.Response(200, json=only)
            return httpx.Response(503)

        serve(handler)

        result = runner.invoke(app, ["article", "only-slug"])

        assert result.exit_code == 0
        assert "Article only" in result.stdout
        assert "Previous:" not in result.stdout
        assert "Next:" not in result.stdout

    def test_not_found(self, serve: Callable[[Handler], list[str]]) -> None:
        paths = serve(lambda request: httpx.Response(404, json={"message": "Article not found"}))

        result = runner.invoke(app, ["article", "ghost"])

        assert result.exit_code == 1
        assert "Article not found: ghost" in result.stdout
        assert paths == ["/api/articles/slug/ghost", "/api/articles/ghost"]

    def test_identifier_case_and_accents_kept(
        self, serve: Callable[[Handler], list[str]], make_payload: PayloadFactory
    ) -> None:
        """French slugs reach the API exactly as typed."""
        slug = "Défaite-à-Radès"
        article = make_payload("d", slug=slug)

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.startswith("/api/articles/slug/"):
                return httpx.Response(200, json=article)
            return httpx.Response(503)

        paths = serve(handler)

        result = runner.invoke(app, ["article", slug])

        assert result.exit_code == 0
        assert paths[0] == f"/api/articles/slug/{slug}"
        assert "Article d" in result.stdout

    def test_invalid_identifier(self, serve: Callable[[Handler], list[str]]) -> None:
        paths = serve(lambda request: httpx.Response(200, json={}))

        result = runner.invoke(app, ["article", "not a slug"])

        assert result.exit_code == 1
        assert paths == []


class TestCliSearch:
    """Tests for the search command."""

    def test_search_results(
        self, serve: Callable[[Handler], list[str]], make_payload: PayloadFactory
    ) -> None:
        paths = serve(lambda request: httpx.Response(200, json={"articles": [make_payload("a")]}))

        result = runner.invoke(app, ["search", "derby", "--category", "archive"])

        assert result.exit_code == 0
        assert paths == ["/api/articles/search"]
        assert "Article a" in result.stdout

    def test_short_query_prints_nothing_found(
        self, serve: Callable[[Handler], list[str]]
    ) -> None:
        paths = serve(lambda request: httpx.Response(200, json={"articles": []}))

        result = runner.invoke(app, ["search", "d"])

        assert result.exit_code == 0
        assert paths == []
        assert "No articles found." in result.stdout

    def test_search_failure(self, serve: Callable[[Handler], list[str]]) -> None:
        serve(lambda request: httpx.Response(500))

        result = runner.invoke(app, ["search", "derby"])

        assert result.exit_code == 1
        assert "Search failed" in result.stdout
