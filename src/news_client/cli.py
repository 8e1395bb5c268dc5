"""CLI module for news-client."""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from news_client import __version__
from news_client.api import ApiClient
from news_client.cache import ArticleCache
from news_client.categories import category_display_name
from news_client.config import SEARCH_DEFAULT_LIMIT, load_settings
from news_client.content import make_excerpt, render_plain_text
from news_client.logging import configure_logging, get_logger
from news_client.models import ArticleRecord
from news_client.navigation import Navigation
from news_client.service import ArticleService
from news_client.validation import (
    ValidationError,
    validate_category,
    validate_identifier,
    validate_language,
)

console = Console()

app = typer.Typer(
    name="news-client",
    help="Browse sports-news articles from the command line.",
    add_completion=False,
)

LanguageOption = Annotated[
    str, typer.Option("--lang", "-l", help="Content language (en, fr, ar)")
]


@contextmanager
def open_service() -> Generator[ArticleService, None, None]:
    """Build the article service for one command.

    The cache lives for the duration of the command and is shared by every
    lookup it makes.
    """
    settings = load_settings()
    with ApiClient.from_settings(settings) as client:
        yield ArticleService(
            client, ArticleCache(), navigation_timeout=settings.navigation_timeout
        )


def version_callback(value: bool) -> None:
    """Print version and exit.

    Args:
        value: Whether the version flag was provided.
    """
    if value:
        console.print(f"news-client version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    _ctx: typer.Context,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose output")
    ] = False,
    _version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """Browse sports-news articles from the command line."""
    configure_logging(verbose=verbose)
    if verbose:
        get_logger().debug("Verbose mode enabled")


@app.command(name="category")
def category_cmd(
    category: Annotated[str, typer.Argument(help="Category slug, e.g. etoile-du-sahel")],
    language: LanguageOption = "en",
) -> None:
    """List a category's articles, newest first."""
    category, language = _validated(category=category, language=language)

    with open_service() as service:
        articles = service.fetch_articles_by_category(category)
        if service.last_error:
            _fail(f"Failed to load {category}: {service.last_error}")

    print_articles(articles, language, title=category_display_name(category, language))


@app.command(name="article")
def article_cmd(
    identifier: Annotated[str, typer.Argument(help="Article slug or id")],
    language: LanguageOption = "en",
) -> None:
    """Show one article with links to its neighbours."""
    identifier = _validated_identifier(identifier)
    (language,) = _validated(language=language)

    with open_service() as service:
        article = service.fetch_article(identifier)
        if article is None:
            _fail(service.last_error or f"Article not found: {identifier}")
        navigation = service.get_navigation(article)

    print_article(article, language)
    print_navigation(navigation, language)


@app.command(name="search")
def search_cmd(
    query: Annotated[str, typer.Argument(help="Search text (at least 2 characters)")],
    category: Annotated[
        str | None, typer.Option("--category", "-c", help="Restrict to one category")
    ] = None,
    limit: Annotated[
        int, typer.Option("--limit", "-n", min=1, help="Maximum results")
    ] = SEARCH_DEFAULT_LIMIT,
    language: LanguageOption = "en",
) -> None:
    """Search published articles."""
    (language,) = _validated(language=language)
    if category is not None:
        (category,) = _validated(category=category)

    with open_service() as service:
        results = service.search(query, category=category, limit=limit)
        if service.last_error:
            _fail(f"Search failed: {service.last_error}")

    print_articles(results, language, title=f"Results for {query!r}")


def format_article_line(article: ArticleRecord, index: int, language: str) -> str:
    """Format one article for a listing.

    Args:
        article: The article to format.
        index: 1-based index for display.
        language: Content language.
    """
    localized = article.localized(language)
    lines = [f"[{index}] {escape(localized.title or '(untitled)')}"]
    meta = [
        article.date or "undated",
        f"{article.likes.count} likes",
        f"{article.comments} comments",
    ]
    lines.append(f"    {escape(' | '.join(meta))}")
    excerpt = localized.excerpt or make_excerpt(localized.content)
    if excerpt:
        lines.append(f"    {escape(excerpt)}")
    if article.slug or article.id:
        lines.append(f"    Slug: {escape(article.slug or article.id or '')}")
    return "\n".join(lines)


def print_articles(articles: list[ArticleRecord], language: str, title: str) -> None:
    """Print a list of articles.

    Args:
        articles: Articles in display order.
        language: Content language.
        title: Heading shown above the list.
    """
    if not articles:
        console.print("No articles found.")
        return

    console.print(f"\n[bold]{escape(title)}[/bold] ({len(articles)} articles)\n")
    console.print("=" * 80)
    for i, article in enumerate(articles, 1):
        console.print(format_article_line(article, i, language))
        console.print("-" * 80)


def print_article(article: ArticleRecord, language: str) -> None:
    """Print an article's header and body."""
    localized = article.localized(language)
    console.print(f"\n[bold]{escape(localized.title or '(untitled)')}[/bold]")

    meta = Table.grid(padding=(0, 2))
    meta.add_row("Category", escape(category_display_name(article.category or "", language)))
    meta.add_row("Author", escape(article.author))
    meta.add_row("Published", escape(article.date or "undated"))
    meta.add_row(
        "Engagement",
        f"{article.likes.count} likes, {article.comments} comments, {article.views} views",
    )
    console.print(meta)
    console.print("=" * 80)

    body = render_plain_text(localized.content) or localized.excerpt
    console.print(escape(body) if body else "[dim]No content.[/dim]")


def print_navigation(navigation: Navigation, language: str) -> None:
    """Print previous/next links; nothing at all when there are none."""
    if navigation.is_empty:
        return

    console.print("\n" + "-" * 80)
    if navigation.previous_article is not None:
        console.print(f"< Previous: {_link(navigation.previous_article, language)}")
    if navigation.next_article is not None:
        console.print(f"> Next: {_link(navigation.next_article, language)}")


def _link(article: ArticleRecord, language: str) -> str:
    title = article.title(language) or "(untitled)"
    return f"{escape(title)} ({escape(article.slug or article.id or '')})"


def _validated(**values: str) -> tuple[str, ...]:
    """Validate ``category`` and ``language`` options, exiting on error."""
    validators = {"category": validate_category, "language": validate_language}
    try:
        return tuple(validators[name](value) for name, value in values.items())
    except ValidationError as e:
        get_logger().error("Invalid option", field=e.field, error=e.message)
        _fail(f"{e.field} {e.message}")


def _validated_identifier(identifier: str) -> str:
    try:
        return validate_identifier(identifier)
    except ValidationError as e:
        get_logger().error("Invalid article identifier", identifier=identifier, error=e.message)
        _fail(f"article {e.message}")


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
