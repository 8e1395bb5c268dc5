"""REST API access for the article core."""

from news_client.api.base import ApiError, ArticleNotFoundError, ContentFetchService
from news_client.api.client import ApiClient

__all__ = ["ApiClient", "ApiError", "ArticleNotFoundError", "ContentFetchService"]
