"""Article cache, navigation and REST client for a sports-news site."""

__version__ = "0.1.0"
