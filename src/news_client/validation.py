"""Validation utilities for news-client."""

import re

from news_client.categories import Category
from news_client.config import SUPPORTED_LANGUAGES

# Slug pattern: lowercase alphanumeric, hyphens, underscores
# Must start with letter or number
SLUG_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")
SLUG_MAX_LENGTH = 200
# Characters that would split an identifier out of its URL path segment
IDENTIFIER_FORBIDDEN = re.compile(r"[\s/?#]")


class ValidationError(Exception):
    """Raised when validation fails."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


def validate_slug(value: str, field_name: str = "value") -> str:
    """Validate and normalize a slug.

    Args:
        value: The string to validate.
        field_name: Name of the field for error messages.

    Returns:
        The normalized (stripped, lowercase) slug.

    Raises:
        ValidationError: If the value is not a valid slug.
    """
    normalized = (value or "").strip().lower()
    if not normalized:
        raise ValidationError(field_name, "cannot be empty")

    if len(normalized) > SLUG_MAX_LENGTH:
        raise ValidationError(field_name, f"cannot exceed {SLUG_MAX_LENGTH} characters")

    if not SLUG_PATTERN.match(normalized):
        raise ValidationError(
            field_name,
            "must contain only lowercase letters, numbers, hyphens, and underscores, "
            "and must start with a letter or number",
        )

    return normalized


def validate_category(value: str) -> str:
    """Validate a category slug against the known categories.

    Returns:
        The normalized category slug.

    Raises:
        ValidationError: If the value is not a known category.
    """
    normalized = validate_slug(value, field_name="category")
    known = [category.value for category in Category]
    if normalized not in known:
        raise ValidationError("category", f"must be one of: {', '.join(known)}")
    return normalized


def validate_language(value: str) -> str:
    """Validate a content language code."""
    normalized = (value or "").strip().lower()
    if normalized not in SUPPORTED_LANGUAGES:
        raise ValidationError(
            "language", f"must be one of: {', '.join(SUPPORTED_LANGUAGES)}"
        )
    return normalized


def validate_identifier(value: str, field_name: str = "article") -> str:
    """Validate an article slug or id as typed by a user.

    Unlike :func:`validate_slug`, case and non-ASCII letters are kept, since
    published slugs may carry accented or Arabic characters.

    Returns:
        The stripped identifier.

    Raises:
        ValidationError: If the value is empty, too long, or contains
            whitespace or URL delimiters.
    """
    normalized = (value or "").strip()
    if not normalized:
        raise ValidationError(field_name, "cannot be empty")

    if len(normalized) > SLUG_MAX_LENGTH:
        raise ValidationError(field_name, f"cannot exceed {SLUG_MAX_LENGTH} characters")

    if IDENTIFIER_FORBIDDEN.search(normalized):
        raise ValidationError(
            field_name, "cannot contain whitespace, slashes, '?' or '#'"
        )

    return normalized
