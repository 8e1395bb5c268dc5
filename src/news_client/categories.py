"""Article categories and their localized display names."""

from enum import StrEnum

from news_client.config import DEFAULT_LANGUAGE


class Category(StrEnum):
    """Fixed set of sections articles are filed under."""

    ETOILE_DU_SAHEL = "etoile-du-sahel"
    THE_BEAUTIFUL_GAME = "the-beautiful-game"
    ALL_SPORTS_HUB = "all-sports-hub"
    ARCHIVE = "archive"


CATEGORY_NAMES: dict[str, dict[str, str]] = {
    Category.ETOILE_DU_SAHEL: {
        "en": "Etoile Du Sahel",
        "fr": "Étoile Du Sahel",
        "ar": "النجم الساحلي",
    },
    Category.THE_BEAUTIFUL_GAME: {
        "en": "The Beautiful Game",
        "fr": "Le Beau Jeu",
        "ar": "اللعبة الجميلة",
    },
    Category.ALL_SPORTS_HUB: {
        "en": "All-Sports Hub",
        "fr": "Centre Omnisports",
        "ar": "مركز كل الرياضات",
    },
    Category.ARCHIVE: {
        "en": "Archive",
        "fr": "Archives",
        "ar": "الأرشيف",
    },
}


def category_display_name(category: str, language: str = DEFAULT_LANGUAGE) -> str:
    """Return the display name of a category in the given language.

    Unknown languages fall back to English; unknown categories are shown
    as their raw slug.
    """
    names = CATEGORY_NAMES.get(category)
    if names is None:
        return category
    return names.get(language) or names[DEFAULT_LANGUAGE]
