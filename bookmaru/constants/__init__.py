"""Shared constants for the application."""

from bookmaru.constants.categories import (
    KNOWN_CATEGORIES,
    LEGACY_CATEGORY_MAP,
    normalize_category,
)
from bookmaru.constants.languages import (
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
    LANGUAGE_NAMES,
    PLACE_STATUSES,
    opposite_language,
    normalize_language,
)

__all__ = [
    'KNOWN_CATEGORIES',
    'LEGACY_CATEGORY_MAP',
    'normalize_category',
    'SUPPORTED_LANGUAGES',
    'DEFAULT_LANGUAGE',
    'LANGUAGE_NAMES',
    'PLACE_STATUSES',
    'opposite_language',
    'normalize_language',
]
