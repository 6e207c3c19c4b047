"""Place category constants.

Categories are free-form on submission; known keys exist so the frontend
filters line up and old spellings collapse onto one key.
"""

KNOWN_CATEGORIES = {
    'cafe',
    'library',
    'bookstore',
    'park',
    'study-space',
    'other',
}

# Legacy key -> current key mapping
LEGACY_CATEGORY_MAP = {
    'coffee': 'cafe',
    'coffee-shop': 'cafe',
    'book-cafe': 'cafe',
    'bookcafe': 'cafe',
    'public-library': 'library',
    'book-store': 'bookstore',
    'bookshop': 'bookstore',
    'study-cafe': 'study-space',
    'studycafe': 'study-space',
    'outdoor': 'park',
}


def normalize_category(category: str | None) -> str | None:
    """Normalize a category key.

    - Lowercases and strips whitespace, spaces become hyphens
    - Converts legacy keys to their current equivalents
    - Returns unknown keys as-is, and None for blank input
    """
    if not isinstance(category, str):
        return None
    key = '-'.join(category.lower().split())
    if not key:
        return None
    return LEGACY_CATEGORY_MAP.get(key, key)
