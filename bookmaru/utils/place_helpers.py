"""Helpers for shaping place rows for display.

Rows are plain dicts (``Place.to_dict()`` output or anything with the same
keys). Every bilingual value falls back to the other language independently,
so a place that was never translated still shows its original content.
"""

import json
import logging

logger = logging.getLogger(__name__)


def _prefer(row: dict, name: str, is_ko: bool):
    """Pick a bilingual value, falling back to the other language."""
    first, second = ('ko', 'en') if is_ko else ('en', 'ko')
    value = row.get(f'{name}_{first}')
    if value is None or value == '':
        value = row.get(f'{name}_{second}')
    return value if value != '' else None


def parse_recommended_book(value):
    """
    Decode a stored recommended book.

    Accepts a JSON string or an already-decoded dict. Anything that is not an
    object with both ``title`` and ``author`` is treated as no recommendation.

    Returns:
        dict with title, author and optional link, or None
    """
    if value is None or value == '':
        return None

    parsed = value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except (TypeError, ValueError) as e:
            logger.debug(f"Failed to parse recommended book: {e}")
            return None

    if not isinstance(parsed, dict):
        return None
    if not parsed.get('title') or not parsed.get('author'):
        return None

    book = {'title': str(parsed['title']), 'author': str(parsed['author'])}
    if parsed.get('link'):
        book['link'] = str(parsed['link'])
    return book


def compose_region(row: dict, is_ko: bool, separator: str = ' ') -> str | None:
    """Join city and district, or use the legacy location field."""
    city = _prefer(row, 'city', is_ko)
    district = _prefer(row, 'district', is_ko)
    region = separator.join(part for part in (city, district) if part)
    if region:
        return region
    return _prefer(row, 'location', is_ko)


def place_row_to_ui_place(row: dict, locale: str) -> dict:
    """Convert a place row into the display model for one language."""
    is_ko = (locale or '').lower().startswith('ko')

    book = parse_recommended_book(_prefer(row, 'recommended_book', is_ko))
    if book is None:
        # The preferred variant may be present but malformed
        other = 'en' if is_ko else 'ko'
        book = parse_recommended_book(row.get(f'recommended_book_{other}'))

    return {
        'id': str(row['id']),
        'name': _prefer(row, 'name', is_ko) or '',
        'description': _prefer(row, 'description', is_ko),
        'region': compose_region(row, is_ko),
        'category': row.get('category'),
        'quietness': row.get('quietness'),
        'photos': row.get('photos'),
        'latitude': row.get('latitude'),
        'longitude': row.get('longitude'),
        'recommended_book': book,
    }


def parse_comma_separated(value) -> list | None:
    """Split a comma-separated string (or clean a list) into trimmed items."""
    if value is None:
        return None
    if isinstance(value, str):
        items = value.split(',')
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        return None
    result = [str(item).strip() for item in items if item is not None and str(item).strip()]
    return result or None
