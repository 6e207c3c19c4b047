"""Public read queries over approved places."""

import logging

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from bookmaru import db
from bookmaru.errors import NotFoundError, PersistenceError
from bookmaru.models import Place

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Columns the free-text search looks in
SEARCH_COLUMNS = (
    Place.name_en, Place.name_ko,
    Place.description_en, Place.description_ko,
    Place.city_en, Place.city_ko,
    Place.district_en, Place.district_ko,
    Place.location_en, Place.location_ko,
    Place.category,
)


def clamp_page(page, limit):
    """Zero-based page and a page size within 1..MAX_PAGE_SIZE."""
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 0
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        limit = DEFAULT_PAGE_SIZE
    return max(page, 0), min(max(limit, 1), MAX_PAGE_SIZE)


def search_filter(search: str):
    """Case-insensitive substring match OR-ed across the searchable columns."""
    # Escape LIKE wildcards typed by the user
    escaped = search.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    search_term = f'%{escaped}%'
    return or_(*(column.ilike(search_term, escape='\\') for column in SEARCH_COLUMNS))


def fetch_approved_places(page: int = 0, limit: int = DEFAULT_PAGE_SIZE, search: str = '') -> list:
    """
    One page of approved places, most recently updated first.

    Returns:
        list of raw place dicts (``Place.to_dict()``)

    Raises:
        PersistenceError: the query failed
    """
    page, limit = clamp_page(page, limit)
    search = (search or '').strip()

    query = Place.query.filter(Place.status == 'approved')
    if search:
        query = query.filter(search_filter(search))
    query = query.order_by(Place.updated_at.desc(), Place.id.desc())

    try:
        places = query.offset(page * limit).limit(limit).all()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Place query failed: {e}")
        raise PersistenceError('Failed to fetch places') from e

    return [place.to_dict() for place in places]


def get_approved_place(place_id: int) -> Place:
    """A single public place, or NotFoundError for unknown and unapproved ids."""
    place = db.session.get(Place, place_id)
    if place is None or place.status != 'approved':
        raise NotFoundError(place_id)
    return place
