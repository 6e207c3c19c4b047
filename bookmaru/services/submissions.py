"""Public place submissions.

A submission is written in one language only. It is stored as ``pending``
with the other language left empty; translation happens at approval.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from bookmaru import db
from bookmaru.constants import normalize_category, normalize_language, SUPPORTED_LANGUAGES
from bookmaru.errors import ValidationError, PersistenceError
from bookmaru.models import Place
from bookmaru.services.notifications import enqueue_notification, notify_new_entry
from bookmaru.utils.place_helpers import parse_comma_separated, parse_recommended_book

logger = logging.getLogger(__name__)

# Per-language fields copied from the form for the submitter's language only
SOURCE_FIELDS = ('name', 'description', 'city', 'district', 'location')


def _clean_text(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _parse_float(data: dict, key: str, bound: float):
    value = data.get(key)
    if value is None or value == '':
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{key} must be a number')
    if not -bound <= number <= bound:
        raise ValidationError(f'{key} must be between -{bound:g} and {bound:g}')
    return number


def _parse_quietness(value):
    if value is None or value == '':
        return None
    try:
        quietness = int(value)
    except (TypeError, ValueError):
        raise ValidationError('quietness must be an integer from 1 to 5')
    if quietness != float(value) or not 1 <= quietness <= 5:
        raise ValidationError('quietness must be an integer from 1 to 5')
    return quietness


def check_column_lengths(fields: dict):
    """Reject text longer than its column instead of failing at the database."""
    for key, value in fields.items():
        limit = Place.column_length(key)
        if limit and isinstance(value, str) and len(value) > limit:
            raise ValidationError(f'{key} must be at most {limit} characters', 'VALUE_TOO_LONG')


def validate_submission(data) -> dict:
    """
    Check a submission form and reduce it to the columns to insert.

    Raises:
        ValidationError: unsupported original_language, missing name, text
            longer than its column, or a malformed optional field
    """
    if not isinstance(data, dict):
        raise ValidationError('Submission body must be a JSON object')

    language = normalize_language(data.get('original_language'))
    if language is None:
        raise ValidationError(
            f"original_language must be one of: {', '.join(SUPPORTED_LANGUAGES)}",
            'INVALID_LANGUAGE',
        )

    name = _clean_text(data.get(f'name_{language}'))
    if not name:
        raise ValidationError(f'name_{language} is required', 'NAME_REQUIRED')

    fields = {'original_language': language}
    for field in SOURCE_FIELDS:
        fields[f'{field}_{language}'] = _clean_text(data.get(f'{field}_{language}'))
    fields[f'name_{language}'] = name

    # Older forms sent a single region field
    if fields[f'location_{language}'] is None:
        fields[f'location_{language}'] = _clean_text(data.get(f'region_{language}'))

    book = parse_recommended_book(
        data.get(f'recommended_book_{language}') or data.get('recommended_book')
    )
    fields[f'recommended_book_{language}'] = Place.dump_book(book)

    fields['latitude'] = _parse_float(data, 'latitude', 90)
    fields['longitude'] = _parse_float(data, 'longitude', 180)
    fields['quietness'] = _parse_quietness(data.get('quietness'))
    fields['category'] = normalize_category(data.get('category'))
    fields['photos'] = parse_comma_separated(data.get('photos'))
    check_column_lengths(fields)
    return fields


def submit_place(data) -> Place:
    """
    Store a new submission as pending and notify the admin.

    Returns:
        The created Place

    Raises:
        ValidationError: see validate_submission
        PersistenceError: the insert failed; nothing was created
    """
    fields = validate_submission(data)

    now = datetime.utcnow()
    place = Place(status='pending', created_at=now, updated_at=now, **fields)

    try:
        db.session.add(place)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"[SUBMIT] Insert failed: {e}")
        raise PersistenceError('Failed to save submission') from e

    logger.info(f"[SUBMIT] Place {place.id} '{place.field('name', place.original_language)}' "
                f"submitted in {place.original_language}")

    # Best effort: the submission already succeeded
    try:
        enqueue_notification(notify_new_entry, place.to_dict())
    except Exception as e:
        logger.error(f"[SUBMIT] Could not schedule notification for place {place.id}: {e}")

    return place
