"""Admin moderation of place submissions.

States: ``pending`` -> ``approved`` (public) via approve_place, and
``pending`` -> gone via delete_place. Rejection is a hard delete; there is
no tombstone row. ``rejected`` stays a legal status an admin can set with
update_place, and such rows are never public.

Approval translates the submission into the other language. Translation
outages never block moderation: on TranslationError the place is approved
with only its original language and the UI falls back to it.

There is no optimistic locking. Two admins approving the same place at
once both succeed and the last commit wins.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from bookmaru import db
from bookmaru.constants import PLACE_STATUSES, opposite_language
from bookmaru.errors import NotFoundError, PersistenceError, TranslationError, ValidationError
from bookmaru.models import Place
from bookmaru.services.submissions import check_column_lengths
from bookmaru.services.translation import request_translation
from bookmaru.utils.place_helpers import parse_comma_separated

logger = logging.getLogger(__name__)


@dataclass
class ApprovalResult:
    place: Place
    translated: bool


def _commit(action: str, place_id):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"[{action}] Commit failed for place {place_id}: {e}")
        raise PersistenceError(f'Failed to {action.lower()} place {place_id}') from e


def parse_place_id(place_id) -> int:
    """An id from a JSON body: an int or a string of digits, nothing coerced.

    Floats and booleans would otherwise round onto a different place.
    """
    if isinstance(place_id, int) and not isinstance(place_id, bool):
        return place_id
    if isinstance(place_id, str):
        text = place_id.strip()
        if text.isascii() and text.isdigit():
            return int(text)
    raise ValidationError(f'Invalid place id: {place_id!r}', 'INVALID_ID')


def get_place(place_id) -> Place:
    """Any place regardless of status, or NotFoundError.

    Raises ValidationError for ids that are not whole numbers.
    """
    place_id = parse_place_id(place_id)
    try:
        place = db.session.get(Place, place_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        raise PersistenceError(f'Failed to fetch place {place_id}') from e
    if place is None:
        raise NotFoundError(place_id)
    return place


def list_pending() -> list:
    """Every pending submission, newest first."""
    try:
        return (
            Place.query
            .filter(Place.status == 'pending')
            .order_by(Place.created_at.desc(), Place.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        db.session.rollback()
        raise PersistenceError('Failed to fetch submissions') from e


def approve_place(place_id, translator=None) -> ApprovalResult:
    """
    Approve a submission, translating it into the other language first.

    Args:
        place_id: Place to approve
        translator: callable with request_translation's signature, defaults to it

    Returns:
        ApprovalResult with the updated place and whether a translation was merged

    Raises:
        ValidationError: the id is not a whole number; nothing changes
        NotFoundError: no such place; nothing changes
        PersistenceError: the final write failed; the place keeps its old state
    """
    translator = translator or request_translation
    place = get_place(place_id)

    source = place.original_language
    target = opposite_language(source)
    name = place.field('name', source)

    translation = None
    if name and name.strip():
        try:
            translation = translator(
                place.id,
                source,
                name,
                place.field('description', source),
                place.get_book(source),
            )
        except TranslationError as e:
            # Approve anyway; the place shows in its original language until fixed
            logger.warning(f"[APPROVE] Place {place.id} approved without translation: {e.message}")
    else:
        logger.info(f"[APPROVE] Place {place.id} has no {source} name, skipping translation")

    if translation is not None:
        place.set_field('name', target, translation.name)
        if translation.description:
            place.set_field('description', target, translation.description)
        if translation.recommended_book:
            place.set_field('recommended_book', target, Place.dump_book(translation.recommended_book))

    place.status = 'approved'
    place.updated_at = datetime.utcnow()
    _commit('APPROVE', place.id)

    logger.info(f"[APPROVE] Place {place.id} approved (translated: {translation is not None})")
    return ApprovalResult(place=place, translated=translation is not None)


def delete_place(place_id) -> bool:
    """
    Hard-delete a place.

    Deleting an id that does not exist is a no-op success.
    A malformed id (float, bool, non-digit text) raises ValidationError.

    Returns:
        True if a row was removed, False if there was nothing to delete
    """
    try:
        place = get_place(place_id)
    except NotFoundError:
        logger.info(f"[DELETE] Place {place_id} does not exist, nothing to delete")
        return False

    db.session.delete(place)
    _commit('DELETE', place_id)
    logger.info(f"[DELETE] Place {place_id} deleted")
    return True


def update_place(place_id, fields: dict) -> Place:
    """
    Overwrite columns on a place, whatever its status.

    Unknown keys and immutable columns (id, created_at, original_language)
    are ignored. ``updated_at`` is always stamped.

    Raises:
        NotFoundError: no such place
        ValidationError: status is not a known value, or text is too long
        PersistenceError: the write failed
    """
    columns = set(Place.column_names()) - set(Place.IMMUTABLE_FIELDS) - {'updated_at'}
    fields = {key: value for key, value in (fields or {}).items() if key in columns}

    if 'status' in fields and fields['status'] not in PLACE_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(PLACE_STATUSES)}")
    check_column_lengths(fields)

    place = get_place(place_id)
    for key, value in fields.items():
        if key.startswith('recommended_book_'):
            value = Place.dump_book(value)
        elif key == 'photos':
            value = parse_comma_separated(value)
        setattr(place, key, value)

    place.updated_at = datetime.utcnow()
    _commit('UPDATE', place.id)
    logger.info(f"[UPDATE] Place {place.id} updated")
    return place
