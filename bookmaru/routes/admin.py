"""Admin moderation routes for place submissions."""

import logging

from flask import Blueprint, request, jsonify, current_app

from bookmaru.errors import ValidationError
from bookmaru.services.moderation import approve_place, delete_place, list_pending, update_place
from bookmaru.utils import admin_required

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__)


def _submission_id(body):
    submission_id = body.get('id')
    if submission_id in (None, ''):
        raise ValidationError('Submission ID is required')
    return submission_id


def _invalidate_places():
    # Listings are only eventually consistent; moderation flushes them early
    current_app.extensions['place_cache'].invalidate()


@admin_bp.route('/submissions', methods=['GET'])
@admin_required
def get_submissions():
    """Pending submissions, newest first."""
    places = list_pending()
    return jsonify({'submissions': [place.to_dict() for place in places]}), 200


@admin_bp.route('/update-submission', methods=['PUT'])
@admin_required
def edit_submission():
    """Overwrite fields on a submission.

    Body: id plus any place columns. Immutable columns are ignored.
    """
    body = request.get_json(silent=True) or {}
    submission_id = _submission_id(body)
    fields = {key: value for key, value in body.items() if key != 'id'}

    place = update_place(submission_id, fields)
    _invalidate_places()

    return jsonify({
        'success': True,
        'message': 'Submission updated successfully',
        'submission': place.to_dict(),
    }), 200


@admin_bp.route('/approve-submission', methods=['POST'])
@admin_required
def approve_submission():
    """Approve a submission and translate it into the other language."""
    body = request.get_json(silent=True) or {}
    result = approve_place(_submission_id(body))
    _invalidate_places()

    message = (
        'Submission approved and translated successfully'
        if result.translated
        else 'Submission approved successfully (no translation added)'
    )
    return jsonify({'success': True, 'message': message, 'translated': result.translated}), 200


@admin_bp.route('/delete-submission', methods=['DELETE'])
@admin_required
def delete_submission():
    """Delete (reject) a submission. Unknown ids succeed with deleted=false."""
    body = request.get_json(silent=True) or {}
    deleted = delete_place(_submission_id(body))
    if deleted:
        _invalidate_places()

    return jsonify({
        'success': True,
        'message': 'Submission deleted successfully' if deleted else 'Submission already gone',
        'deleted': deleted,
    }), 200
