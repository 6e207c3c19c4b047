"""Public submission routes."""

import logging

from flask import Blueprint, request, jsonify

from bookmaru.services.notifications import enqueue_notification, notify_new_entry
from bookmaru.services.submissions import submit_place

logger = logging.getLogger(__name__)

submissions_bp = Blueprint('submissions', __name__)


@submissions_bp.route('/submit', methods=['POST'])
def create_submission():
    """Submit a new place for moderation.

    Body: original_language plus that language's name (required),
    description, city, district and recommended book, and optional
    latitude, longitude, category, quietness and photos.
    """
    data = request.get_json(silent=True) or {}
    place = submit_place(data)
    return jsonify({
        'success': True,
        'message': 'Submission received and waiting for review',
        'id': place.id,
    }), 201


@submissions_bp.route('/notify', methods=['POST'])
def notify():
    """Queue an admin notification. Only 'new_entry' is supported."""
    body = request.get_json(silent=True) or {}

    if body.get('type') != 'new_entry':
        return jsonify({'success': False, 'error': 'Unsupported notification type'}), 400

    payload = body.get('payload')
    enqueue_notification(notify_new_entry, payload if isinstance(payload, dict) else {})
    return jsonify({'success': True}), 200
