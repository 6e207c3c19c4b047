"""Contact form and admin password routes."""

import logging

from flask import Blueprint, request, jsonify

from bookmaru.errors import NotificationError
from bookmaru.services.notifications import notify_contact
from bookmaru.utils import verify_admin_password

logger = logging.getLogger(__name__)

contact_bp = Blueprint('contact', __name__)


@contact_bp.route('/contact', methods=['POST'])
def contact():
    """Forward a contact message to the admin.

    Sent synchronously so the visitor learns whether it went through.
    """
    body = request.get_json(silent=True) or {}
    email = str(body.get('email') or '').strip() or None
    message = str(body.get('message') or '').strip()

    if not message:
        return jsonify({'error': 'Message is required'}), 400

    try:
        notify_contact(email, message)
    except NotificationError as e:
        logger.error(f"[CONTACT] Failed to forward message: {e.message}")
        return jsonify({'error': 'Failed to send notification'}), 500

    return jsonify({'message': 'Notification sent'}), 200


@contact_bp.route('/verify-admin', methods=['POST'])
def verify_admin():
    """Check the admin password before the moderation screens unlock."""
    body = request.get_json(silent=True) or {}
    password = body.get('password')

    if not password:
        return jsonify({'error': 'Password is required'}), 400

    if not verify_admin_password(str(password)):
        return jsonify({'error': 'Invalid password'}), 401

    return jsonify({'success': True}), 200
