"""Shared-secret admin authentication.

There are no admin accounts: the moderation screens unlock with a single
password (``ADMIN_PASSWORD``), and every moderation request repeats it in
the ``X-Admin-Secret`` header.
"""

from functools import wraps
from flask import request, current_app
import hmac

from bookmaru.errors import AuthenticationError

ADMIN_SECRET_HEADER = 'X-Admin-Secret'


def verify_admin_password(password: str | None) -> bool:
    """Compare a password with ADMIN_PASSWORD in constant time.

    If ADMIN_PASSWORD is not configured nothing matches, which disables
    every admin endpoint.
    """
    expected = current_app.config.get('ADMIN_PASSWORD')
    if not expected or not password:
        return False
    return hmac.compare_digest(password.encode('utf-8'), expected.encode('utf-8'))


def check_admin_secret() -> bool:
    """Check if the current request carries the admin secret header.

    Header only: secrets in query strings leak via server logs, browser
    history and Referer headers.
    """
    return verify_admin_password(request.headers.get(ADMIN_SECRET_HEADER, ''))


def admin_required(f):
    """
    Decorator rejecting requests without a valid admin secret.

    Usage:
        @bp.route('/submissions')
        @admin_required
        def list_submissions():
            ...
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        if not check_admin_secret():
            raise AuthenticationError('Admin access required')
        return f(*args, **kwargs)
    return decorated
