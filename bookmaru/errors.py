"""Domain errors raised by the Bookmaru services.

Each error carries the HTTP status the API answers with, so routes can let
them propagate to the handler registered in ``create_app``.
"""

from typing import Optional


class BookmaruError(Exception):
    """Base exception for all domain errors."""

    status_code = 500
    default_code = 'BOOKMARU_ERROR'

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code or self.default_code
        super().__init__(message)


class ValidationError(BookmaruError):
    """A required input field is missing or malformed."""

    status_code = 400
    default_code = 'VALIDATION_ERROR'


class AuthenticationError(BookmaruError):
    """The admin secret is missing or wrong."""

    status_code = 401
    default_code = 'AUTHENTICATION_FAILED'


class NotFoundError(BookmaruError):
    """No place matches the given id."""

    status_code = 404
    default_code = 'NOT_FOUND'

    def __init__(self, identifier, resource: str = 'Place'):
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}", self.default_code)


class PersistenceError(BookmaruError):
    """A store operation failed and was rolled back."""

    status_code = 500
    default_code = 'PERSISTENCE_ERROR'


class TranslationError(BookmaruError):
    """The translation endpoint was unreachable or returned unusable data."""

    status_code = 502
    default_code = 'TRANSLATION_FAILED'


class NotificationError(BookmaruError):
    """The notification endpoint rejected or never received a message."""

    status_code = 502
    default_code = 'NOTIFICATION_FAILED'
