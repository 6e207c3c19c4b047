"""Shared utilities for the Bookmaru backend.

This package contains reusable helpers shared across the route and
service modules.
"""

from bookmaru.utils.auth import admin_required, check_admin_secret, verify_admin_password
from bookmaru.utils.place_helpers import (
    compose_region,
    parse_comma_separated,
    parse_recommended_book,
    place_row_to_ui_place,
)

__all__ = [
    'admin_required',
    'check_admin_secret',
    'verify_admin_password',
    'compose_region',
    'parse_comma_separated',
    'parse_recommended_book',
    'place_row_to_ui_place',
]
