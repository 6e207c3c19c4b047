"""Public place listing routes."""

from flask import Blueprint, request, jsonify, current_app

from bookmaru.constants import normalize_language, DEFAULT_LANGUAGE
from bookmaru.services.places import clamp_page, get_approved_place
from bookmaru.utils import admin_required, place_row_to_ui_place

places_bp = Blueprint('places', __name__)


def _language_arg():
    return normalize_language(request.args.get('language')) or DEFAULT_LANGUAGE


@places_bp.route('', methods=['GET'])
def get_places():
    """Get approved places with search and pagination.

    Query params:
    - page: zero-based page number (default: 0)
    - limit: items per page (default: 20, max: 100)
    - search: free-text filter over names, descriptions, regions and category
    - language: 'en' or 'ko' (default: 'en')

    Reads go through the place cache, so a place approved in the last few
    minutes may not be listed yet.
    """
    page, limit = clamp_page(request.args.get('page', 0), request.args.get('limit', 20))
    search = request.args.get('search', '').strip()
    language = _language_arg()

    listing = current_app.extensions['place_cache'].get(page, limit, search, language)

    return jsonify({
        'places': listing.places,
        'pagination': {
            'page': page,
            'limit': limit,
            'total': listing.total,
            'hasMore': listing.has_more,
        }
    }), 200


@places_bp.route('/<int:place_id>', methods=['GET'])
def get_place(place_id):
    """Get one approved place shaped for the requested language."""
    place = get_approved_place(place_id)
    return jsonify(place_row_to_ui_place(place.to_dict(), _language_arg())), 200


@places_bp.route('/cache', methods=['GET'])
@admin_required
def cache_stats():
    """Place cache size and keys."""
    return jsonify(current_app.extensions['place_cache'].stats()), 200


@places_bp.route('/cache', methods=['DELETE'])
@admin_required
def clear_cache():
    """Drop cached listings for one language (?language=) or all of them."""
    language = request.args.get('language')
    if language is not None:
        language = normalize_language(language)
        if language is None:
            return jsonify({'error': 'Unsupported language'}), 400
    cleared = current_app.extensions['place_cache'].invalidate(language)
    return jsonify({'cleared': cleared}), 200
