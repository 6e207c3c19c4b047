"""
Tests for the submission service.
"""

import json
from unittest.mock import patch

import pytest
from faker import Faker
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from bookmaru import db
from bookmaru.constants import KNOWN_CATEGORIES, LEGACY_CATEGORY_MAP, normalize_category
from bookmaru.errors import PersistenceError, ValidationError
from bookmaru.models import Place
from bookmaru.services.submissions import submit_place, validate_submission

fake = Faker()


class TestSubmitPlace:
    """Tests for creating pending places."""

    def test_english_submission_is_pending_without_korean(self, db_session):
        place = submit_place({
            'original_language': 'en',
            'name_en': 'Test Cafe',
            'description_en': fake.sentence(),
            'city_en': 'Seoul',
            'district_en': 'Mapo-gu',
            'category': 'Cafe',
            'quietness': 4,
            'latitude': 37.55,
            'longitude': 126.92,
            'photos': 'https://img.test/1.jpg, https://img.test/2.jpg',
        })

        stored = db.session.get(Place, place.id)
        assert stored.status == 'pending'
        assert stored.original_language == 'en'
        assert stored.name_en == 'Test Cafe'
        assert stored.name_ko is None
        assert stored.description_ko is None
        assert stored.category == 'cafe'
        assert stored.photos == ['https://img.test/1.jpg', 'https://img.test/2.jpg']
        assert stored.created_at == stored.updated_at

    def test_korean_submission(self, db_session):
        place = submit_place({'original_language': 'ko', 'name_ko': '다독다독 북카페'})

        assert place.status == 'pending'
        assert place.name_ko == '다독다독 북카페'
        assert place.name_en is None

    def test_opposite_language_fields_are_ignored(self, db_session):
        place = submit_place({
            'original_language': 'en',
            'name_en': 'Blue Square',
            'name_ko': '블루스퀘어',
            'description_ko': '무시됨',
        })

        assert place.name_ko is None
        assert place.description_ko is None

    def test_recommended_book_is_stored_as_json(self, db_session):
        place = submit_place({
            'original_language': 'en',
            'name_en': 'Reading Room',
            'recommended_book_en': {'title': 'Pachinko', 'author': 'Min Jin Lee'},
        })

        assert json.loads(place.recommended_book_en) == {'title': 'Pachinko', 'author': 'Min Jin Lee'}
        assert place.recommended_book_ko is None

    def test_malformed_book_is_dropped(self, db_session):
        place = submit_place({
            'original_language': 'en',
            'name_en': 'Reading Room',
            'recommended_book_en': {'title': 'No author'},
        })

        assert place.recommended_book_en is None

    def test_legacy_region_field(self, db_session):
        place = submit_place({'original_language': 'en', 'name_en': 'Old Form', 'region_en': 'Gangnam'})

        assert place.location_en == 'Gangnam'

    def test_store_failure_raises_persistence_error(self, db_session):
        with patch.object(Session, 'commit', side_effect=OperationalError('INSERT', {}, Exception('db down'))):
            with pytest.raises(PersistenceError):
                submit_place({'original_language': 'en', 'name_en': 'Lost Cafe'})

        assert Place.query.count() == 0

    def test_notification_is_sent_in_original_language(self, app, db_session):
        with patch('bookmaru.services.submissions.notify_new_entry') as notify:
            place = submit_place({
                'original_language': 'ko',
                'name_ko': '서울 도서관',
                'city_ko': '서울',
                'category': 'library',
            })

        notify.assert_called_once()
        sent = notify.call_args.args[0]
        assert sent['id'] == place.id
        assert sent['name_ko'] == '서울 도서관'
        assert sent['original_language'] == 'ko'

    def test_notification_failure_does_not_fail_submission(self, db_session):
        with patch('bookmaru.services.submissions.notify_new_entry', side_effect=RuntimeError('ntfy down')):
            place = submit_place({'original_language': 'en', 'name_en': 'Quiet Corner'})

        assert db.session.get(Place, place.id) is not None


class TestValidateSubmission:
    """Tests for rejected submissions."""

    @pytest.mark.parametrize('language', [None, '', 'jp', 'english', 42])
    def test_unsupported_language(self, language):
        with pytest.raises(ValidationError) as exc:
            validate_submission({'original_language': language, 'name_en': 'X'})
        assert exc.value.error_code == 'INVALID_LANGUAGE'

    def test_language_is_normalized(self):
        fields = validate_submission({'original_language': ' KO ', 'name_ko': '책방'})
        assert fields['original_language'] == 'ko'

    def test_name_required_in_original_language(self):
        with pytest.raises(ValidationError) as exc:
            validate_submission({'original_language': 'ko', 'name_en': 'Only English'})
        assert exc.value.error_code == 'NAME_REQUIRED'

    def test_blank_name(self):
        with pytest.raises(ValidationError):
            validate_submission({'original_language': 'en', 'name_en': '   '})

    @pytest.mark.parametrize('field,value', [
        ('quietness', 0),
        ('quietness', 6),
        ('quietness', 2.5),
        ('quietness', 'loud'),
        ('latitude', 91),
        ('longitude', -181),
        ('latitude', 'north'),
    ])
    def test_bad_optional_fields(self, field, value):
        with pytest.raises(ValidationError):
            validate_submission({'original_language': 'en', 'name_en': 'X', field: value})

    def test_optional_fields_may_be_blank(self):
        fields = validate_submission({
            'original_language': 'en', 'name_en': 'X',
            'quietness': '', 'latitude': None, 'category': '  ', 'photos': '',
        })
        assert fields['quietness'] is None
        assert fields['latitude'] is None
        assert fields['category'] is None
        assert fields['photos'] is None

    @pytest.mark.parametrize('field,limit', [
        ('name_en', 255),
        ('city_en', 100),
        ('district_en', 100),
        ('location_en', 255),
    ])
    def test_text_longer_than_its_column(self, field, limit):
        data = {'original_language': 'en', 'name_en': 'X'}
        data[field] = 'a' * limit
        assert validate_submission(data)[field] == 'a' * limit

        data[field] = 'a' * (limit + 1)
        with pytest.raises(ValidationError) as exc:
            validate_submission(data)
        assert exc.value.error_code == 'VALUE_TOO_LONG'

    def test_long_category(self):
        with pytest.raises(ValidationError):
            validate_submission({'original_language': 'en', 'name_en': 'X', 'category': 'c' * 51})

    def test_description_is_unbounded(self):
        fields = validate_submission({'original_language': 'en', 'name_en': 'X',
                                      'description_en': fake.text() * 50})
        assert len(fields['description_en']) > 255

    def test_body_must_be_an_object(self):
        with pytest.raises(ValidationError):
            validate_submission(['not', 'a', 'dict'])


class TestNormalizeCategory:

    def test_spaces_and_case(self):
        assert normalize_category(' Study Space ') == 'study-space'

    def test_legacy_keys_map_to_known_categories(self):
        for legacy, current in LEGACY_CATEGORY_MAP.items():
            assert normalize_category(legacy) == current
            assert current in KNOWN_CATEGORIES

    def test_unknown_key_is_kept(self):
        assert normalize_category('Rooftop') == 'rooftop'

    def test_blank(self):
        assert normalize_category('   ') is None
        assert normalize_category(None) is None
