"""
Pytest configuration and fixtures for testing the Bookmaru API.
"""

import os
import sys
from datetime import datetime, timedelta

import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bookmaru import create_app, db
from bookmaru.models import Place
from bookmaru.services.translation import reset_circuit_breaker

fake = Faker()
fake_ko = Faker('ko_KR')

ADMIN_PASSWORD = 'test-admin-secret'


@pytest.fixture(scope='session')
def app():
    """Create application for testing.

    No ntfy topic or translation URL is configured, so nothing reaches the
    network unless a test patches it in.
    """
    os.environ['FLASK_ENV'] = 'testing'

    app = create_app('testing', overrides={
        'ADMIN_PASSWORD': ADMIN_PASSWORD,
        'NTFY_TOPIC': '',
        'NTFY_TOPIC_CONTACT': '',
        'TRANSLATION_SERVICE': 'remote',
        'TRANSLATION_FUNCTION_URL': '',
    })

    with app.app_context():
        db.create_all()

    yield app

    app.extensions['task_queue'].shutdown()
    with app.app_context():
        db.drop_all()


@pytest.fixture(autouse=True)
def reset_shared_state(app):
    """Process-wide state must not leak between tests."""
    app.extensions['place_cache'].invalidate()
    reset_circuit_breaker()
    yield
    app.extensions['place_cache'].invalidate()
    reset_circuit_breaker()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create a fresh database session for each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        yield db.session
        db.session.rollback()


@pytest.fixture
def admin_headers():
    return {'X-Admin-Secret': ADMIN_PASSWORD}


def create_place(status='pending', original_language='en', **overrides):
    """Helper to insert a place with sensible defaults for its language."""
    now = datetime.utcnow()
    data = {
        'original_language': original_language,
        'latitude': float(fake.latitude()),
        'longitude': float(fake.longitude()),
        'category': 'cafe',
        'quietness': 4,
        'status': status,
        'created_at': now,
        'updated_at': now,
    }
    if original_language == 'ko':
        data.update({
            'name_ko': fake_ko.company() + ' 북카페',
            'description_ko': '조용하고 책 읽기 좋은 곳',
            'city_ko': '서울',
            'district_ko': '마포구',
        })
    else:
        data.update({
            'name_en': fake.company() + ' Book Cafe',
            'description_en': fake.sentence(nb_words=8),
            'city_en': 'Seoul',
            'district_en': 'Mapo-gu',
        })
    data.update(overrides)
    place = Place(**data)
    db.session.add(place)
    db.session.commit()
    return place


def stagger(places, start=None):
    """Give places strictly increasing created_at/updated_at, oldest first."""
    start = start or datetime.utcnow() - timedelta(hours=len(places))
    for index, place in enumerate(places):
        place.created_at = start + timedelta(minutes=index)
        place.updated_at = start + timedelta(minutes=index)
    db.session.commit()
    return places


@pytest.fixture
def pending_place(db_session):
    """An English submission waiting for review."""
    return create_place()


@pytest.fixture
def approved_place(db_session):
    """A public English place with both languages filled in."""
    return create_place(
        status='approved',
        name_ko='테스트 북카페',
        description_ko='책 읽기 좋은 카페',
        city_ko='서울',
        district_ko='마포구',
    )
