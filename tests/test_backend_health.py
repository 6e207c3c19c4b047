"""
Backend Health Test Suite
=========================
Boots the app and walks one place through its whole life:
submit -> pending list -> approve with translation -> public listing.

Run with:
    pytest tests/test_backend_health.py -v
"""

from unittest.mock import patch

from bookmaru.services.translation import TranslationResult


# ============================================================
#  HEALTH & SMOKE TESTS
# ============================================================

class TestHealthEndpoints:
    """Verify the server boots and responds."""

    def test_root_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.get_json() == {'status': 'ok'}

    def test_unknown_route(self, client):
        assert client.get('/api/nope').status_code == 404

    def test_empty_listing(self, client, db_session):
        data = client.get('/api/places').get_json()

        assert data['places'] == []
        assert data['pagination']['total'] == 0


# ============================================================
#  END TO END
# ============================================================

class TestSubmissionLifecycle:

    def test_submit_approve_and_read_in_both_languages(self, client, db_session, admin_headers):
        submitted = client.post('/api/submit', json={'original_language': 'en', 'name_en': 'Test Cafe'})
        assert submitted.status_code == 201
        place_id = submitted.get_json()['id']

        pending = client.get('/api/submissions', headers=admin_headers).get_json()['submissions']
        assert [s['id'] for s in pending] == [place_id]
        assert pending[0]['status'] == 'pending'
        assert client.get('/api/places').get_json()['places'] == []

        with patch('bookmaru.services.moderation.request_translation',
                   return_value=TranslationResult(name='테스트 카페')) as translate:
            approved = client.post('/api/approve-submission', headers=admin_headers, json={'id': place_id})

        assert approved.status_code == 200
        assert approved.get_json()['translated'] is True
        translate.assert_called_once_with(place_id, 'en', 'Test Cafe', None, None)

        assert client.get('/api/submissions', headers=admin_headers).get_json()['submissions'] == []

        en = client.get('/api/places?language=en').get_json()['places']
        ko = client.get('/api/places?language=ko').get_json()['places']
        assert [p['name'] for p in en] == ['Test Cafe']
        assert [p['name'] for p in ko] == ['테스트 카페']

    def test_rejected_submission_never_appears(self, client, db_session, admin_headers):
        place_id = client.post('/api/submit', json={
            'original_language': 'ko', 'name_ko': '스팸 장소',
        }).get_json()['id']

        deleted = client.delete('/api/delete-submission', headers=admin_headers, json={'id': place_id})

        assert deleted.get_json()['deleted'] is True
        assert client.get('/api/submissions', headers=admin_headers).get_json()['submissions'] == []
        assert client.get('/api/places?language=ko').get_json()['places'] == []
        assert client.get(f'/api/places/{place_id}').status_code == 404
