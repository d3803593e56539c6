"""
HTTP tests for the donation endpoints.
"""
import pytest
from flask_jwt_extended import create_access_token

from donorapp import create_app
from donorapp.config import TestingConfig
from donorapp.extensions import db
from tests.conftest import BrokenStore

DONATE_URL = '/api/v1/donate'


@pytest.fixture
def broken_client():
    app = create_app(TestingConfig, store=BrokenStore())
    yield app.test_client()
    with app.app_context():
        db.drop_all()


class TestDonate:

    def test_eligible_donation(self, client, store, auth_headers, eligible_payload):
        response = client.post(DONATE_URL, json=eligible_payload, headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json() == {
            'success': True,
            'isEligible': True,
            'message': 'Thanks for filling data. You are eligible to donate!'
        }
        records = store.scan_by_prefix('donation:')
        assert len(records) == 1
        assert records[0]['userEmail'] == 'donor@example.com'

    def test_ineligible_donation(self, client, store, auth_headers, eligible_payload):
        payload = dict(eligible_payload, age=16, weight=50)

        response = client.post(DONATE_URL, json=payload, headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json()['isEligible'] is False
        assert response.get_json()['message'] == "You aren't eligible to give blood."
        assert len(store) == 0

    def test_missing_token(self, client, store, eligible_payload):
        response = client.post(DONATE_URL, json=eligible_payload)

        assert response.status_code == 401
        assert response.get_json() == {'error': 'Unauthorized - Please login first'}
        assert len(store) == 0

    @pytest.mark.parametrize('header', ['Bearer not-a-jwt', 'Bearer', 'Token'])
    def test_invalid_token(self, client, store, eligible_payload, header):
        response = client.post(DONATE_URL, json=eligible_payload, headers={'Authorization': header})

        assert response.status_code == 401
        assert len(store) == 0

    def test_token_signed_with_other_key_is_rejected(self, client, store, eligible_payload, app):
        other = create_app(TestingConfig, JWT_SECRET_KEY='another-secret-key-that-is-long-enough')
        with other.app_context():
            token = create_access_token(identity='someone')

        response = client.post(DONATE_URL, json=eligible_payload,
                               headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 401
        assert response.get_json() == {'error': 'Unauthorized - Invalid token'}

    def test_token_for_unknown_user_is_rejected(self, client, app, eligible_payload):
        with app.app_context():
            token = create_access_token(identity='no-such-user')

        response = client.post(DONATE_URL, json=eligible_payload,
                               headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 401

    def test_unauthorized_checked_before_payload(self, client):
        response = client.post(DONATE_URL, json={})
        assert response.status_code == 401

    def test_missing_fields(self, client, store, auth_headers, eligible_payload):
        payload = dict(eligible_payload)
        del payload['bloodGroup']

        response = client.post(DONATE_URL, json=payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json() == {'error': 'All fields are required'}
        assert len(store) == 0

    def test_non_json_body(self, client, auth_headers):
        response = client.post(DONATE_URL, data='donorName=x', headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json() == {'error': 'All fields are required'}

    @pytest.mark.parametrize('body', [['x'], 'hello'])
    def test_json_body_that_is_not_an_object(self, client, store, auth_headers, body):
        response = client.post(DONATE_URL, json=body, headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json() == {'error': 'All fields are required'}
        assert len(store) == 0

    def test_invalid_numbers(self, client, store, auth_headers, eligible_payload):
        payload = dict(eligible_payload, weight='sixty')

        response = client.post(DONATE_URL, json=payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json() == {'error': 'Invalid age or weight format'}
        assert len(store) == 0

    def test_storage_failure(self, broken_client, eligible_payload):
        broken_client.post('/api/v1/signup', json={
            'email': 'a@example.com', 'password': 'pw', 'name': 'A'
        })
        token = broken_client.post('/api/v1/signin', json={
            'email': 'a@example.com', 'password': 'pw'
        }).get_json()['access_token']

        response = broken_client.post(DONATE_URL, json=eligible_payload,
                                      headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Failed to submit donation'}


class TestStats:

    def test_empty(self, client):
        response = client.get('/api/v1/stats')

        assert response.status_code == 200
        assert response.get_json() == {'totalDonations': 0, 'allDonations': 0}

    def test_counts_after_submissions(self, client, clock, auth_headers, eligible_payload):
        for _ in range(2):
            client.post(DONATE_URL, json=eligible_payload, headers=auth_headers)
            clock.advance(seconds=1)
        client.post(DONATE_URL, json=dict(eligible_payload, age='12'), headers=auth_headers)

        response = client.get('/api/v1/stats')

        assert response.get_json() == {'totalDonations': 2, 'allDonations': 2}

    def test_storage_failure(self, broken_client):
        response = broken_client.get('/api/v1/stats')

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Failed to get stats'}


class TestRecentDonors:

    def test_empty(self, client):
        response = client.get('/api/v1/recent-donors')

        assert response.status_code == 200
        assert response.get_json() == {'donors': []}

    def test_lists_latest_ten_from_this_week(self, client, clock, auth_headers, eligible_payload):
        client.post(DONATE_URL, json=dict(eligible_payload, donorName='Too old'), headers=auth_headers)
        clock.advance(days=8)
        for i in range(12):
            client.post(DONATE_URL, json=dict(eligible_payload, donorName=f'Donor {i}'),
                        headers=auth_headers)
            clock.advance(minutes=5)

        donors = client.get('/api/v1/recent-donors').get_json()['donors']

        assert [d['donorName'] for d in donors] == [f'Donor {i}' for i in range(11, 1, -1)]
        assert set(donors[0]) == {'donorName', 'bloodGroup', 'timestamp', 'age', 'gender'}
        timestamps = [d['timestamp'] for d in donors]
        assert timestamps == sorted(timestamps, reverse=True)

    def test_storage_failure(self, broken_client):
        response = broken_client.get('/api/v1/recent-donors')

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Failed to get recent donors'}
