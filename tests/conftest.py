"""
Pytest fixtures for donorapp tests.
"""
from datetime import datetime, timedelta, timezone

import pytest

from donorapp import create_app
from donorapp.config import TestingConfig
from donorapp.errors import StorageError
from donorapp.extensions import db
from donorapp.services.identity import Principal
from donorapp.stores.kv_store import InMemoryKeyValueStore, KeyValueStore


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class BrokenStore(KeyValueStore):
    """Store whose every operation fails."""

    def get(self, key):
        raise StorageError('get failed')

    def set(self, key, value):
        raise StorageError('set failed')

    def scan_by_prefix(self, prefix):
        raise StorageError('scan failed')


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def principal():
    return Principal(user_id='0b6f7c1e-5f4a-4d5e-9c1a-3f2b8e7d6a10', email='donor@example.com')


@pytest.fixture
def eligible_payload():
    return {
        'donorName': 'Amina Yusuf',
        'age': '25',
        'gender': 'Female',
        'bloodGroup': 'O+',
        'weight': '65.5'
    }


@pytest.fixture
def app(store, clock):
    app = create_app(TestingConfig, store=store, clock=clock)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def registered_user(client):
    credentials = {'email': 'donor@example.com', 'password': 's3cret-pass', 'name': 'Amina'}
    response = client.post('/api/v1/signup', json=credentials)
    assert response.status_code == 200
    return credentials


@pytest.fixture
def auth_headers(client, registered_user):
    response = client.post('/api/v1/signin', json={
        'email': registered_user['email'],
        'password': registered_user['password']
    })
    token = response.get_json()['access_token']
    return {'Authorization': f'Bearer {token}'}
