from datetime import date

import pytest

from app import create_app
from models import db
from services.event_service import EventService

TODAY = date(2025, 3, 10)


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'events_test.db'}",
        'SECRET_KEY': 'test-secret',
        'AI_SUGGESTIONS_ENABLED': False,
        'SMS_ENABLED': False,
        'EXPORT_DIR': str(tmp_path / 'exports'),
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def store(app, app_ctx):
    return app.extensions['event_tracker']['store']


@pytest.fixture
def user_id(store):
    assert store.add_user('alice', 'secret1')
    return store.get_user_id('alice')


@pytest.fixture
def service(store):
    return EventService(store, today_fn=lambda: TODAY)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    resp = client.post('/api/register', json={'username': 'bob', 'password': 'hunter22'})
    assert resp.status_code == 201
    return client
