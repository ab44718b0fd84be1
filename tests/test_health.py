from unittest.mock import patch

import pytest

import webhook_server
from database.db import dispose_engine


@pytest.fixture
def client():
    webhook_server.app.config['TESTING'] = True
    with webhook_server.app.test_client() as client:
        yield client


def test_health_ok(db, client):
    response = client.get('/health')

    assert response.status_code == 200
    payload = response.get_json()
    assert payload['status'] == 'ok'
    assert payload['service'] == 'SkillSwap Marketplace Bot'
    assert 'timestamp' in payload


def test_health_degraded_when_database_down(client):
    with patch.object(webhook_server, 'database_ok', return_value=False):
        response = client.get('/health')

    assert response.status_code == 503
    assert response.get_json()['status'] == 'degraded'


def test_index_always_answers(client):
    with patch.object(webhook_server, 'database_ok', return_value=False):
        response = client.get('/')

    assert response.status_code == 200


def test_dispose_engine_releases_pool():
    with patch('database.db.engine') as engine:
        dispose_engine()

    engine.dispose.assert_called_once_with()
