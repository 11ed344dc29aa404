import pytest

from acadmix import create_app
from acadmix.config import AppConfig


class _UnusedSession:
    def get(self, *_args, **_kwargs):
        raise AssertionError('health routes must not reach the storage origin')


@pytest.fixture()
def client():
    config = AppConfig(cors_allowed_origins=frozenset({'https://acadmix.example'}))
    app = create_app(config=config, http_session=_UnusedSession())
    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client


def test_health_endpoints(client):
    assert client.get('/api/health').get_json() == {'status': 'OK'}
    assert client.get('/api/ping').get_json() == {'pong': True}
    assert client.get('/healthz').get_json() == {'status': 'ok'}
    assert client.get('/').status_code == 200


def test_request_id_generated_when_absent(client):
    response = client.get('/api/health')

    assert len(response.headers['X-Request-ID']) == 32


def test_cors_headers_for_allowed_origin(client):
    response = client.get('/api/health', headers={'Origin': 'https://acadmix.example'})

    assert response.headers['Access-Control-Allow-Origin'] == 'https://acadmix.example'
    assert response.headers['Vary'] == 'Origin'


def test_cors_headers_skipped_for_unknown_origin(client):
    response = client.get('/api/health', headers={'Origin': 'https://evil.example'})

    assert 'Access-Control-Allow-Origin' not in response.headers


def test_preflight_on_pdf_proxy(client):
    response = client.options('/pdf-proxy', headers={'Origin': 'https://acadmix.example'})

    assert response.status_code == 200
    assert response.headers['Access-Control-Allow-Origin'] == 'https://acadmix.example'
    assert 'GET' in response.headers['Access-Control-Allow-Methods']


def test_extensions_hold_resolver_and_session(client):
    state = client.application.extensions['acadmix']

    assert state['sentry_enabled'] is False
    assert state['resolver'].domain_marker == 'cloudinary.com'
    assert isinstance(state['http_session'], _UnusedSession)
