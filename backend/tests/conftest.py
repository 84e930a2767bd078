import json
import os
import sys
import pytest

# Ensure the backend root (containing the `quizapi` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from quizapi import create_app, db
from quizapi.services.relay import PromptRelay


class TestConfig:
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    GEMINI_API_KEY = 'test-gemini-key'
    GEMINI_API_BASE = 'https://gemini.test/v1beta'
    GEMINI_MODEL = 'gemini-test'
    LEADERBOARD_DEFAULT_LIMIT = 10
    LEADERBOARD_MAX_LIMIT = 50
    CORS_ORIGINS = ['*']
    LOG_LEVEL = 'DEBUG'


class FakeResponse:
    """Just enough of ``requests.Response`` for the relay."""

    def __init__(self, status_code=200, payload=None, text=None, reason='OK'):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ''
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError('No JSON object could be decoded')
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import quizapi.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def leaderboard_service(flask_app):
    return flask_app.extensions['leaderboard']


@pytest.fixture()
def install_relay(flask_app):
    """Replace the app's relay with one backed by a FakeSession."""

    def _install(response=None, error=None, api_key=TestConfig.GEMINI_API_KEY):
        session = FakeSession(response=response, error=error)
        flask_app.extensions['prompt_relay'] = PromptRelay(
            api_key=api_key,
            api_base=TestConfig.GEMINI_API_BASE,
            model=TestConfig.GEMINI_MODEL,
            session=session,
            logger=flask_app.logger,
        )
        return session

    return _install
