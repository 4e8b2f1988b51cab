"""Shared test fixtures for the CodeMentor test suite."""

import pytest
from flask.testing import FlaskClient

from app import create_app
from app.auth.tokens import issue_token
from app.extensions import db as _db
from app.models import User


@pytest.fixture()
def app():
    """Create a Flask application configured for testing."""
    application = create_app('testing')
    yield application


@pytest.fixture()
def db(app):
    """Provide a clean database for each test."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


class IsolatedClient(FlaskClient):
    """Runs each request in its own app context, so 'g' never outlives a request."""

    def open(self, *args, **kwargs):
        with self.application.app_context():
            response = super().open(*args, **kwargs)
        # rows the request committed must be re-read by the test's session
        _db.session.expire_all()
        return response


@pytest.fixture()
def client(app, db):
    """Provide a Flask test client."""
    app.test_client_class = IsolatedClient
    return app.test_client()


@pytest.fixture()
def make_user(db):
    """Factory creating a password account; returns its id."""
    def _make(username='alice', email=None, password='secret123', **fields):
        user = User(username=username, email=email or f'{username}@example.com', **fields)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user.id
    return _make


@pytest.fixture()
def user_id(make_user):
    return make_user()


@pytest.fixture()
def auth_headers(app, user_id):
    """Bearer headers for the default test user."""
    return {'Authorization': f'Bearer {issue_token(user_id)}'}


def headers_for(user_id):
    return {'Authorization': f'Bearer {issue_token(user_id)}'}


def judge0_result(stdout='', status_id=3, description='Accepted', stderr=None, compile_output=None):
    """Build a Judge0 submission record."""
    return {
        'stdout': stdout,
        'stderr': stderr,
        'compile_output': compile_output,
        'status': {'id': status_id, 'description': description},
        'time': '0.01',
        'memory': 3200,
    }


class FakeJudge0:
    """Stands in for Judge0Client; answers from a stdin -> result mapping."""

    def __init__(self, outputs=None, default=None):
        self.outputs = outputs or {}
        self.default = default
        self.calls = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True

    def execute(self, language, code, stdin='', cancel_event=None):
        self.calls.append((language, code, stdin))
        result = self.outputs.get(stdin, self.default)
        if isinstance(result, Exception):
            raise result
        if result is None:
            return judge0_result(stdout='')
        return result


@pytest.fixture()
def fake_judge0():
    return FakeJudge0()
