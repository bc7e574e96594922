"""Special pytest fixture configuration file.

This file automatically provides all fixtures defined in it to all
pytest tests in this directory and sub directories.

See https://docs.pytest.org/en/6.2.x/fixture.html#conftest-py-sharing-fixtures-across-multiple-files
"""
import pytest

from fastapi.testclient import TestClient

from token_auth.authenticators import StatelessTokenAuthenticator, \
    SessionTokenAuthenticator
from token_auth.domain import AuthRequest
from token_auth.factory import create_app
from token_auth.sessions import MemorySessionStore
from token_auth.tokens import NameTokenStore


@pytest.fixture
def secret():
    return "testing_secret"


@pytest.fixture
def token_store():
    return NameTokenStore()


@pytest.fixture
def session_store():
    return MemorySessionStore()


@pytest.fixture
def stateless(token_store):
    return StatelessTokenAuthenticator(token_store)


@pytest.fixture
def persistent(token_store, session_store):
    return SessionTokenAuthenticator(token_store, session_store)


@pytest.fixture
def bearer():
    """Make a request carrying a bearer token."""
    def _bearer(token, **kwargs):
        return AuthRequest(headers={"Authorization": f"Bearer {token}"},
                           **kwargs)
    return _bearer


@pytest.fixture
def stateless_client(stateless):
    return TestClient(create_app(stateless))


@pytest.fixture
def client(persistent):
    return TestClient(create_app(persistent))
