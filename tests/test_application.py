"""API tests for the token auth service."""

from unittest import mock

import jwt
import pytest
from fastapi.testclient import TestClient

from token_auth import tokens
from token_auth.authenticators import SessionTokenAuthenticator
from token_auth.domain import Identity
from token_auth.exceptions import SessionStoreUnavailable, ConfigurationError
from token_auth.factory import create_app, get_authenticator
from token_auth.sessions import MemorySessionStore
from token_auth.tokens import NameTokenStore


def test_root_is_open(client):
    res = client.get("/")
    assert res.status_code == 200


def test_stateless_authentication(stateless_client):
    res = stateless_client.get("/name", headers={"Authorization": "Bearer foo"})
    assert res.status_code == 200
    assert res.json() == "foo"
    assert "set-cookie" not in res.headers

    # Token is needed on every request.
    res = stateless_client.get("/name")
    assert res.status_code == 401


@pytest.mark.parametrize("headers", [
    {},
    {"Authorization": ""},
    {"Authorization": "foo"},
    {"Authorization": "Bearer"},
    {"Authorization": "Bearer BOGUS BOGUS"},
])
def test_unauthorized(stateless_client, headers):
    res = stateless_client.get("/name", headers=headers)
    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Bearer"


def test_persistence(client):
    """Login with a token once; after that the cookie is enough."""
    res = client.get("/name", headers={"Authorization": "Bearer foo"})
    assert res.status_code == 200
    assert res.json() == "foo"
    cookie = res.cookies.get("session")
    assert cookie, "Login sets the session cookie"
    assert "httponly" in res.headers["set-cookie"].lower()

    client.cookies.clear()
    client.cookies.set("session", cookie)
    res2 = client.get("/name")
    assert res2.status_code == 200
    assert res2.json() == "foo"
    assert "set-cookie" not in res2.headers


def test_bogus_cookie(client):
    client.cookies.set("session", "BOGUS")
    res = client.get("/name")
    assert res.status_code == 401


def test_secure_cookie_over_tls(persistent):
    client = TestClient(create_app(persistent), base_url="https://testserver")
    res = client.get("/name", headers={"Authorization": "Bearer foo"})
    assert res.status_code == 200
    assert "secure" in res.headers["set-cookie"].lower()


def test_logout(client):
    res = client.get("/name", headers={"Authorization": "Bearer foo"})
    cookie = res.cookies.get("session")

    client.cookies.clear()
    client.cookies.set("session", cookie)
    res = client.get("/logout")
    assert res.status_code == 204
    assert "max-age=0" in res.headers["set-cookie"].lower()

    client.cookies.clear()
    client.cookies.set("session", cookie)
    assert client.get("/name").status_code == 401


def test_session_store_unavailable(token_store):
    session_store = mock.MagicMock()
    session_store.create.side_effect = SessionStoreUnavailable("down")
    client = TestClient(create_app(
        SessionTokenAuthenticator(token_store, session_store)))
    res = client.get("/name", headers={"Authorization": "Bearer foo"})
    assert res.status_code == 503


def test_app_from_settings(secret):
    app = create_app(TOKEN_STORE="jwt", JWT_SECRET=secret,
                     SESSION_COOKIE_NAME="vapor-sessions",
                     SESSION_DURATION="60")
    auth = app.extra["authenticator"]
    assert isinstance(auth, SessionTokenAuthenticator)
    assert isinstance(auth.session_store, MemorySessionStore)

    client = TestClient(app)
    token = tokens.encode(Identity(name="jbloggs"), secret)
    res = client.get("/name", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 200
    assert res.json() == "jbloggs"
    assert res.cookies.get("vapor-sessions")

    res = client.get("/name", headers={"Authorization": "Bearer foo"})
    assert res.status_code == 200, "Session cookie from the first login"

    client.cookies.clear()
    res = client.get("/name", headers={"Authorization": "Bearer foo"})
    assert res.status_code == 401, "Not a JWT"


def test_bad_settings():
    with pytest.raises(ConfigurationError):
        get_authenticator({"TOKEN_STORE": "jwt"})
    with pytest.raises(ConfigurationError):
        get_authenticator({"TOKEN_STORE": "magic"})


def test_secure_setting():
    auth = get_authenticator({"SECURE": "false"})
    assert auth.secure is False
    assert get_authenticator({"SECURE": "true"}).secure is True
    assert get_authenticator({}).secure is None
    assert isinstance(auth.stateless.token_store, NameTokenStore)


@pytest.mark.parametrize("value, expected", [
    ("True", True), (True, True), ("YES", True), (1, True),
    ("False", False), (False, False), (0, False),
    ("", None), (None, None),
])
def test_secure_setting_types(value, expected):
    assert get_authenticator({"SECURE": value}).secure is expected


def test_secure_setting_unknown():
    with pytest.raises(ConfigurationError):
        get_authenticator({"SECURE": "sometimes"})


def test_samesite_setting():
    assert get_authenticator({"SAMESITE": "Strict"}).samesite == "strict"
    assert get_authenticator({}).samesite == "lax"
    with pytest.raises(ConfigurationError):
        get_authenticator({"SAMESITE": "foo"})
    with pytest.raises(ConfigurationError):
        create_app(SAMESITE="foo")


@pytest.mark.parametrize("name", [12345, ["a"]])
def test_jwt_with_non_string_name(secret, name):
    client = TestClient(create_app(TOKEN_STORE="jwt", JWT_SECRET=secret))
    token = jwt.encode({"name": name}, secret, algorithm="HS256")
    res = client.get("/name", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
