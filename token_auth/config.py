"""Configuration for the token auth service."""

import os

SESSION_COOKIE_NAME = os.environ.get('SESSION_COOKIE_NAME', 'session')
SESSION_DURATION = os.environ.get('SESSION_DURATION', '0')
"""Idle timeout for sessions, in seconds. ``0`` means sessions never expire."""

SESSION_BACKEND = os.environ.get('SESSION_BACKEND', 'memory')
"""Either ``memory`` or ``redis``."""

REDIS_HOST = os.environ.get('REDIS_HOST', 'localhost')
REDIS_PORT = os.environ.get('REDIS_PORT', '6379')
REDIS_DATABASE = os.environ.get('REDIS_DATABASE', '0')

TOKEN_STORE = os.environ.get('TOKEN_STORE', 'name')
"""Either ``name`` (any token is accepted as the user's name) or ``jwt``."""

JWT_SECRET = os.environ.get('JWT_SECRET')

SECURE = os.environ.get('SECURE', '').lower()
"""``true`` or ``false`` to force the Secure cookie flag. Unset follows the
request scheme."""

DOMAIN = os.environ.get('DOMAIN')
SAMESITE = os.environ.get('SAMESITE', 'lax')

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


def as_dict() -> dict:
    """Get the settings in this module as a dict."""
    return {key: value for key, value in globals().items() if key.isupper()}
