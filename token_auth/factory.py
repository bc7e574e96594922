"""Provides an app factory for the token auth service."""

import logging
from typing import Any, Optional

from fastapi import Depends, FastAPI, Request, Response, status

from . import config
from .app_logging import setup_logger
from .authenticators import SessionTokenAuthenticator
from .domain import AuthResult
from .exceptions import ConfigurationError
from .fastapi.auth import Authenticated, Authenticator, auth_request, \
    set_session_cookie
from .sessions import get_session_store
from .tokens import TokenStore, NameTokenStore, JWTTokenStore

SAMESITE_VALUES = ('lax', 'strict', 'none')


def get_token_store(settings: dict) -> TokenStore:
    """Build the token store selected by ``TOKEN_STORE``."""
    kind = settings.get('TOKEN_STORE', 'name')
    if kind == 'name':
        return NameTokenStore()
    if kind == 'jwt':
        return JWTTokenStore(settings.get('JWT_SECRET'))
    raise ConfigurationError(f'Unknown token store: {kind}')


def get_authenticator(settings: dict) -> SessionTokenAuthenticator:
    """Build a session authenticator from settings."""
    secure: Optional[bool] = None
    value = settings.get('SECURE')
    flag = '' if value is None else str(value).strip().lower()
    if flag in ('true', 'yes', '1'):
        secure = True
    elif flag in ('false', 'no', '0'):
        secure = False
    elif flag:
        raise ConfigurationError(f'Unknown SECURE value: {flag}')

    samesite = str(settings.get('SAMESITE') or 'lax').lower()
    if samesite not in SAMESITE_VALUES:
        raise ConfigurationError(f'Unknown SAMESITE value: {samesite}')
    return SessionTokenAuthenticator(
        get_token_store(settings),
        get_session_store(settings),
        cookie_name=settings.get('SESSION_COOKIE_NAME', 'session'),
        secure=secure,
        domain=settings.get('DOMAIN'),
        samesite=samesite
    )


def create_app(authenticator: Optional[Authenticator] = None,
               **extra: Any) -> FastAPI:
    """Initialize an instance of the token auth service."""
    settings = config.as_dict()
    settings.update(extra)
    setup_logger(settings.get('LOG_LEVEL', 'INFO'))
    logger = logging.getLogger(__name__)

    if authenticator is None:
        authenticator = get_authenticator(settings)
    logger.info("Authenticator: %s", type(authenticator).__name__)

    app = FastAPI(authenticator=authenticator, **settings)
    login = Authenticated(authenticator)

    @app.get("/")
    async def root() -> str:
        return "Hello"

    @app.get("/name")
    def name(auth: AuthResult = Depends(login)) -> str:
        """Return the authenticated user's name."""
        return auth.identity.name

    @app.get("/logout")
    def logout(request: Request) -> Response:
        response = Response(status_code=status.HTTP_204_NO_CONTENT)
        if isinstance(authenticator, SessionTokenAuthenticator):
            cookie = authenticator.logout(auth_request(request))
            set_session_cookie(response, cookie)
        return response

    return app
