"""
Authenticators for inbound requests.

:class:`StatelessTokenAuthenticator` checks the ``Authorization: Bearer``
header on every request. :class:`SessionTokenAuthenticator` only needs the
token once: it opens a session on the first successful login and hands the
session id back as a cookie, which carries later requests.

Neither authenticator touches the request; the outcome is returned as an
:class:`.AuthResult` for the caller to pass on to its handlers.
"""

import logging
from typing import Literal, Optional, Union

from .domain import AuthRequest, AuthResult, SessionCookie
from .exceptions import MissingCredentials, MalformedHeader, SessionNotFound
from .sessions import SessionStore
from .tokens import TokenStore

logger = logging.getLogger(__name__)


def bearer_token(request: AuthRequest) -> str:
    """Extract the token from the ``Authorization: Bearer`` header."""
    header = request.header('Authorization')
    parts = header.split() if header else []
    if not parts:
        raise MissingCredentials('No Authorization header')
    if parts[0].lower() != 'bearer':
        logger.debug('Authorization header lacks bearer scheme')
        raise MalformedHeader('Authorization header is not a bearer token')
    if len(parts) != 2:
        logger.debug('Authorization header not 2 parts')
        raise MalformedHeader('Authorization header is malformed')
    return parts[1]


class StatelessTokenAuthenticator:
    """Authenticates every request from its bearer token."""

    def __init__(self, token_store: TokenStore) -> None:
        self.token_store = token_store

    def authenticate(self, request: AuthRequest) -> AuthResult:
        """
        Authenticate ``request`` from its ``Authorization`` header.

        Raises
        ------
        :class:`.MissingCredentials`
        :class:`.MalformedHeader`
        :class:`.InvalidToken`

        """
        identity = self.token_store.resolve(bearer_token(request))
        logger.debug('Authenticated %s via header', identity.name)
        return AuthResult(identity=identity, via='header')


class SessionTokenAuthenticator:
    """
    Logs in with a bearer token once, then rides a session cookie.

    If the request carries a session cookie that maps to a live session, that
    session's identity is used and the token is not consulted. Otherwise the
    bearer token is checked, a new session is created, and the result asks
    the response layer to set the session cookie.
    """

    def __init__(self,
                 tokens: Union[TokenStore, StatelessTokenAuthenticator],
                 session_store: SessionStore,
                 cookie_name: str = 'session',
                 secure: Optional[bool] = None,
                 domain: Optional[str] = None,
                 samesite: Literal['lax', 'strict', 'none'] = 'lax') -> None:
        if isinstance(tokens, TokenStore):
            tokens = StatelessTokenAuthenticator(tokens)
        self.stateless = tokens
        self.session_store = session_store
        self.cookie_name = cookie_name
        self.secure = secure
        self.domain = domain
        self.samesite = samesite

    def _cookie(self, request: AuthRequest, value: str,
                max_age: Optional[int] = None) -> SessionCookie:
        secure = request.secure if self.secure is None else self.secure
        return SessionCookie(name=self.cookie_name, value=value,
                             secure=secure, http_only=True,
                             domain=self.domain, samesite=self.samesite,
                             max_age=max_age)

    def authenticate(self, request: AuthRequest) -> AuthResult:
        """
        Authenticate ``request`` from its session cookie or bearer token.

        A stale or unknown session cookie is not an error in itself; the
        bearer token gets a chance to log in again.

        Raises
        ------
        :class:`.MissingCredentials`
        :class:`.MalformedHeader`
        :class:`.InvalidToken`
        :class:`.SessionStoreUnavailable`

        """
        session_id = request.cookies.get(self.cookie_name)
        if session_id:
            try:
                identity = self.session_store.lookup(session_id)
            except SessionNotFound as e:
                logger.info('Session cookie not usable: %s', e)
            else:
                logger.debug('Authenticated %s via session', identity.name)
                return AuthResult(identity=identity, via='cookie',
                                  session_id=session_id)

        result = self.stateless.authenticate(request)
        session_id = self.session_store.create(result.identity)
        logger.info('Logged in %s with token; session created',
                    result.identity.name)
        return AuthResult(identity=result.identity, via='header',
                          session_id=session_id,
                          cookie=self._cookie(request, session_id))

    def logout(self, request: AuthRequest) -> SessionCookie:
        """Delete the request's session, if any, and get a clearing cookie."""
        session_id = request.cookies.get(self.cookie_name)
        if session_id:
            self.session_store.delete(session_id)
            logger.debug('Session deleted')
        return self._cookie(request, '', max_age=0)
