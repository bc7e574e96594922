"""FastAPI dependencies for authenticating requests."""

import logging
from typing import Protocol

from fastapi import HTTPException, Request, Response, status

from ..domain import AuthRequest, AuthResult, SessionCookie
from ..exceptions import AuthenticationFailed, SessionStoreUnavailable

log = logging.getLogger(__name__)


class Authenticator(Protocol):
    def authenticate(self, request: AuthRequest) -> AuthResult:
        ...


def auth_request(request: Request) -> AuthRequest:
    """View a starlette request the way the authenticators expect it."""
    return AuthRequest(headers=request.headers,
                       cookies=request.cookies,
                       secure=request.url.scheme == 'https')


def set_session_cookie(response: Response, cookie: SessionCookie) -> None:
    response.set_cookie(cookie.name, cookie.value, max_age=cookie.max_age,
                        domain=cookie.domain, path=cookie.path,
                        secure=cookie.secure, httponly=cookie.http_only,
                        samesite=cookie.samesite)


class Authenticated:
    """Authenticate the request, or fail it with 401 (or 503).

    Use as a dependency; the route gets the :class:`.AuthResult`:

    .. code-block:: python

       login = Authenticated(SessionTokenAuthenticator(...))

       @app.get("/name")
       def name(auth: AuthResult = Depends(login)) -> str:
           return auth.identity.name

    Any session cookie the authenticator asks for is set on the response.
    """

    def __init__(self, authenticator: Authenticator):
        self.authenticator = authenticator

    def __call__(self, request: Request, response: Response) -> AuthResult:
        try:
            result = self.authenticator.authenticate(auth_request(request))
        except SessionStoreUnavailable as ex:
            log.error("Session store unavailable: %s", ex)
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                                detail="Session store unavailable") from ex
        except AuthenticationFailed as ex:
            log.debug("Failed: %s: %s", type(ex).__name__, ex)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                                detail="Unauthorized",
                                headers={"WWW-Authenticate": "Bearer"}) from ex
        if result.cookie is not None:
            set_session_cookie(response, result.cookie)
        return result
