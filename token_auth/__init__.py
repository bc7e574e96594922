"""
Bearer token authentication, with optional session-persisted login.

This package authenticates HTTP requests from an ``Authorization: Bearer``
header. It can do so on every request (:class:`.StatelessTokenAuthenticator`),
or once, after which a session cookie carries the login
(:class:`.SessionTokenAuthenticator`).

Quick start
-----------

The authenticators are framework independent. To host them in a FastAPI
application, wrap one in :class:`token_auth.fastapi.auth.Authenticated` and
use it as a dependency:

.. code-block:: python

   from fastapi import Depends, FastAPI
   from token_auth import SessionTokenAuthenticator, NameTokenStore
   from token_auth.sessions import MemorySessionStore
   from token_auth.fastapi.auth import Authenticated

   login = Authenticated(SessionTokenAuthenticator(
       NameTokenStore(), MemorySessionStore(idle_timeout=3600)))

   app = FastAPI()

   @app.get("/name")
   def name(auth=Depends(login)) -> str:
       return auth.identity.name

The first request must send ``Authorization: Bearer <token>``; the response
sets the ``session`` cookie, and later requests only need the cookie.
"""

from .domain import Identity, Session, AuthRequest, AuthResult, SessionCookie
from .tokens import TokenStore, NameTokenStore, JWTTokenStore
from .authenticators import StatelessTokenAuthenticator, \
    SessionTokenAuthenticator
