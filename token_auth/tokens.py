"""Token stores: resolve bearer tokens to identities."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Optional

import jwt
from pytz import UTC

from .domain import Identity
from .exceptions import InvalidToken, ConfigurationError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class TokenStore(ABC):
    """Resolves an opaque bearer token to an :class:`.Identity`."""

    @abstractmethod
    def resolve(self, token: str) -> Identity:
        """
        Get the identity that ``token`` authenticates.

        Raises
        ------
        :class:`.InvalidToken`
            If the token is malformed or rejected.

        """


class NameTokenStore(TokenStore):
    """Accepts any non-empty token, naming the user after the token."""

    def resolve(self, token: str) -> Identity:
        if not token:
            raise InvalidToken('Empty token')
        return Identity(name=token)


class JWTTokenStore(TokenStore):
    """Decodes HS256 JWTs signed with a shared secret."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ConfigurationError('Missing JWT secret')
        self._secret = secret

    def resolve(self, token: str) -> Identity:
        try:
            data = dict(jwt.decode(token, self._secret, algorithms=[ALGORITHM]))
        except jwt.ExpiredSignatureError as e:
            logger.debug('Token has expired')
            raise InvalidToken('Token has expired') from e
        except jwt.exceptions.InvalidTokenError as e:
            logger.debug('Token could not be decoded: %s', e)
            raise InvalidToken('Not a valid token') from e

        name = data.get('name') or data.get('sub')
        if not name or not isinstance(name, str):
            logger.debug('Token lacks a string name claim')
            raise InvalidToken('Token payload malformed')
        return Identity(name=name)


def encode(identity: Identity, secret: str,
           expires_in: Optional[int] = None) -> str:
    """Encode an identity as a JWT accepted by :class:`JWTTokenStore`."""
    now = datetime.now(tz=UTC)
    claims = {'name': identity.name, 'iat': now}
    if expires_in is not None:
        claims['exp'] = now + timedelta(seconds=expires_in)
    return jwt.encode(claims, secret, algorithm=ALGORITHM)
