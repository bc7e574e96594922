"""
Session stores.

Used to create, look up and delete authenticated sessions. A session id is an
opaque, unguessable string carried by the client in a cookie; the store maps
it back to the :class:`.Identity` that logged in.
"""

import logging
import secrets
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

import redis
from pydantic import ValidationError
from pytz import UTC

from ..domain import Identity, Session
from ..exceptions import SessionNotFound, SessionStoreUnavailable, \
    ConfigurationError

logger = logging.getLogger(__name__)


def _generate_session_id() -> str:
    return secrets.token_urlsafe(32)


def _new_session(identity: Identity, idle_timeout: Optional[int]) -> Session:
    now = datetime.now(tz=UTC)
    return Session(session_id=_generate_session_id(), identity=identity,
                   start_time=now, last_access=now, idle_timeout=idle_timeout)


class SessionStore(ABC):
    """Maps session ids to previously authenticated identities."""

    @abstractmethod
    def create(self, identity: Identity) -> str:
        """Create a new session for ``identity`` and return its id."""

    @abstractmethod
    def load(self, session_id: str) -> Session:
        """
        Load the session record for ``session_id``.

        A successful load counts as activity and restarts the idle timeout.

        Raises
        ------
        :class:`.SessionNotFound`
            If there is no such session, or it has expired.

        """

    @abstractmethod
    def delete(self, session_id: str) -> None:
        """Delete a session. Deleting an unknown session is not an error."""

    def lookup(self, session_id: str) -> Identity:
        """Get the identity bound to ``session_id``."""
        return self.load(session_id).identity


class MemorySessionStore(SessionStore):
    """Keeps sessions in a dict. Safe to share between threads."""

    def __init__(self, idle_timeout: Optional[int] = None) -> None:
        self._idle_timeout = idle_timeout
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, identity: Identity) -> str:
        session = _new_session(identity, self._idle_timeout)
        with self._lock:
            while session.session_id in self._sessions:
                session = _new_session(identity, self._idle_timeout)
            self._sessions[session.session_id] = session
        logger.debug('Created session for %s', identity.name)
        return session.session_id

    def load(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFound(f'Failed to find session {session_id}')
            if session.expired:
                del self._sessions[session_id]
                raise SessionNotFound('Session has expired')
            session = session.touch()
            self._sessions[session_id] = session
        return session

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def purge_expired(self) -> int:
        """Remove all expired sessions; return how many were removed."""
        with self._lock:
            expired = [sid for sid, session in self._sessions.items()
                       if session.expired]
            for session_id in expired:
                del self._sessions[session_id]
        if expired:
            logger.debug('Purged %i expired sessions', len(expired))
        return len(expired)


class RedisSessionStore(SessionStore):
    """
    Keeps sessions in Redis as JSON.

    The StrictRedis instance is thread safe and connections are attached at
    the time a command is executed. Expiry is delegated to Redis: each key is
    written with a TTL equal to the idle timeout, and re-armed on every load,
    when the record is rewritten with its new ``last_access``.
    """

    def __init__(self, host: str = 'localhost', port: int = 6379, db: int = 0,
                 idle_timeout: Optional[int] = None,
                 prefix: str = 'session:') -> None:
        """Open the connection to Redis."""
        logger.debug('New Redis connection at %s, port %s', host, port)
        self.r = redis.StrictRedis(host=host, port=port, db=db)
        self._idle_timeout = idle_timeout
        self._prefix = prefix

    def _key(self, session_id: str) -> str:
        return f'{self._prefix}{session_id}'

    def create(self, identity: Identity) -> str:
        session = _new_session(identity, self._idle_timeout)
        try:
            created = self.r.set(self._key(session.session_id),
                                 session.model_dump_json(),
                                 ex=self._idle_timeout, nx=True)
        except redis.exceptions.RedisError as e:
            logger.error('Failed to create session: %s', e)
            raise SessionStoreUnavailable(f'Failed to create: {e}') from e
        if not created:     # Id collision; vanishingly unlikely.
            return self.create(identity)
        return session.session_id

    def load(self, session_id: str) -> Session:
        key = self._key(session_id)
        try:
            raw = self.r.get(key)
        except redis.exceptions.RedisError as e:
            logger.error('Failed to load session: %s', e)
            raise SessionStoreUnavailable(f'Failed to load: {e}') from e

        if raw is None:
            logger.debug('No such session: %s', session_id)
            raise SessionNotFound(f'Failed to find session {session_id}')
        try:
            session = Session.model_validate_json(raw).touch()
        except ValidationError as e:
            logger.error('Corrupted session data for %s', session_id)
            raise SessionNotFound('Invalid or corrupted session') from e

        # Write back the new last_access; this also re-arms the TTL. A key
        # that expired or was deleted since the get is not recreated.
        try:
            updated = self.r.set(key, session.model_dump_json(),
                                 ex=self._idle_timeout, xx=True)
        except redis.exceptions.RedisError as e:
            logger.error('Failed to update session: %s', e)
            raise SessionStoreUnavailable(f'Failed to update: {e}') from e
        if not updated:
            raise SessionNotFound(f'Failed to find session {session_id}')
        return session

    def delete(self, session_id: str) -> None:
        try:
            self.r.delete(self._key(session_id))
        except redis.exceptions.RedisError as e:
            logger.error('Failed to delete session: %s', e)
            raise SessionStoreUnavailable(f'Failed to delete: {e}') from e


def get_session_store(config: Mapping[str, Any]) -> SessionStore:
    """Build the session store selected by ``SESSION_BACKEND``."""
    duration = int(config.get('SESSION_DURATION', 0))
    idle_timeout = duration if duration > 0 else None
    backend = config.get('SESSION_BACKEND', 'memory')
    if backend == 'memory':
        return MemorySessionStore(idle_timeout=idle_timeout)
    if backend == 'redis':
        return RedisSessionStore(
            host=config.get('REDIS_HOST', 'localhost'),
            port=int(config.get('REDIS_PORT', 6379)),
            db=int(config.get('REDIS_DATABASE', 0)),
            idle_timeout=idle_timeout
        )
    raise ConfigurationError(f'Unknown session backend: {backend}')
