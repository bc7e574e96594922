"""Defines identity and session concepts used by the authenticators."""

from typing import Literal, Mapping, Optional
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict
from pytz import UTC


class Identity(BaseModel):
    """An authenticated user, as seen by downstream handlers."""

    model_config = ConfigDict(frozen=True)

    name: str
    """Name of the user; for the name token store this is the token itself."""


class Session(BaseModel):
    """A server-side record binding a session id to an :class:`Identity`."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    identity: Identity
    start_time: datetime
    last_access: datetime

    idle_timeout: Optional[int] = None
    """Seconds of inactivity after which the session expires. ``None`` means
    the session never expires on its own."""

    @property
    def expires(self) -> Optional[datetime]:
        """The time at which the session expires if it is not used."""
        if self.idle_timeout is None:
            return None
        return self.last_access + timedelta(seconds=self.idle_timeout)

    @property
    def expired(self) -> bool:
        """Indicate whether the session has expired."""
        expires = self.expires
        return expires is not None and expires <= datetime.now(tz=UTC)

    def touch(self) -> 'Session':
        """Get a copy of this session with ``last_access`` set to now."""
        return self.model_copy(update={'last_access': datetime.now(tz=UTC)})


@dataclass
class AuthRequest:
    """The parts of an inbound HTTP request that authentication looks at."""

    headers: Mapping[str, str] = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict)
    secure: bool = False
    """True if the request arrived over TLS."""

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        value = self.headers.get(name)
        if value is not None:
            return value
        name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return None


@dataclass
class SessionCookie:
    """Instruction for the response layer to set (or clear) a cookie."""

    name: str
    value: str
    secure: bool = False
    http_only: bool = True
    domain: Optional[str] = None
    path: str = '/'
    samesite: Literal['lax', 'strict', 'none'] = 'lax'
    max_age: Optional[int] = None
    """``None`` for a browser-session cookie; ``0`` deletes the cookie."""


@dataclass
class AuthResult:
    """Authentication context handed to handlers for one request."""

    identity: Identity
    via: Literal['header', 'cookie']
    session_id: Optional[str] = None
    cookie: Optional[SessionCookie] = None
