"""
Integration with the session store.

When a client first logs in with a bearer token, a session is created and its
id is handed back in a cookie. On later requests the cookie alone is enough to
retrieve the identity. See :mod:`.store`.
"""

from . import store
from .store import SessionStore, MemorySessionStore, RedisSessionStore, \
    get_session_store
