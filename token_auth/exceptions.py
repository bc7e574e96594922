"""Exceptions raised while authenticating requests."""


class AuthenticationFailed(RuntimeError):
    """The request could not be authenticated with the credentials given."""


class MissingCredentials(AuthenticationFailed):
    """Neither an auth header nor a session cookie was passed."""


class MalformedHeader(AuthenticationFailed):
    """The Authorization header is not of the form ``Bearer <token>``."""


class InvalidToken(AuthenticationFailed):
    """Raised when a passed token is malformed or otherwise invalid."""


class SessionNotFound(AuthenticationFailed):
    """Failed to locate a session in the session store, or it has expired."""


class SessionStoreUnavailable(RuntimeError):
    """The backing session store could not be reached."""


class ConfigurationError(RuntimeError):
    """Raised when a required service parameter is missing."""
