"""Exceptions raised by the match engine and its controllers."""


class ConnectXError(Exception):
    """Base class for every error raised by this package."""

    default_message = "connectx error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class NotFoundError(ConnectXError, LookupError):
    """The requested match does not exist."""

    default_message = "not found"


class UnjoinableError(ConnectXError):
    """The match already has two other players."""

    default_message = "match unjoinable"


class ServerInternalError(ConnectXError):
    """Something went wrong on the server side."""

    default_message = "server internal error"


class InvalidOptionsError(ConnectXError, ValueError):
    """The options given for a new match are not acceptable."""

    default_message = "invalid match options"


class InvalidMoveError(ConnectXError, ValueError):
    """A move was rejected by the match rules."""

    default_message = "invalid move"