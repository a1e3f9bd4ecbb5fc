"""Base exception classes for the livebeat domain layer."""


class LivebeatError(Exception):
    """Base exception for all livebeat errors.

    Every error raised by the package, or handed to an error observer,
    inherits from this class so callers can catch them uniformly.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
