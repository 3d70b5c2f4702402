"""Error kinds surfaced by the session manager, adapters, and stores."""

from collections.abc import Mapping


class MaintenanceError(Exception):
    """Base class for errors that cross the core boundary.

    Only a human-readable ``message`` is carried; no structured codes.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotAuthenticatedError(MaintenanceError):
    """An operation needed a signed-in user and there was none."""

    def __init__(self, message: str = "User is not authenticated") -> None:
        super().__init__(message)


class RemoteError(MaintenanceError):
    """Any failure reported by the remote data service, normalized to a message."""


def get_error_message(error: object) -> str:
    """Extract a readable message from whatever was raised or returned as an error."""
    if isinstance(error, MaintenanceError):
        return error.message
    if isinstance(error, str):
        return error
    message = getattr(error, "message", None)
    if message is not None:
        return str(message)
    if isinstance(error, Mapping) and "message" in error:
        return str(error["message"])
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return "Unknown error"
