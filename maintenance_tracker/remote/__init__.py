"""Remote data backends.

The stores and the session manager only depend on :class:`RemoteDataService`;
pick a concrete backend at process start (see ``maintenance_tracker.context``).
"""

from maintenance_tracker.remote.base import (
    AuthEvent,
    AuthUser,
    Order,
    RemoteDataService,
    RemoteServiceError,
    RowNotFound,
    Session,
)

__all__ = [
    "AuthEvent",
    "AuthUser",
    "Order",
    "RemoteDataService",
    "RemoteServiceError",
    "RowNotFound",
    "Session",
]
