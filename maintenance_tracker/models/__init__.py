"""SQLAlchemy models for the local backend.

All models are imported here so that ``Base.metadata.create_all`` discovers
them. If you add a new model, import it in this file.
"""

from maintenance_tracker.models.accommodation import Accommodation
from maintenance_tracker.models.task import Task
from maintenance_tracker.models.user import AuthAccount, User

__all__ = [
    "Accommodation",
    "AuthAccount",
    "Task",
    "User",
]
