from __future__ import annotations


class TaskManagerError(Exception):
    """Base class for errors raised by the task manager."""


class ValidationError(TaskManagerError):
    """A task cannot be saved as it is (blank title, inconsistent due date)."""


class StoreError(TaskManagerError):
    pass


class StoreUnavailable(StoreError):
    """The underlying database file or server cannot be opened."""


class PersistenceError(StoreError):
    """A read or write against an open store failed and was rolled back."""


class BadgeSchedulingError(TaskManagerError):
    """The platform refused or does not support setting the app badge."""
