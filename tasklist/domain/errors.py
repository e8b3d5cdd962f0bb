from __future__ import annotations


class TaskListError(Exception):
    """Base class for errors raised by the task store."""


class ValidationError(TaskListError):
    """Input rejected before it reached storage."""


class StorageError(TaskListError):
    """Database unreachable, schema missing or rows in an unexpected shape."""


class MalformedRowError(StorageError):
    pass
