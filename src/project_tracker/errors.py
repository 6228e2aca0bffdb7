"""Typed errors raised by the tracker core.

Every error carries a stable ``code`` and the process ``exit_code`` the CLI
uses for it. The core raises; only the CLI turns errors into messages.
"""
from __future__ import annotations


class TrackerError(Exception):
    """Base class for all tracker failures."""

    code = "TRACKER_ERROR"
    exit_code = 1

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# -------------------- caller errors --------------------
class InvalidInput(TrackerError):
    """Caller-supplied data failed validation (empty text, unknown status)."""

    code = "INVALID_INPUT"
    exit_code = 2

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field


class NotFound(TrackerError):
    """A referenced project or task does not exist."""

    code = "NOT_FOUND"
    exit_code = 3

    def __init__(self, resource_type: str, resource_id: object, scope: str = ""):
        label = resource_id if isinstance(resource_id, int) else f"'{resource_id}'"
        where = f" in {scope}" if scope else ""
        super().__init__(f"{resource_type} {label} not found{where}.")
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.scope = scope


# -------------------- storage errors --------------------
class StoreCorrupt(TrackerError):
    """Persisted data could not be parsed into a store."""

    code = "STORE_CORRUPT"
    exit_code = 4

    def __init__(self, message: str, path: object = None):
        where = f" ({path})" if path is not None else ""
        super().__init__(f"Data file is corrupt{where}: {message}")
        self.detail = message
        self.path = path


class StoreIOError(TrackerError):
    """The storage medium failed while reading or writing."""

    code = "STORE_IO"
    exit_code = 5

    def __init__(self, message: str, operation: str):
        super().__init__(f"Could not {operation} data file: {message}")
        self.operation = operation
