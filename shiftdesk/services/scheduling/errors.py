"""
Error taxonomy for the scheduling core.
"""

from typing import Optional, Sequence

from .types import BatchResult, WorkItem


class SchedulingError(Exception):
    pass


class ValidationError(SchedulingError):
    """Bad input caught locally, before any backend call."""
    pass


class ConflictError(SchedulingError):
    """A scheduler gesture would double-book a person."""

    def __init__(self, message: str, conflicts: Sequence[WorkItem] = ()):
        super().__init__(message)
        self.conflicts = list(conflicts)


class PastTimeError(SchedulingError):
    pass


class PermissionDeniedError(SchedulingError):
    pass


class NotFoundError(SchedulingError):
    pass


class WizardError(SchedulingError):
    pass


class RemoteError(SchedulingError):
    """The backend rejected a call or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PartialFailureError(RemoteError):
    def __init__(self, message: str, result: BatchResult):
        super().__init__(message)
        self.result = result
