"""
MountAssign exceptions.
"""

from __future__ import annotations


class MountAssignError(Exception):
    """Base class for all MountAssign errors."""


class BackendError(MountAssignError):
    """A storage backend call was rejected."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(message)
        self.operation = operation
        self.message = message

    def __str__(self) -> str:
        return f"{self.operation}: {self.message}"

    @classmethod
    def wrap(cls, operation: str, error: Exception) -> BackendError:
        """Get ``error`` as a BackendError, wrapping foreign exceptions."""
        if isinstance(error, BackendError):
            return error
        return cls(operation, f"{type(error).__name__}: {error}")


class SetupError(MountAssignError):
    """The manual partitioning handshake failed."""


class SessionStateError(MountAssignError):
    """An operation was attempted in the wrong session state."""


class EditorNotReadyError(SessionStateError):
    """An edit was attempted before manual partitioning was ready."""


class UnknownDeviceError(MountAssignError, LookupError):
    """No partition request matches the given device."""

    def __init__(self, device: str) -> None:
        super().__init__(f"No partition request for device {device!r}")
        self.device = device


class LockedFieldError(MountAssignError):
    """An edit targeted a control that is disabled for the request."""

    def __init__(self, device: str, field: str) -> None:
        super().__init__(f"{field} of {device!r} cannot be edited")
        self.device = device
        self.field = field
