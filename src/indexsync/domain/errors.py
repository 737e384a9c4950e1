"""Failures raised while reconciling declarations with a cluster."""

from __future__ import annotations


class IndexSyncError(RuntimeError):
    """Base class for reconciliation failures."""


class DeclarationError(IndexSyncError):
    """Raised when a declaration document cannot be used as a request body."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(f"Invalid declaration for [{name}]: {message}")
        self.name = name


class DeclarationNotFoundError(DeclarationError):
    """Raised when a declaration file is missing or unreadable."""


class TransportError(IndexSyncError):
    """Raised when the cluster cannot be reached or answers with an unexpected status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class IndexNotFoundError(TransportError):
    """Raised when state is requested for an index the cluster does not know."""


class AcknowledgementError(IndexSyncError):
    """Raised when the cluster does not acknowledge a mutating call."""

    def __init__(self, name: str, operation: str) -> None:
        super().__init__(f"Could not {operation} [{name}]: the cluster did not acknowledge it")
        self.name = name
        self.operation = operation
