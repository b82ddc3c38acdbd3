"""Error hierarchy shared by the reconciliation engine and its adapters."""

from __future__ import annotations


class ReconcileError(RuntimeError):
    """Base class for failures that end one reconcile invocation."""


class ConfigurationReferenceError(ReconcileError):
    """A name in the desired spec does not resolve to a remote entity.

    Permanent until the desired spec is corrected.
    """


class RemoteCallError(ReconcileError):
    """A control-plane call failed: transport, timeout or non-success envelope."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StoreError(ReconcileError):
    """The object store rejected a read or write."""


class StoreConflictError(StoreError):
    """A concurrent writer changed the object first."""
