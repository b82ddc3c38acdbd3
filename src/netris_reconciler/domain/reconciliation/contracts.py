"""Values exchanged between the phase planners, their executors and the runner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from netris_reconciler.domain.model import ResourceStatus


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    """Outcome of one reconcile invocation.

    ``requeue_after`` is ``None`` when the invocation relies on its own write to
    trigger the next reconcile.
    """

    requeue_after: float | None = None
    status: ResourceStatus | None = None

    @property
    def requeue(self) -> bool:
        return self.requeue_after is not None


@dataclass(frozen=True, slots=True)
class FieldMismatch:
    """First field where the remote entity departs from the twin."""

    field: str
    remote_value: object
    twin_value: object

    def __str__(self) -> str:
        return f"{self.field} changed (remote={self.remote_value!r}, twin={self.twin_value!r})"
