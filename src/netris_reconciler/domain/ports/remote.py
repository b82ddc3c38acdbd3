"""Port for the infrastructure control-plane API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from netris_reconciler.domain.model import EntityKind, Identified


@dataclass(frozen=True, slots=True)
class ApiReply:
    """Structured envelope returned by mutating control-plane calls."""

    status_code: int
    is_success: bool
    message: str = ""
    entity_id: int = 0

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


@runtime_checkable
class RemoteClient(Protocol):
    """Per-kind List/Add/Update/Delete against the control plane.

    Implementations raise ``RemoteCallError`` for transport failures, timeouts and
    malformed responses. A well-formed failure envelope is returned as an
    ``ApiReply`` with ``is_success`` unset so callers can decide, for example,
    that a 404 on delete is success.
    """

    def list(self, kind: EntityKind) -> Sequence[Identified]: ...

    def add(self, kind: EntityKind, payload: Mapping[str, object]) -> ApiReply: ...

    def update(
        self, kind: EntityKind, entity_id: int, payload: Mapping[str, object]
    ) -> ApiReply: ...

    def delete(self, kind: EntityKind, entity_id: int) -> ApiReply: ...


__all__ = ["ApiReply", "RemoteClient"]
