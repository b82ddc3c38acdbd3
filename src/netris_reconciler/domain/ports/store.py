"""Port for the object store that holds desired resources and their twins."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from netris_reconciler.domain.model import (
        DesiredResource,
        ObjectKey,
        ResourceKind,
        ResourceStatus,
        TwinResource,
    )


@runtime_checkable
class ObjectStore(Protocol):
    """Get/Create/Update/Patch/Delete keyed by namespace + name.

    Reads return ``None`` when the object does not exist. Writes raise
    ``StoreConflictError`` when a concurrent writer got there first and
    ``StoreError`` for any other rejection.
    """

    def get_desired(self, kind: ResourceKind, key: ObjectKey) -> DesiredResource[Any] | None: ...

    def list_desired(
        self, kind: ResourceKind, *, namespace: str | None = None
    ) -> Sequence[DesiredResource[Any]]: ...

    def patch_metadata(self, desired: DesiredResource[Any]) -> None:
        """Merge annotations and finalizers of ``desired``; the spec is left alone."""
        ...

    def patch_desired(self, desired: DesiredResource[Any]) -> None:
        """Merge the spec of ``desired`` into the stored object."""
        ...

    def update_desired(self, desired: DesiredResource[Any]) -> None:
        """Replace the stored object; used to clear finalizers."""
        ...

    def patch_status(self, desired: DesiredResource[Any], status: ResourceStatus) -> None: ...

    def get_twin(self, kind: ResourceKind, key: ObjectKey) -> TwinResource[Any] | None: ...

    def list_twins(
        self, kind: ResourceKind, *, namespace: str | None = None
    ) -> Sequence[TwinResource[Any]]: ...

    def create_twin(self, twin: TwinResource[Any]) -> None: ...

    def update_twin(self, twin: TwinResource[Any]) -> None: ...

    def delete_twin(self, twin: TwinResource[Any]) -> None: ...


__all__ = ["ObjectStore"]
