"""Object envelopes for desired resources and their resolved twins."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from .kinds import ResourceKind


@dataclass(frozen=True, slots=True)
class ObjectKey:
    """Namespace + name address of a stored object."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


class StatusState(StrEnum):
    OK = "OK"
    FAILURE = "Failure"


@dataclass(frozen=True, slots=True)
class ResourceStatus:
    """Observed outcome reported on a desired resource."""

    state: StatusState | None = None
    message: str = ""

    @classmethod
    def ok(cls, message: str = "Success") -> ResourceStatus:
        return cls(state=StatusState.OK, message=message)

    @classmethod
    def failure(cls, message: str) -> ResourceStatus:
        return cls(state=StatusState.FAILURE, message=message)


@dataclass(slots=True, kw_only=True)
class ObjectMeta:
    name: str
    namespace: str = "default"
    uid: str = ""
    generation: int = 0
    annotations: dict[str, str] = field(default_factory=dict)
    finalizers: list[str] = field(default_factory=list)
    deletion_timestamp: datetime | None = None
    resource_version: str | None = None

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.namespace, self.name)

    @property
    def is_deleting(self) -> bool:
        return self.deletion_timestamp is not None


@dataclass(slots=True, kw_only=True)
class TwinHeader:
    """Fields every twin spec carries regardless of kind.

    ``id == 0`` means the remote entity is not created or not discovered yet.
    ``source_generation`` is the desired generation the twin was built from and
    ``synced_generation`` the one whose content the control plane last received.
    """

    imported: bool = False
    reclaim: bool = False
    source_generation: int = 0
    synced_generation: int = 0
    id: int = 0
    resource_name: str = ""


@dataclass(kw_only=True)
class DesiredResource[SpecT]:
    """User-authored object expressing target state through name references."""

    kind: ResourceKind
    metadata: ObjectMeta
    spec: SpecT
    status: ResourceStatus = field(default_factory=ResourceStatus)

    @property
    def key(self) -> ObjectKey:
        return self.metadata.key

    @property
    def twin_key(self) -> ObjectKey:
        # twins follow the immutable uid so renames never orphan them
        return ObjectKey(self.metadata.namespace, self.metadata.uid)


@dataclass(kw_only=True)
class TwinResource[TwinSpecT: TwinHeader]:
    """Engine-owned resolved counterpart of a desired resource ("Meta")."""

    kind: ResourceKind
    metadata: ObjectMeta
    spec: TwinSpecT

    @property
    def key(self) -> ObjectKey:
        return self.metadata.key

    @property
    def desired_key(self) -> ObjectKey:
        return ObjectKey(self.metadata.namespace, self.spec.resource_name)
