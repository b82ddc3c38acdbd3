"""Records read back from the control plane."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class Identified(Protocol):
    """Anything the resolution cache can index: a numeric ID and a unique name."""

    @property
    def id(self) -> int: ...

    @property
    def name(self) -> str: ...


@dataclass(frozen=True, slots=True)
class RemoteRef:
    """Plain ``(id, name)`` record used for sites, tenants, profiles, ports and VPC lookups."""

    id: int
    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class RemotePort:
    """Switch port indexed under ``port@switch`` so cabling references stay unique."""

    id: int
    name: str
    port: str
    switch_name: str = ""
