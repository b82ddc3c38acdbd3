"""Virtual private cloud resources."""

from __future__ import annotations

from dataclasses import dataclass, field

from .objects import TwinHeader
from .remote import RemoteRef


@dataclass(slots=True, kw_only=True)
class VPCSpec:
    admin_tenant: str
    guest_tenants: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class VPCTwinSpec(TwinHeader):
    admin_tenant: RemoteRef = field(default_factory=lambda: RemoteRef(0, ""))
    guest_tenants: list[RemoteRef] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True, kw_only=True)
class RemoteVPC:
    id: int
    name: str
    admin_tenant_id: int = 0
    guest_tenant_ids: tuple[int, ...] = ()
    tags: tuple[str, ...] = ()
