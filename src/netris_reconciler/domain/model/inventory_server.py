"""Inventory server (bare-metal host) resources."""

from __future__ import annotations

from dataclasses import dataclass, field

from .objects import TwinHeader


@dataclass(frozen=True, slots=True)
class InventoryServerLink:
    """Cabling between a server NIC and a switch port given as ``port@switch``."""

    local: str
    remote: str


@dataclass(slots=True, kw_only=True)
class InventoryServerSpec:
    site: str
    tenant: str = ""
    description: str = ""
    profile: str = ""
    main_ip: str = ""
    mgmt_ip: str = ""
    asn: int = 0
    ports_count: int = 0
    uuid: str = ""
    links: list[InventoryServerLink] = field(default_factory=list)
    custom_data: str = ""
    tags: list[str] = field(default_factory=list)
    srv_role: str = ""


@dataclass(frozen=True, slots=True)
class ResolvedLink:
    local: str
    port_id: int
    port_name: str


@dataclass(slots=True, kw_only=True)
class InventoryServerTwinSpec(TwinHeader):
    tenant_id: int = 0
    description: str = ""
    site_id: int = 0
    profile_id: int = 0
    main_ip: str = ""
    mgmt_ip: str = ""
    asn: int = 0
    ports_count: int = 0
    uuid: str = ""
    links: list[ResolvedLink] = field(default_factory=list)
    custom_data: str = ""
    tags: list[str] = field(default_factory=list)
    srv_role: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class RemoteInventoryServer:
    id: int
    name: str
    description: str = ""
    tenant_id: int = 0
    site_id: int = 0
    profile_id: int = 0
    main_ip: str = ""
    mgmt_ip: str = ""
    asn: int = 0
    ports_count: int = 0
    uuid: str = ""
    custom_data: str = ""
    srv_role: str = ""
    tags: tuple[str, ...] = ()
    links: tuple[ResolvedLink, ...] = ()
