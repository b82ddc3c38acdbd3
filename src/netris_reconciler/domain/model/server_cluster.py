"""Server cluster resources."""

from __future__ import annotations

from dataclasses import dataclass, field

from .objects import TwinHeader
from .remote import RemoteRef


@dataclass(frozen=True, slots=True)
class ServerClusterMember:
    name: str
    shared: bool = False


@dataclass(slots=True, kw_only=True)
class ServerClusterSpec:
    site: str
    template: str
    admin: str = ""
    vpc: str = ""
    tags: list[str] = field(default_factory=list)
    servers: list[ServerClusterMember] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class ServerClusterTwinSpec(TwinHeader):
    site: RemoteRef = field(default_factory=lambda: RemoteRef(0, ""))
    admin: RemoteRef = field(default_factory=lambda: RemoteRef(0, ""))
    vpc: RemoteRef = field(default_factory=lambda: RemoteRef(0, ""))
    template: RemoteRef = field(default_factory=lambda: RemoteRef(0, ""))
    tags: list[str] = field(default_factory=list)
    servers: list[RemoteRef] = field(default_factory=list)


@dataclass(frozen=True, slots=True, kw_only=True)
class RemoteServerCluster:
    id: int
    name: str
    site_id: int = 0
    admin_id: int = 0
    vpc_id: int = 0
    template_id: int = 0
    tags: tuple[str, ...] = ()
    servers: tuple[RemoteRef, ...] = ()
