"""Server cluster template resources.

Template vnets are modelled with explicit optional fields instead of free-form
mappings so twin and remote can be compared field by field. ``None`` means
"not set by the user"; blank strings and zero integers normalize to ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields

from .objects import TwinHeader


def _blank_to_none[T: (str, int)](value: T | None) -> T | None:
    return value or None


@dataclass(frozen=True, slots=True, kw_only=True)
class TemplateGateway:
    assign_type: str | None = None
    allocation: str | None = None
    child_subnet_prefix_length: int | None = None
    hostnum: int | None = None

    def normalized(self) -> TemplateGateway | None:
        gateway = TemplateGateway(
            assign_type=_blank_to_none(self.assign_type),
            allocation=_blank_to_none(self.allocation),
            child_subnet_prefix_length=_blank_to_none(self.child_subnet_prefix_length),
            hostnum=_blank_to_none(self.hostnum),
        )
        if all(getattr(gateway, f.name) is None for f in fields(gateway)):
            return None
        return gateway


@dataclass(frozen=True, slots=True, kw_only=True)
class TemplateVNet:
    postfix: str
    type: str
    server_nics: tuple[str, ...] = ()
    vlan: str | None = None
    vlan_id: str | None = None
    ipv4_gateway: TemplateGateway | None = None
    ipv6_gateway: TemplateGateway | None = None
    ipv4_dhcp_enabled: bool = False
    ipv6_dhcp_enabled: bool = False

    def normalized(self) -> TemplateVNet:
        return TemplateVNet(
            postfix=self.postfix,
            type=self.type,
            server_nics=tuple(self.server_nics),
            vlan=_blank_to_none(self.vlan),
            vlan_id=_blank_to_none(self.vlan_id),
            ipv4_gateway=self.ipv4_gateway.normalized() if self.ipv4_gateway else None,
            ipv6_gateway=self.ipv6_gateway.normalized() if self.ipv6_gateway else None,
            ipv4_dhcp_enabled=self.ipv4_dhcp_enabled,
            ipv6_dhcp_enabled=self.ipv6_dhcp_enabled,
        )


@dataclass(slots=True, kw_only=True)
class ServerClusterTemplateSpec:
    vnets: list[TemplateVNet] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class ServerClusterTemplateTwinSpec(TwinHeader):
    vnets: list[TemplateVNet] = field(default_factory=list)


@dataclass(frozen=True, slots=True, kw_only=True)
class RemoteServerClusterTemplate:
    id: int
    name: str
    vnets: tuple[TemplateVNet, ...] = ()


def _gateway_difference(
    label: str, desired: TemplateGateway | None, remote: TemplateGateway | None
) -> str | None:
    if desired is None:
        return None
    if remote is None:
        return label
    for item in fields(desired):
        wanted = getattr(desired, item.name)
        if wanted is not None and wanted != getattr(remote, item.name):
            return f"{label}.{item.name}"
    return None


def vnet_difference(desired: TemplateVNet, remote: TemplateVNet) -> str | None:
    """Return the first field where ``remote`` departs from ``desired``, else ``None``.

    Optional fields the desired vnet leaves unset are not compared, so values
    the control plane assigns on its own never register as drift.
    """

    wanted = desired.normalized()
    actual = remote.normalized()
    for label in ("postfix", "type", "server_nics", "ipv4_dhcp_enabled", "ipv6_dhcp_enabled"):
        if getattr(wanted, label) != getattr(actual, label):
            return label
    for label in ("vlan", "vlan_id"):
        value = getattr(wanted, label)
        if value is not None and value != getattr(actual, label):
            return label
    return _gateway_difference(
        "ipv4_gateway", wanted.ipv4_gateway, actual.ipv4_gateway
    ) or _gateway_difference("ipv6_gateway", wanted.ipv6_gateway, actual.ipv6_gateway)
