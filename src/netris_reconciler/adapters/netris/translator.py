"""Translate Netris API payloads into domain remote records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from netris_reconciler.domain.model import (
    RemoteInventoryServer,
    RemotePort,
    RemoteRef,
    RemoteServerCluster,
    RemoteServerClusterTemplate,
    RemoteVPC,
    ResolvedLink,
    TemplateGateway,
    TemplateVNet,
)

if TYPE_CHECKING:
    from .schema import (
        NetrisAddress,
        NetrisGateway,
        NetrisHWLink,
        NetrisIDName,
        NetrisInventory,
        NetrisPort,
        NetrisServerCluster,
        NetrisServerClusterTemplate,
        NetrisVNet,
        NetrisVPC,
    )


def _address(value: NetrisAddress | None) -> str:
    return value.address if value is not None else ""


def translate_ref(item: NetrisIDName) -> RemoteRef:
    return RemoteRef(item.id, item.name)


def translate_port(item: NetrisPort) -> RemotePort:
    port = item.port or item.name
    return RemotePort(
        id=item.id,
        name=f"{port}@{item.switch_name}",
        port=port,
        switch_name=item.switch_name,
    )


def translate_link(item: NetrisHWLink) -> ResolvedLink:
    return ResolvedLink(local=item.local.name, port_id=item.remote.id, port_name=item.remote.name)


def translate_inventory_server(item: NetrisInventory) -> RemoteInventoryServer:
    return RemoteInventoryServer(
        id=item.id,
        name=item.name,
        description=item.description,
        tenant_id=item.tenant.id,
        site_id=item.site.id,
        profile_id=item.profile.id if item.profile is not None else 0,
        main_ip=_address(item.main_ip),
        mgmt_ip=_address(item.mgmt_ip),
        asn=item.asn or 0,
        ports_count=item.port_count,
        uuid=item.uuid,
        custom_data=item.custom_data,
        srv_role=item.srv_role,
        tags=tuple(item.tags),
        links=tuple(translate_link(link) for link in item.links),
    )


def translate_vpc(item: NetrisVPC) -> RemoteVPC:
    return RemoteVPC(
        id=item.id,
        name=item.name,
        admin_tenant_id=item.admin_tenant.id,
        guest_tenant_ids=tuple(guest.id for guest in item.guest_tenant),
        tags=tuple(item.tags),
    )


def translate_server_cluster(item: NetrisServerCluster) -> RemoteServerCluster:
    return RemoteServerCluster(
        id=item.id,
        name=item.name,
        site_id=item.site.id,
        admin_id=item.admin.id,
        vpc_id=item.vpc.id,
        template_id=item.template.id,
        tags=tuple(item.tags),
        servers=tuple(translate_ref(server) for server in item.servers),
    )


def _gateway(item: NetrisGateway | None) -> TemplateGateway | None:
    if item is None:
        return None
    return TemplateGateway(
        assign_type=item.assign_type,
        allocation=item.allocation,
        child_subnet_prefix_length=item.child_subnet_prefix_length,
        hostnum=item.hostnum,
    )


def translate_vnet(item: NetrisVNet) -> TemplateVNet:
    return TemplateVNet(
        postfix=item.postfix,
        type=item.type,
        server_nics=tuple(item.server_nics),
        vlan=item.vlan,
        vlan_id=item.vlan_id,
        ipv4_gateway=_gateway(item.ipv4_gateway),
        ipv6_gateway=_gateway(item.ipv6_gateway),
        ipv4_dhcp_enabled=item.ipv4_dhcp_enabled,
        ipv6_dhcp_enabled=item.ipv6_dhcp_enabled,
    )


def translate_server_cluster_template(
    item: NetrisServerClusterTemplate,
) -> RemoteServerClusterTemplate:
    return RemoteServerClusterTemplate(
        id=item.id,
        name=item.name,
        vnets=tuple(translate_vnet(vnet) for vnet in item.vnets),
    )
