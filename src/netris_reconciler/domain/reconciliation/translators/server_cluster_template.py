"""Server cluster template translation.

Templates reference nothing, so the twin is a normalized copy of the desired
vnets. Comparison walks vnets pairwise with :func:`vnet_difference`, which
skips optional fields the twin leaves unset.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from netris_reconciler.domain.model import (
    EntityKind,
    ResourceKind,
    ServerClusterTemplateTwinSpec,
    vnet_difference,
)

from ..contracts import FieldMismatch
from .base import first_mismatch, header_fields

if TYPE_CHECKING:
    from netris_reconciler.domain.model import (
        DesiredResource,
        RemoteServerClusterTemplate,
        ServerClusterTemplateSpec,
        TemplateGateway,
        TemplateVNet,
    )
    from netris_reconciler.domain.resolution import ResolutionCache

    from .base import Payload


def gateway_payload(gateway: TemplateGateway | None) -> Payload | None:
    if gateway is None:
        return None
    normalized = gateway.normalized()
    if normalized is None:
        return None
    body: Payload = {}
    if normalized.assign_type is not None:
        body["assignType"] = normalized.assign_type
    if normalized.allocation is not None:
        body["allocation"] = normalized.allocation
    if normalized.child_subnet_prefix_length is not None:
        body["childSubnetPrefixLength"] = normalized.child_subnet_prefix_length
    if normalized.hostnum is not None:
        body["hostnum"] = normalized.hostnum
    return body


def vnet_payload(vnet: TemplateVNet) -> Payload:
    body: Payload = {
        "postfix": vnet.postfix,
        "type": vnet.type,
        "serverNics": list(vnet.server_nics),
    }
    if vnet.vlan:
        body["vlan"] = vnet.vlan
    if vnet.vlan_id:
        body["vlanID"] = vnet.vlan_id
    if vnet.ipv4_dhcp_enabled:
        body["ipv4DhcpEnabled"] = True
    if vnet.ipv6_dhcp_enabled:
        body["ipv6DhcpEnabled"] = True
    ipv4_gateway = gateway_payload(vnet.ipv4_gateway)
    if ipv4_gateway is not None:
        body["ipv4Gateway"] = ipv4_gateway
    ipv6_gateway = gateway_payload(vnet.ipv6_gateway)
    if ipv6_gateway is not None:
        body["ipv6Gateway"] = ipv6_gateway
    return body


class ServerClusterTemplateTranslator:
    kind = ResourceKind.SERVER_CLUSTER_TEMPLATE
    entity_kind = EntityKind.SERVER_CLUSTER_TEMPLATE

    def build_twin_spec(
        self, desired: DesiredResource[ServerClusterTemplateSpec], cache: ResolutionCache
    ) -> ServerClusterTemplateTwinSpec:
        return ServerClusterTemplateTwinSpec(
            **header_fields(desired),
            vnets=[vnet.normalized() for vnet in desired.spec.vnets],
        )

    def create_payload(self, twin_spec: ServerClusterTemplateTwinSpec) -> Payload:
        return {
            "name": twin_spec.resource_name,
            "vnets": [vnet_payload(vnet) for vnet in twin_spec.vnets],
        }

    def update_payload(self, twin_spec: ServerClusterTemplateTwinSpec) -> Payload:
        return self.create_payload(twin_spec)

    def compare(
        self, twin_spec: ServerClusterTemplateTwinSpec, remote: RemoteServerClusterTemplate
    ) -> FieldMismatch | None:
        mismatch = first_mismatch(
            [
                ("name", remote.name, twin_spec.resource_name),
                ("vnets", len(remote.vnets), len(twin_spec.vnets)),
            ]
        )
        if mismatch is not None:
            return mismatch
        for index, (wanted, actual) in enumerate(zip(twin_spec.vnets, remote.vnets)):
            label = vnet_difference(wanted, actual)
            if label is not None:
                return FieldMismatch(
                    field=f"vnets[{index}].{label}", remote_value=actual, twin_value=wanted
                )
        return None

    def backfill_twin(
        self, twin_spec: ServerClusterTemplateTwinSpec, remote: RemoteServerClusterTemplate
    ) -> ServerClusterTemplateTwinSpec:
        return twin_spec

    def backfill_desired(
        self, spec: ServerClusterTemplateSpec, twin_spec: ServerClusterTemplateTwinSpec
    ) -> ServerClusterTemplateSpec | None:
        return None
