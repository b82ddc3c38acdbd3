"""Translate custom resource bodies to domain objects and back."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from netris_reconciler.domain.model import (
    DesiredResource,
    InventoryServerLink,
    InventoryServerSpec,
    InventoryServerTwinSpec,
    ObjectMeta,
    RemoteRef,
    ResolvedLink,
    ResourceKind,
    ResourceStatus,
    ServerClusterMember,
    ServerClusterSpec,
    ServerClusterTemplateSpec,
    ServerClusterTemplateTwinSpec,
    ServerClusterTwinSpec,
    StatusState,
    TemplateGateway,
    TemplateVNet,
    TwinResource,
    VPCSpec,
    VPCTwinSpec,
)

from .schema import (
    K8sGateway,
    K8sHWLink,
    K8sIDName,
    K8sInventoryServerLink,
    K8sInventoryServerMetaSpec,
    K8sInventoryServerSpec,
    K8sMetadata,
    K8sServerClusterMetaSpec,
    K8sServerClusterServer,
    K8sServerClusterSpec,
    K8sServerClusterTemplateMetaSpec,
    K8sServerClusterTemplateSpec,
    K8sStatus,
    K8sVNet,
    K8sVPCMetaSpec,
    K8sVPCSpec,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from netris_reconciler.domain.model import TwinHeader

type Body = dict[str, Any]

GROUP = "k8s.netris.ai"
VERSION = "v1alpha1"
API_VERSION = f"{GROUP}/{VERSION}"
# twin CRDs predate this field, so it lives in metadata where pruning never reaches
SYNCED_GENERATION_ANNOTATION = "resource.k8s.netris.ai/syncedGeneration"


@dataclass(frozen=True, slots=True)
class CustomResource:
    """Plural names, kinds and spec codecs of one desired kind and its twin."""

    plural: str
    twin_plural: str
    twin_kind: str
    spec_model: type[BaseModel]
    twin_spec_model: type[BaseModel]
    spec_to_domain: Callable[[Any], Any]
    spec_to_body: Callable[[Any], BaseModel]
    twin_to_domain: Callable[[Any], Any]
    twin_to_body: Callable[[Any], BaseModel]


def _gateway_to_domain(item: K8sGateway | None) -> TemplateGateway | None:
    if item is None:
        return None
    return TemplateGateway(
        assign_type=item.assign_type,
        allocation=item.allocation,
        child_subnet_prefix_length=item.child_subnet_prefix_length,
        hostnum=item.hostnum,
    )


def _gateway_to_body(gateway: TemplateGateway | None) -> K8sGateway | None:
    if gateway is None:
        return None
    return K8sGateway(
        assign_type=gateway.assign_type,
        allocation=gateway.allocation,
        child_subnet_prefix_length=gateway.child_subnet_prefix_length,
        hostnum=gateway.hostnum,
    )


def _vnet_to_domain(item: K8sVNet) -> TemplateVNet:
    return TemplateVNet(
        postfix=item.postfix,
        type=item.type,
        server_nics=tuple(item.server_nics),
        vlan=item.vlan,
        vlan_id=item.vlan_id,
        ipv4_gateway=_gateway_to_domain(item.ipv4_gateway),
        ipv6_gateway=_gateway_to_domain(item.ipv6_gateway),
        ipv4_dhcp_enabled=item.ipv4_dhcp_enabled,
        ipv6_dhcp_enabled=item.ipv6_dhcp_enabled,
    )


def _vnet_to_body(vnet: TemplateVNet) -> K8sVNet:
    return K8sVNet(
        postfix=vnet.postfix,
        type=vnet.type,
        server_nics=list(vnet.server_nics),
        vlan=vnet.vlan,
        vlan_id=vnet.vlan_id,
        ipv4_gateway=_gateway_to_body(vnet.ipv4_gateway),
        ipv6_gateway=_gateway_to_body(vnet.ipv6_gateway),
        ipv4_dhcp_enabled=vnet.ipv4_dhcp_enabled,
        ipv6_dhcp_enabled=vnet.ipv6_dhcp_enabled,
    )


def _header(item: Any) -> dict[str, Any]:
    return {
        "imported": item.imported,
        "reclaim": item.reclaim,
        "source_generation": item.source_generation,
        "id": item.id,
        "resource_name": item.resource_name,
    }


# InventoryServer


def _inventory_server_spec(item: K8sInventoryServerSpec) -> InventoryServerSpec:
    return InventoryServerSpec(
        site=item.site,
        tenant=item.tenant,
        description=item.description,
        profile=item.profile,
        main_ip=item.main_ip,
        mgmt_ip=item.mgmt_ip,
        asn=item.asn,
        ports_count=item.ports_count,
        uuid=item.uuid,
        links=[InventoryServerLink(link.local, link.remote) for link in item.links],
        custom_data=item.custom_data,
        tags=list(item.tags),
        srv_role=item.srv_role,
    )


def _inventory_server_spec_body(spec: InventoryServerSpec) -> K8sInventoryServerSpec:
    return K8sInventoryServerSpec(
        site=spec.site,
        tenant=spec.tenant,
        description=spec.description,
        profile=spec.profile,
        main_ip=spec.main_ip,
        mgmt_ip=spec.mgmt_ip,
        asn=spec.asn,
        ports_count=spec.ports_count,
        uuid=spec.uuid,
        links=[K8sInventoryServerLink(local=link.local, remote=link.remote) for link in spec.links],
        custom_data=spec.custom_data,
        tags=list(spec.tags),
        srv_role=spec.srv_role,
    )


def _inventory_server_twin(item: K8sInventoryServerMetaSpec) -> InventoryServerTwinSpec:
    return InventoryServerTwinSpec(
        **_header(item),
        tenant_id=item.tenant_id,
        description=item.description,
        site_id=item.site_id,
        profile_id=item.profile_id,
        main_ip=item.main_ip,
        mgmt_ip=item.mgmt_ip,
        asn=item.asn,
        ports_count=item.ports_count,
        uuid=item.uuid,
        links=[
            ResolvedLink(local=link.local.name, port_id=link.remote.id, port_name=link.remote.name)
            for link in item.links
        ],
        custom_data=item.custom_data,
        tags=list(item.tags),
        srv_role=item.srv_role,
    )


def _inventory_server_twin_body(spec: InventoryServerTwinSpec) -> K8sInventoryServerMetaSpec:
    return K8sInventoryServerMetaSpec(
        **_header(spec),
        tenant_id=spec.tenant_id,
        description=spec.description,
        site_id=spec.site_id,
        profile_id=spec.profile_id,
        main_ip=spec.main_ip,
        mgmt_ip=spec.mgmt_ip,
        asn=spec.asn,
        ports_count=spec.ports_count,
        uuid=spec.uuid,
        links=[
            K8sHWLink(
                local=K8sIDName(name=link.local),
                remote=K8sIDName(id=link.port_id, name=link.port_name),
            )
            for link in spec.links
        ],
        custom_data=spec.custom_data,
        tags=list(spec.tags),
        srv_role=spec.srv_role,
    )


# ServerCluster


def _server_cluster_spec(item: K8sServerClusterSpec) -> ServerClusterSpec:
    return ServerClusterSpec(
        site=item.site,
        template=item.template,
        admin=item.admin,
        vpc=item.vpc,
        tags=list(item.tags),
        servers=[ServerClusterMember(server.name, server.shared) for server in item.servers],
    )


def _server_cluster_spec_body(spec: ServerClusterSpec) -> K8sServerClusterSpec:
    return K8sServerClusterSpec(
        site=spec.site,
        template=spec.template,
        admin=spec.admin,
        vpc=spec.vpc,
        tags=list(spec.tags),
        servers=[
            K8sServerClusterServer(name=server.name, shared=server.shared)
            for server in spec.servers
        ],
    )


def _server_cluster_twin(item: K8sServerClusterMetaSpec) -> ServerClusterTwinSpec:
    return ServerClusterTwinSpec(
        **_header(item),
        site=RemoteRef(item.site_id, item.site_name),
        admin=RemoteRef(item.admin_id, item.admin_name),
        vpc=RemoteRef(item.vpc_id, item.vpc_name),
        template=RemoteRef(item.template_id, item.template_name),
        tags=list(item.tags),
        servers=[RemoteRef(server.id, server.name) for server in item.servers],
    )


def _server_cluster_twin_body(spec: ServerClusterTwinSpec) -> K8sServerClusterMetaSpec:
    return K8sServerClusterMetaSpec(
        **_header(spec),
        site_id=spec.site.id,
        site_name=spec.site.name,
        admin_id=spec.admin.id,
        admin_name=spec.admin.name,
        vpc_id=spec.vpc.id,
        vpc_name=spec.vpc.name,
        template_id=spec.template.id,
        template_name=spec.template.name,
        tags=list(spec.tags),
        servers=[K8sIDName(id=server.id, name=server.name) for server in spec.servers],
    )


# ServerClusterTemplate


def _template_spec(item: K8sServerClusterTemplateSpec) -> ServerClusterTemplateSpec:
    return ServerClusterTemplateSpec(vnets=[_vnet_to_domain(vnet) for vnet in item.vnets])


def _template_spec_body(spec: ServerClusterTemplateSpec) -> K8sServerClusterTemplateSpec:
    return K8sServerClusterTemplateSpec(vnets=[_vnet_to_body(vnet) for vnet in spec.vnets])


def _template_twin(item: K8sServerClusterTemplateMetaSpec) -> ServerClusterTemplateTwinSpec:
    return ServerClusterTemplateTwinSpec(
        **_header(item), vnets=[_vnet_to_domain(vnet) for vnet in item.vnets]
    )


def _template_twin_body(spec: ServerClusterTemplateTwinSpec) -> K8sServerClusterTemplateMetaSpec:
    return K8sServerClusterTemplateMetaSpec(
        **_header(spec), vnets=[_vnet_to_body(vnet) for vnet in spec.vnets]
    )


# VPC


def _vpc_spec(item: K8sVPCSpec) -> VPCSpec:
    return VPCSpec(
        admin_tenant=item.admin_tenant,
        guest_tenants=list(item.guest_tenants),
        tags=list(item.tags),
    )


def _vpc_spec_body(spec: VPCSpec) -> K8sVPCSpec:
    return K8sVPCSpec(
        admin_tenant=spec.admin_tenant,
        guest_tenants=list(spec.guest_tenants),
        tags=list(spec.tags),
    )


def _vpc_twin(item: K8sVPCMetaSpec) -> VPCTwinSpec:
    return VPCTwinSpec(
        **_header(item),
        admin_tenant=RemoteRef(item.admin_tenant_id, item.admin_tenant_name),
        guest_tenants=[RemoteRef(guest.id, guest.name) for guest in item.guest_tenants],
        tags=list(item.tags),
    )


def _vpc_twin_body(spec: VPCTwinSpec) -> K8sVPCMetaSpec:
    return K8sVPCMetaSpec(
        **_header(spec),
        admin_tenant_id=spec.admin_tenant.id,
        admin_tenant_name=spec.admin_tenant.name,
        guest_tenants=[K8sIDName(id=guest.id, name=guest.name) for guest in spec.guest_tenants],
        tags=list(spec.tags),
    )


CUSTOM_RESOURCES: dict[ResourceKind, CustomResource] = {
    ResourceKind.INVENTORY_SERVER: CustomResource(
        plural="inventoryservers",
        twin_plural="inventoryservermeta",
        twin_kind="InventoryServerMeta",
        spec_model=K8sInventoryServerSpec,
        twin_spec_model=K8sInventoryServerMetaSpec,
        spec_to_domain=_inventory_server_spec,
        spec_to_body=_inventory_server_spec_body,
        twin_to_domain=_inventory_server_twin,
        twin_to_body=_inventory_server_twin_body,
    ),
    ResourceKind.SERVER_CLUSTER: CustomResource(
        plural="serverclusters",
        twin_plural="serverclustermeta",
        twin_kind="ServerClusterMeta",
        spec_model=K8sServerClusterSpec,
        twin_spec_model=K8sServerClusterMetaSpec,
        spec_to_domain=_server_cluster_spec,
        spec_to_body=_server_cluster_spec_body,
        twin_to_domain=_server_cluster_twin,
        twin_to_body=_server_cluster_twin_body,
    ),
    ResourceKind.SERVER_CLUSTER_TEMPLATE: CustomResource(
        plural="serverclustertemplates",
        twin_plural="serverclustertemplatemeta",
        twin_kind="ServerClusterTemplateMeta",
        spec_model=K8sServerClusterTemplateSpec,
        twin_spec_model=K8sServerClusterTemplateMetaSpec,
        spec_to_domain=_template_spec,
        spec_to_body=_template_spec_body,
        twin_to_domain=_template_twin,
        twin_to_body=_template_twin_body,
    ),
    ResourceKind.VPC: CustomResource(
        plural="vpcs",
        twin_plural="vpcmeta",
        twin_kind="VPCMeta",
        spec_model=K8sVPCSpec,
        twin_spec_model=K8sVPCMetaSpec,
        spec_to_domain=_vpc_spec,
        spec_to_body=_vpc_spec_body,
        twin_to_domain=_vpc_twin,
        twin_to_body=_vpc_twin_body,
    ),
}


def _metadata(item: K8sMetadata) -> ObjectMeta:
    return ObjectMeta(
        name=item.name,
        namespace=item.namespace,
        uid=item.uid,
        generation=item.generation,
        annotations=dict(item.annotations),
        finalizers=list(item.finalizers),
        deletion_timestamp=item.deletion_timestamp,
        resource_version=item.resource_version,
    )


def _status(item: K8sStatus) -> ResourceStatus:
    try:
        state: StatusState | None = StatusState(item.status)
    except ValueError:
        state = None
    return ResourceStatus(state=state, message=item.message)


def _dump(model: BaseModel) -> Body:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def desired_from_body(kind: ResourceKind, body: Mapping[str, Any]) -> DesiredResource[Any]:
    """Raises ``pydantic.ValidationError`` for bodies that do not match the CRD."""

    resource = CUSTOM_RESOURCES[kind]
    return DesiredResource(
        kind=kind,
        metadata=_metadata(K8sMetadata.model_validate(body.get("metadata", {}))),
        spec=resource.spec_to_domain(resource.spec_model.model_validate(body.get("spec", {}))),
        status=_status(K8sStatus.model_validate(body.get("status") or {})),
    )


def metadata_patch(desired: DesiredResource[Any]) -> Body:
    """Merge patch for annotations and finalizers only.

    A merge patch replaces the whole finalizer list, so the patch carries the
    ``resourceVersion`` it was computed from and a concurrent writer turns it
    into a conflict.
    """

    metadata: Body = {
        "annotations": dict(desired.metadata.annotations),
        "finalizers": list(desired.metadata.finalizers),
    }
    if desired.metadata.resource_version is not None:
        metadata["resourceVersion"] = desired.metadata.resource_version
    return {"metadata": metadata}


def spec_patch(desired: DesiredResource[Any]) -> Body:
    resource = CUSTOM_RESOURCES[desired.kind]
    return {"spec": _dump(resource.spec_to_body(desired.spec))}


def status_patch(status: ResourceStatus) -> Body:
    state = str(status.state) if status.state is not None else ""
    return {"status": _dump(K8sStatus(status=state, message=status.message))}


def _synced_generation(annotations: Mapping[str, str]) -> int:
    try:
        return int(annotations.get(SYNCED_GENERATION_ANNOTATION, "0"))
    except ValueError:
        return 0


def twin_from_body(kind: ResourceKind, body: Mapping[str, Any]) -> TwinResource[Any]:
    resource = CUSTOM_RESOURCES[kind]
    metadata = _metadata(K8sMetadata.model_validate(body.get("metadata", {})))
    spec: TwinHeader = resource.twin_to_domain(
        resource.twin_spec_model.model_validate(body.get("spec", {}))
    )
    spec.synced_generation = _synced_generation(metadata.annotations)
    return TwinResource(kind=kind, metadata=metadata, spec=spec)


def twin_body(twin: TwinResource[Any]) -> Body:
    resource = CUSTOM_RESOURCES[twin.kind]
    metadata: Body = {
        "name": twin.metadata.name,
        "namespace": twin.metadata.namespace,
        "annotations": {SYNCED_GENERATION_ANNOTATION: str(twin.spec.synced_generation)},
    }
    if twin.metadata.resource_version is not None:
        metadata["resourceVersion"] = twin.metadata.resource_version
    return {
        "apiVersion": API_VERSION,
        "kind": resource.twin_kind,
        "metadata": metadata,
        "spec": _dump(resource.twin_to_body(twin.spec)),
    }
