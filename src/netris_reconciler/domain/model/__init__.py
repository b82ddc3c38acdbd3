"""Domain model for desired resources, twins and remote records."""

from __future__ import annotations

from .annotations import (
    DELETE_FINALIZER,
    IMPORT_ANNOTATION,
    RECLAIM_ANNOTATION,
    is_imported,
    is_reclaimed,
    must_update_annotations,
    with_default_annotations,
)
from .inventory_server import (
    InventoryServerLink,
    InventoryServerSpec,
    InventoryServerTwinSpec,
    RemoteInventoryServer,
    ResolvedLink,
)
from .kinds import EntityKind, ResourceKind
from .objects import (
    DesiredResource,
    ObjectKey,
    ObjectMeta,
    ResourceStatus,
    StatusState,
    TwinHeader,
    TwinResource,
)
from .remote import Identified, RemotePort, RemoteRef
from .server_cluster import (
    RemoteServerCluster,
    ServerClusterMember,
    ServerClusterSpec,
    ServerClusterTwinSpec,
)
from .server_cluster_template import (
    RemoteServerClusterTemplate,
    ServerClusterTemplateSpec,
    ServerClusterTemplateTwinSpec,
    TemplateGateway,
    TemplateVNet,
    vnet_difference,
)
from .vpc import RemoteVPC, VPCSpec, VPCTwinSpec

__all__ = [
    "DELETE_FINALIZER",
    "IMPORT_ANNOTATION",
    "RECLAIM_ANNOTATION",
    "DesiredResource",
    "EntityKind",
    "Identified",
    "InventoryServerLink",
    "InventoryServerSpec",
    "InventoryServerTwinSpec",
    "ObjectKey",
    "ObjectMeta",
    "RemoteInventoryServer",
    "RemotePort",
    "RemoteRef",
    "RemoteServerCluster",
    "RemoteServerClusterTemplate",
    "RemoteVPC",
    "ResolvedLink",
    "ResourceKind",
    "ResourceStatus",
    "ServerClusterMember",
    "ServerClusterSpec",
    "ServerClusterTemplateSpec",
    "ServerClusterTemplateTwinSpec",
    "ServerClusterTwinSpec",
    "StatusState",
    "TemplateGateway",
    "TemplateVNet",
    "TwinHeader",
    "TwinResource",
    "VPCSpec",
    "VPCTwinSpec",
    "is_imported",
    "is_reclaimed",
    "must_update_annotations",
    "vnet_difference",
    "with_default_annotations",
]
