"""Per-kind translators and the registry the engine dispatches through."""

from __future__ import annotations

from typing import TYPE_CHECKING

from netris_reconciler.domain.model import ResourceKind

from .base import ResourceTranslator, first_mismatch, header_fields, resolve
from .inventory_server import InventoryServerTranslator
from .server_cluster import ServerClusterTranslator
from .server_cluster_template import ServerClusterTemplateTranslator
from .vpc import VPCTranslator

if TYPE_CHECKING:
    from collections.abc import Mapping


def default_translators() -> Mapping[ResourceKind, ResourceTranslator]:
    return {
        ResourceKind.INVENTORY_SERVER: InventoryServerTranslator(),
        ResourceKind.SERVER_CLUSTER: ServerClusterTranslator(),
        ResourceKind.SERVER_CLUSTER_TEMPLATE: ServerClusterTemplateTranslator(),
        ResourceKind.VPC: VPCTranslator(),
    }


__all__ = [
    "InventoryServerTranslator",
    "ResourceTranslator",
    "ServerClusterTemplateTranslator",
    "ServerClusterTranslator",
    "VPCTranslator",
    "default_translators",
    "first_mismatch",
    "header_fields",
    "resolve",
]
