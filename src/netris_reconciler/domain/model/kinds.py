"""Resource and remote entity discriminators."""

from __future__ import annotations

from enum import StrEnum


class ResourceKind(StrEnum):
    """Kinds of desired resources the engine reconciles."""

    INVENTORY_SERVER = "InventoryServer"
    SERVER_CLUSTER = "ServerCluster"
    SERVER_CLUSTER_TEMPLATE = "ServerClusterTemplate"
    VPC = "VPC"


class EntityKind(StrEnum):
    """Partitions of the resolution cache, one per remote entity list."""

    SITE = "site"
    TENANT = "tenant"
    PROFILE = "profile"
    PORT = "port"
    VPC = "vpc"
    SERVER_CLUSTER_TEMPLATE = "server_cluster_template"
    INVENTORY_SERVER = "inventory_server"
    SERVER_CLUSTER = "server_cluster"
