"""Custom resource bodies under the ``k8s.netris.ai/v1alpha1`` API group.

Field names follow the camelCase JSON of the installed CRDs; twin specs carry
per-kind names for the generation and resource-name header fields.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class K8sModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)


class K8sMetadata(K8sModel):
    name: str
    namespace: str = "default"
    uid: str = ""
    generation: int = 0
    annotations: dict[str, str] = Field(default_factory=dict)
    finalizers: list[str] = Field(default_factory=list)
    deletion_timestamp: datetime | None = None
    resource_version: str | None = None


class K8sStatus(K8sModel):
    status: str = ""
    message: str = ""


class K8sIDName(K8sModel):
    id: int = 0
    name: str = ""


# desired specs


class K8sInventoryServerLink(K8sModel):
    local: str
    remote: str


class K8sInventoryServerSpec(K8sModel):
    site: str
    tenant: str = ""
    description: str = ""
    profile: str = ""
    main_ip: str = ""
    mgmt_ip: str = ""
    asn: int = 0
    ports_count: int = 0
    uuid: str = ""
    links: list[K8sInventoryServerLink] = Field(default_factory=list)
    custom_data: str = ""
    tags: list[str] = Field(default_factory=list)
    srv_role: str = ""


class K8sServerClusterServer(K8sModel):
    name: str
    shared: bool = False


class K8sServerClusterSpec(K8sModel):
    site: str
    template: str = ""
    admin: str = ""
    vpc: str = ""
    tags: list[str] = Field(default_factory=list)
    servers: list[K8sServerClusterServer] = Field(default_factory=list)


class K8sGateway(K8sModel):
    assign_type: str | None = None
    allocation: str | None = None
    child_subnet_prefix_length: int | None = None
    hostnum: int | None = None


class K8sVNet(K8sModel):
    postfix: str
    type: str
    server_nics: list[str] = Field(default_factory=list)
    vlan: str | None = None
    vlan_id: str | None = Field(default=None, alias="vlanID")
    ipv4_gateway: K8sGateway | None = None
    ipv6_gateway: K8sGateway | None = None
    ipv4_dhcp_enabled: bool = False
    ipv6_dhcp_enabled: bool = False


class K8sServerClusterTemplateSpec(K8sModel):
    vnets: list[K8sVNet] = Field(default_factory=list)


class K8sVPCSpec(K8sModel):
    admin_tenant: str
    guest_tenants: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


# twin ("Meta") specs


class K8sTwinHeader(K8sModel):
    imported: bool = False
    reclaim: bool = Field(default=False, alias="reclaimPolicy")
    id: int = 0


class K8sHWLink(K8sModel):
    local: K8sIDName
    remote: K8sIDName


class K8sInventoryServerMetaSpec(K8sTwinHeader):
    source_generation: int = Field(default=0, alias="inventoryServerGeneration")
    resource_name: str = Field(default="", alias="inventoryServerName")
    tenant_id: int = Field(default=0, alias="tenant")
    description: str = ""
    site_id: int = Field(default=0, alias="site")
    profile_id: int = Field(default=0, alias="profile")
    main_ip: str = ""
    mgmt_ip: str = ""
    asn: int = 0
    ports_count: int = 0
    uuid: str = ""
    links: list[K8sHWLink] = Field(default_factory=list)
    custom_data: str = ""
    tags: list[str] = Field(default_factory=list)
    srv_role: str = ""


class K8sServerClusterMetaSpec(K8sTwinHeader):
    source_generation: int = Field(default=0, alias="serverClusterGeneration")
    resource_name: str = Field(default="", alias="serverClusterName")
    site_id: int = 0
    site_name: str = ""
    admin_id: int = 0
    admin_name: str = ""
    vpc_id: int = 0
    vpc_name: str = ""
    template_id: int = 0
    template_name: str = ""
    tags: list[str] = Field(default_factory=list)
    servers: list[K8sIDName] = Field(default_factory=list)


class K8sServerClusterTemplateMetaSpec(K8sTwinHeader):
    source_generation: int = Field(default=0, alias="serverClusterTemplateGeneration")
    resource_name: str = Field(default="", alias="serverClusterTemplateName")
    vnets: list[K8sVNet] = Field(default_factory=list)


class K8sVPCMetaSpec(K8sTwinHeader):
    source_generation: int = Field(default=0, alias="vpcGeneration")
    resource_name: str = Field(default="", alias="vpcName")
    admin_tenant_id: int = 0
    admin_tenant_name: str = ""
    guest_tenants: list[K8sIDName] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
