"""Netris API response schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NetrisBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NetrisMeta(NetrisBaseModel):
    status_code: int | None = Field(default=None, alias="statusCode")


class NetrisEnvelope(NetrisBaseModel):
    """``{isSuccess, message, data, meta}`` wrapper every endpoint answers with."""

    is_success: bool = Field(default=False, alias="isSuccess")
    message: str = ""
    data: Any = None
    meta: NetrisMeta | None = None


class NetrisIDName(NetrisBaseModel):
    id: int = 0
    name: str = ""


class NetrisAddress(NetrisBaseModel):
    address: str = ""


class NetrisSite(NetrisIDName):
    pass


class NetrisTenant(NetrisIDName):
    pass


class NetrisInventoryProfile(NetrisIDName):
    pass


class NetrisPort(NetrisBaseModel):
    id: int
    name: str = ""
    port: str = Field(default="", alias="port_")
    switch_name: str = Field(default="", alias="switchName")


class NetrisHWLink(NetrisBaseModel):
    local: NetrisIDName = Field(default_factory=NetrisIDName)
    remote: NetrisIDName = Field(default_factory=NetrisIDName)


class NetrisInventory(NetrisBaseModel):
    """Hardware list entry; only ``type == "server"`` entries are inventory servers."""

    id: int
    name: str
    type: str = ""
    description: str = ""
    tenant: NetrisIDName = Field(default_factory=NetrisIDName)
    site: NetrisIDName = Field(default_factory=NetrisIDName)
    profile: NetrisIDName | None = None
    main_ip: NetrisAddress | None = Field(default=None, alias="mainIP")
    mgmt_ip: NetrisAddress | None = Field(default=None, alias="mgmtIP")
    asn: int | None = None
    port_count: int = Field(default=0, alias="portsCount")
    uuid: str = ""
    custom_data: str = Field(default="", alias="customData")
    srv_role: str = Field(default="", alias="srvRole")
    tags: list[str] = Field(default_factory=list)
    links: list[NetrisHWLink] = Field(default_factory=list)


class NetrisVPC(NetrisBaseModel):
    id: int
    name: str
    admin_tenant: NetrisIDName = Field(default_factory=NetrisIDName, alias="adminTenant")
    guest_tenant: list[NetrisIDName] = Field(default_factory=list, alias="guestTenant")
    tags: list[str] = Field(default_factory=list)


class NetrisServerCluster(NetrisBaseModel):
    id: int
    name: str
    site: NetrisIDName = Field(default_factory=NetrisIDName)
    admin: NetrisIDName = Field(default_factory=NetrisIDName)
    vpc: NetrisIDName = Field(default_factory=NetrisIDName)
    template: NetrisIDName = Field(default_factory=NetrisIDName, alias="srvClusterTemplate")
    tags: list[str] = Field(default_factory=list)
    servers: list[NetrisIDName] = Field(default_factory=list)


class NetrisGateway(NetrisBaseModel):
    assign_type: str | None = Field(default=None, alias="assignType")
    allocation: str | None = None
    child_subnet_prefix_length: int | None = Field(default=None, alias="childSubnetPrefixLength")
    hostnum: int | None = None


class NetrisVNet(NetrisBaseModel):
    postfix: str = ""
    type: str = ""
    server_nics: list[str] = Field(default_factory=list, alias="serverNics")
    vlan: str | None = None
    vlan_id: str | None = Field(default=None, alias="vlanID")
    ipv4_gateway: NetrisGateway | None = Field(default=None, alias="ipv4Gateway")
    ipv6_gateway: NetrisGateway | None = Field(default=None, alias="ipv6Gateway")
    ipv4_dhcp_enabled: bool = Field(default=False, alias="ipv4DhcpEnabled")
    ipv6_dhcp_enabled: bool = Field(default=False, alias="ipv6DhcpEnabled")


class NetrisServerClusterTemplate(NetrisBaseModel):
    id: int
    name: str
    vnets: list[NetrisVNet] = Field(default_factory=list)
