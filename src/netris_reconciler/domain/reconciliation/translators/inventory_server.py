"""Inventory server translation: spec names -> twin IDs -> control-plane payload."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from netris_reconciler.domain.model import (
    EntityKind,
    InventoryServerTwinSpec,
    RemotePort,
    ResolvedLink,
    ResourceKind,
)

from .base import first_mismatch, header_fields, id_name_ref, id_ref, resolve

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from netris_reconciler.domain.model import (
        DesiredResource,
        InventoryServerSpec,
        RemoteInventoryServer,
    )
    from netris_reconciler.domain.resolution import ResolutionCache

    from ..contracts import FieldMismatch
    from .base import FieldCheck, Payload

AUTO = "auto"


def _cabling(links: Iterable[ResolvedLink]) -> list[tuple[str, int]]:
    # port names are display only; the port ID identifies the cable end
    return sorted((link.local, link.port_id) for link in links)


class InventoryServerTranslator:
    kind = ResourceKind.INVENTORY_SERVER
    entity_kind = EntityKind.INVENTORY_SERVER

    def build_twin_spec(
        self, desired: DesiredResource[InventoryServerSpec], cache: ResolutionCache
    ) -> InventoryServerTwinSpec:
        spec = desired.spec
        site = resolve(cache, EntityKind.SITE, spec.site, "invalid site '%s'")

        tenant_id = 0
        if spec.tenant:
            tenant_id = resolve(cache, EntityKind.TENANT, spec.tenant, "invalid tenant '%s'").id

        profile_id = 0
        if spec.profile:
            profile_id = resolve(
                cache, EntityKind.PROFILE, spec.profile, "invalid profile '%s'"
            ).id

        links: list[ResolvedLink] = []
        for link in spec.links:
            port = resolve(cache, EntityKind.PORT, link.remote, "port '%s' not found")
            port_name = port.port if isinstance(port, RemotePort) else port.name
            links.append(ResolvedLink(local=link.local, port_id=port.id, port_name=port_name))

        return InventoryServerTwinSpec(
            **header_fields(desired),
            tenant_id=tenant_id,
            description=spec.description,
            site_id=site.id,
            profile_id=profile_id,
            main_ip=spec.main_ip,
            mgmt_ip=spec.mgmt_ip,
            asn=spec.asn,
            ports_count=spec.ports_count,
            uuid=spec.uuid,
            links=links,
            custom_data=spec.custom_data,
            tags=list(spec.tags),
            srv_role=spec.srv_role,
        )

    def create_payload(self, twin_spec: InventoryServerTwinSpec) -> Payload:
        return {
            "name": twin_spec.resource_name,
            "description": twin_spec.description,
            "tenant": id_ref(twin_spec.tenant_id),
            "site": id_ref(twin_spec.site_id),
            "profile": id_ref(twin_spec.profile_id),
            "asn": twin_spec.asn or AUTO,
            "mainAddress": twin_spec.main_ip or AUTO,
            "mgmtAddress": twin_spec.mgmt_ip or AUTO,
            "portsCount": twin_spec.ports_count,
            "uuid": twin_spec.uuid,
            "links": [
                {"local": {"name": link.local}, "remote": id_name_ref(link.port_id, link.port_name)}
                for link in twin_spec.links
            ],
            "customData": twin_spec.custom_data,
            "tags": list(twin_spec.tags),
            "srvRole": twin_spec.srv_role,
        }

    def update_payload(self, twin_spec: InventoryServerTwinSpec) -> Payload:
        return self.create_payload(twin_spec)

    def compare(
        self, twin_spec: InventoryServerTwinSpec, remote: RemoteInventoryServer
    ) -> FieldMismatch | None:
        def checks() -> Iterator[FieldCheck]:
            yield "name", remote.name, twin_spec.resource_name
            yield "description", remote.description, twin_spec.description
            yield "tenant", remote.tenant_id, twin_spec.tenant_id
            yield "site", remote.site_id, twin_spec.site_id
            yield "profile", remote.profile_id, twin_spec.profile_id
            yield "main_ip", remote.main_ip, twin_spec.main_ip
            yield "mgmt_ip", remote.mgmt_ip, twin_spec.mgmt_ip
            yield "ports_count", remote.ports_count, twin_spec.ports_count
            yield "uuid", remote.uuid, twin_spec.uuid
            yield "custom_data", remote.custom_data, twin_spec.custom_data
            yield "srv_role", remote.srv_role, twin_spec.srv_role
            yield "tags", sorted(remote.tags), sorted(twin_spec.tags)
            yield "links", _cabling(remote.links), _cabling(twin_spec.links)

        return first_mismatch(checks())

    def backfill_twin(
        self, twin_spec: InventoryServerTwinSpec, remote: RemoteInventoryServer
    ) -> InventoryServerTwinSpec:
        return replace(
            twin_spec,
            main_ip=twin_spec.main_ip or remote.main_ip,
            mgmt_ip=twin_spec.mgmt_ip or remote.mgmt_ip,
            asn=twin_spec.asn or remote.asn,
        )

    def backfill_desired(
        self, spec: InventoryServerSpec, twin_spec: InventoryServerTwinSpec
    ) -> InventoryServerSpec | None:
        updated = replace(
            spec,
            main_ip=spec.main_ip or twin_spec.main_ip,
            mgmt_ip=spec.mgmt_ip or twin_spec.mgmt_ip,
            asn=spec.asn or twin_spec.asn,
        )
        if updated == spec:
            return None
        return updated
