"""Server cluster translation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from netris_reconciler.domain.model import (
    EntityKind,
    RemoteRef,
    ResourceKind,
    ServerClusterTwinSpec,
)

from .base import first_mismatch, header_fields, id_name_ref, resolve

if TYPE_CHECKING:
    from collections.abc import Iterator

    from netris_reconciler.domain.model import (
        DesiredResource,
        RemoteServerCluster,
        ServerClusterSpec,
    )
    from netris_reconciler.domain.resolution import ResolutionCache

    from ..contracts import FieldMismatch
    from .base import FieldCheck, Payload

_UNSET = RemoteRef(0, "")


def _optional_ref(
    cache: ResolutionCache, kind: EntityKind, name: str, message: str
) -> RemoteRef:
    if not name:
        return _UNSET
    found = resolve(cache, kind, name, message)
    return RemoteRef(found.id, found.name)


class ServerClusterTranslator:
    kind = ResourceKind.SERVER_CLUSTER
    entity_kind = EntityKind.SERVER_CLUSTER

    def build_twin_spec(
        self, desired: DesiredResource[ServerClusterSpec], cache: ResolutionCache
    ) -> ServerClusterTwinSpec:
        spec = desired.spec
        site = resolve(cache, EntityKind.SITE, spec.site, "couldn't find site '%s'")
        vpc = _optional_ref(cache, EntityKind.VPC, spec.vpc, "couldn't find vpc '%s'")
        template = _optional_ref(
            cache,
            EntityKind.SERVER_CLUSTER_TEMPLATE,
            spec.template,
            "couldn't find server cluster template '%s'",
        )
        admin = _optional_ref(
            cache, EntityKind.TENANT, spec.admin, "couldn't find admin tenant '%s'"
        )
        servers = [
            RemoteRef(
                resolve(
                    cache, EntityKind.INVENTORY_SERVER, member.name, "couldn't find server '%s'"
                ).id,
                member.name,
            )
            for member in spec.servers
        ]
        return ServerClusterTwinSpec(
            **header_fields(desired),
            site=RemoteRef(site.id, site.name),
            admin=admin,
            vpc=vpc,
            template=template,
            tags=list(spec.tags),
            servers=servers,
        )

    def create_payload(self, twin_spec: ServerClusterTwinSpec) -> Payload:
        return {
            "name": twin_spec.resource_name,
            "admin": id_name_ref(twin_spec.admin.id, twin_spec.admin.name),
            "site": id_name_ref(twin_spec.site.id, twin_spec.site.name),
            "vpc": id_name_ref(twin_spec.vpc.id, twin_spec.vpc.name),
            "srvClusterTemplate": id_name_ref(twin_spec.template.id, twin_spec.template.name),
            **self.update_payload(twin_spec),
        }

    def update_payload(self, twin_spec: ServerClusterTwinSpec) -> Payload:
        # the control plane only accepts tag and membership changes on an existing cluster
        return {
            "tags": list(twin_spec.tags),
            "servers": [id_name_ref(server.id, server.name) for server in twin_spec.servers],
        }

    def compare(
        self, twin_spec: ServerClusterTwinSpec, remote: RemoteServerCluster
    ) -> FieldMismatch | None:
        def checks() -> Iterator[FieldCheck]:
            yield "name", remote.name, twin_spec.resource_name
            yield "site", remote.site_id, twin_spec.site.id
            yield "vpc", remote.vpc_id, twin_spec.vpc.id
            yield "template", remote.template_id, twin_spec.template.id
            yield "tags", sorted(remote.tags), sorted(twin_spec.tags)
            yield (
                "servers",
                sorted(server.id for server in remote.servers),
                sorted(server.id for server in twin_spec.servers),
            )

        return first_mismatch(checks())

    def backfill_twin(
        self, twin_spec: ServerClusterTwinSpec, remote: RemoteServerCluster
    ) -> ServerClusterTwinSpec:
        return twin_spec

    def backfill_desired(
        self, spec: ServerClusterSpec, twin_spec: ServerClusterTwinSpec
    ) -> ServerClusterSpec | None:
        return None
