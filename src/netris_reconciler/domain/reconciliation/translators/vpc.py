"""VPC translation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from netris_reconciler.domain.model import EntityKind, RemoteRef, ResourceKind, VPCTwinSpec

from .base import first_mismatch, header_fields, id_name_ref, resolve

if TYPE_CHECKING:
    from collections.abc import Iterator

    from netris_reconciler.domain.model import DesiredResource, RemoteVPC, VPCSpec
    from netris_reconciler.domain.resolution import ResolutionCache

    from ..contracts import FieldMismatch
    from .base import FieldCheck, Payload


class VPCTranslator:
    kind = ResourceKind.VPC
    entity_kind = EntityKind.VPC

    def build_twin_spec(
        self, desired: DesiredResource[VPCSpec], cache: ResolutionCache
    ) -> VPCTwinSpec:
        spec = desired.spec
        admin = resolve(
            cache, EntityKind.TENANT, spec.admin_tenant, "couldn't find admin tenant '%s'"
        )
        guests: list[RemoteRef] = []
        for name in spec.guest_tenants:
            guest = resolve(cache, EntityKind.TENANT, name, "couldn't find guest tenant '%s'")
            guests.append(RemoteRef(guest.id, guest.name))
        return VPCTwinSpec(
            **header_fields(desired),
            admin_tenant=RemoteRef(admin.id, admin.name),
            guest_tenants=guests,
            tags=list(spec.tags),
        )

    def create_payload(self, twin_spec: VPCTwinSpec) -> Payload:
        return {
            "name": twin_spec.resource_name,
            "adminTenant": id_name_ref(twin_spec.admin_tenant.id, twin_spec.admin_tenant.name),
            "guestTenant": [id_name_ref(guest.id, guest.name) for guest in twin_spec.guest_tenants],
            "tags": list(twin_spec.tags),
        }

    def update_payload(self, twin_spec: VPCTwinSpec) -> Payload:
        return self.create_payload(twin_spec)

    def compare(self, twin_spec: VPCTwinSpec, remote: RemoteVPC) -> FieldMismatch | None:
        def checks() -> Iterator[FieldCheck]:
            yield "name", remote.name, twin_spec.resource_name
            yield "admin_tenant", remote.admin_tenant_id, twin_spec.admin_tenant.id
            yield (
                "guest_tenants",
                sorted(remote.guest_tenant_ids),
                sorted(guest.id for guest in twin_spec.guest_tenants),
            )
            yield "tags", sorted(remote.tags), sorted(twin_spec.tags)

        return first_mismatch(checks())

    def backfill_twin(self, twin_spec: VPCTwinSpec, remote: RemoteVPC) -> VPCTwinSpec:
        return twin_spec

    def backfill_desired(self, spec: VPCSpec, twin_spec: VPCTwinSpec) -> VPCSpec | None:
        return None
