"""Per-kind resolution, payloads and comparison order."""

from __future__ import annotations

from dataclasses import replace

import pytest

from netris_reconciler.domain.errors import ConfigurationReferenceError
from netris_reconciler.domain.model import (
    DesiredResource,
    EntityKind,
    InventoryServerLink,
    RemoteInventoryServer,
    RemoteRef,
    RemoteServerCluster,
    RemoteServerClusterTemplate,
    RemoteVPC,
    ResolvedLink,
    ResourceKind,
    ServerClusterMember,
    ServerClusterSpec,
    ServerClusterTemplateSpec,
    TemplateGateway,
    TemplateVNet,
)
from netris_reconciler.domain.reconciliation.translators import (
    InventoryServerTranslator,
    ServerClusterTemplateTranslator,
    ServerClusterTranslator,
    VPCTranslator,
    default_translators,
)
from netris_reconciler.domain.resolution import ResolutionCache
from tests.support.resources import (
    GUEST,
    PORT,
    SITE,
    TENANT,
    make_inventory_server,
    make_inventory_twin,
    make_metadata,
    make_vpc,
    seeded_remote,
)

TEMPLATE = RemoteRef(11, "two-nic")
CLUSTER_VPC = RemoteRef(12, "vpc-a")
SERVER = RemoteInventoryServer(id=21, name="srv01", site_id=SITE.id)


def _cache() -> ResolutionCache:
    remote = seeded_remote()
    remote.seed(EntityKind.SERVER_CLUSTER_TEMPLATE, TEMPLATE)
    remote.seed(EntityKind.VPC, RemoteVPC(id=CLUSTER_VPC.id, name=CLUSTER_VPC.name))
    remote.seed(EntityKind.INVENTORY_SERVER, SERVER)
    return ResolutionCache(remote)


def _cluster(**spec: object) -> DesiredResource[ServerClusterSpec]:
    values: dict[str, object] = {"site": SITE.name, "template": TEMPLATE.name}
    values.update(spec)
    return DesiredResource(
        kind=ResourceKind.SERVER_CLUSTER,
        metadata=make_metadata("cluster-a"),
        spec=ServerClusterSpec(**values),  # type: ignore[arg-type]
    )


def _template(*vnets: TemplateVNet) -> DesiredResource[ServerClusterTemplateSpec]:
    return DesiredResource(
        kind=ResourceKind.SERVER_CLUSTER_TEMPLATE,
        metadata=make_metadata("two-nic"),
        spec=ServerClusterTemplateSpec(vnets=list(vnets)),
    )


def test_registry_covers_every_kind() -> None:
    translators = default_translators()

    assert set(translators) == set(ResourceKind)
    for kind, translator in translators.items():
        assert translator.kind is kind


class TestInventoryServer:
    translator = InventoryServerTranslator()

    def test_payload_names_links_by_port_and_switch_id(self) -> None:
        desired = make_inventory_server(ready=True, links=[InventoryServerLink("eth0", PORT.name)])
        spec = self.translator.build_twin_spec(desired, _cache())

        payload = self.translator.create_payload(spec)

        assert payload["links"] == [
            {"local": {"name": "eth0"}, "remote": {"id": PORT.id, "name": "swp1"}}
        ]
        assert payload["tenant"] == {"id": 0}

    def test_unknown_tenant_is_named(self) -> None:
        desired = make_inventory_server(ready=True, tenant="Nobody")

        with pytest.raises(ConfigurationReferenceError, match="invalid tenant 'Nobody'"):
            self.translator.build_twin_spec(desired, _cache())

    def test_comparison_stops_at_first_difference(self) -> None:
        twin = make_inventory_twin(make_inventory_server(), description="a")
        remote = RemoteInventoryServer(id=1, name="other", site_id=SITE.id, description="b")

        mismatch = self.translator.compare(twin.spec, remote)

        assert mismatch is not None
        assert mismatch.field == "name"

    def test_tag_change_is_detected_regardless_of_order(self) -> None:
        twin = make_inventory_twin(make_inventory_server(), tags=["b", "a"])
        remote = RemoteInventoryServer(id=1, name="srv01", site_id=SITE.id, tags=("a", "b"))

        assert self.translator.compare(twin.spec, remote) is None

        mismatch = self.translator.compare(twin.spec, replace(remote, tags=("a",)))

        assert mismatch is not None
        assert mismatch.field == "tags"

    def test_recabled_link_is_detected_by_port_id(self) -> None:
        wanted = ResolvedLink(local="eth0", port_id=PORT.id, port_name="swp1")
        twin = make_inventory_twin(make_inventory_server(), links=[wanted])
        renamed = RemoteInventoryServer(
            id=1, name="srv01", site_id=SITE.id, links=(replace(wanted, port_name="swp1s0"),)
        )
        moved = replace(renamed, links=(replace(wanted, port_id=PORT.id + 1),))

        assert self.translator.compare(twin.spec, renamed) is None
        mismatch = self.translator.compare(twin.spec, moved)
        assert mismatch is not None
        assert mismatch.field == "links"

    def test_desired_backfill_only_fills_blanks(self) -> None:
        desired = make_inventory_server(main_ip="10.9.9.9")
        twin = make_inventory_twin(desired, main_ip="10.9.9.9", mgmt_ip="10.2.2.2", asn=65001)

        backfilled = self.translator.backfill_desired(desired.spec, twin.spec)

        assert backfilled is not None
        assert (backfilled.main_ip, backfilled.mgmt_ip, backfilled.asn) == (
            "10.9.9.9",
            "10.2.2.2",
            65001,
        )
        assert self.translator.backfill_desired(backfilled, twin.spec) is None


class TestServerCluster:
    translator = ServerClusterTranslator()

    def test_resolves_every_reference(self) -> None:
        desired = _cluster(
            admin=TENANT.name,
            vpc=CLUSTER_VPC.name,
            tags=["b", "a"],
            servers=[ServerClusterMember("srv01", shared=True)],
        )

        spec = self.translator.build_twin_spec(desired, _cache())

        assert spec.site == SITE
        assert spec.admin == TENANT
        assert spec.vpc == CLUSTER_VPC
        assert spec.template == TEMPLATE
        assert spec.servers == [RemoteRef(SERVER.id, "srv01")]

    def test_optional_references_stay_unset(self) -> None:
        spec = self.translator.build_twin_spec(_cluster(), _cache())

        assert spec.vpc == RemoteRef(0, "")
        assert spec.admin == RemoteRef(0, "")

    @pytest.mark.parametrize(
        ("changes", "message"),
        [
            ({"site": "lon1"}, "couldn't find site 'lon1'"),
            ({"template": "missing"}, "couldn't find server cluster template 'missing'"),
            ({"servers": [ServerClusterMember("srv99")]}, "couldn't find server 'srv99'"),
        ],
    )
    def test_unresolved_reference_is_named(self, changes: dict[str, object], message: str) -> None:
        with pytest.raises(ConfigurationReferenceError) as excinfo:
            self.translator.build_twin_spec(_cluster(**changes), _cache())

        assert str(excinfo.value) == message

    def test_update_payload_carries_only_tags_and_servers(self) -> None:
        spec = self.translator.build_twin_spec(
            _cluster(tags=["prod"], servers=[ServerClusterMember("srv01")]), _cache()
        )

        assert self.translator.update_payload(spec) == {
            "tags": ["prod"],
            "servers": [{"id": SERVER.id, "name": "srv01"}],
        }
        assert set(self.translator.create_payload(spec)) == {
            "name",
            "admin",
            "site",
            "vpc",
            "srvClusterTemplate",
            "tags",
            "servers",
        }

    def test_tag_and_member_order_is_irrelevant(self) -> None:
        spec = self.translator.build_twin_spec(
            _cluster(tags=["b", "a"], servers=[ServerClusterMember("srv01")]), _cache()
        )
        remote = RemoteServerCluster(
            id=5,
            name="cluster-a",
            site_id=SITE.id,
            template_id=TEMPLATE.id,
            tags=("a", "b"),
            servers=(RemoteRef(SERVER.id, "srv01"),),
        )

        assert self.translator.compare(spec, remote) is None


class TestVPC:
    translator = VPCTranslator()

    def test_guest_tenants_resolve_in_order(self) -> None:
        desired = make_vpc(guest_tenants=[GUEST.name, TENANT.name])

        spec = self.translator.build_twin_spec(desired, _cache())

        assert spec.admin_tenant == TENANT
        assert spec.guest_tenants == [GUEST, TENANT]

    def test_unknown_guest_is_named(self) -> None:
        desired = make_vpc(guest_tenants=["Nobody"])

        with pytest.raises(
            ConfigurationReferenceError, match="couldn't find guest tenant 'Nobody'"
        ):
            self.translator.build_twin_spec(desired, _cache())

    def test_guest_change_is_detected(self) -> None:
        spec = self.translator.build_twin_spec(make_vpc(guest_tenants=[GUEST.name]), _cache())
        remote = RemoteVPC(id=3, name="vpc-a", admin_tenant_id=TENANT.id, guest_tenant_ids=())

        mismatch = self.translator.compare(spec, remote)

        assert mismatch is not None
        assert mismatch.field == "guest_tenants"


class TestServerClusterTemplate:
    translator = ServerClusterTemplateTranslator()

    def test_payload_omits_unset_fields(self) -> None:
        vnet = TemplateVNet(
            postfix="data",
            type="l2vpn",
            server_nics=("eth1", "eth2"),
            vlan="",
            ipv4_gateway=TemplateGateway(assign_type="auto", hostnum=0),
            ipv6_gateway=TemplateGateway(),
            ipv4_dhcp_enabled=True,
        )
        spec = self.translator.build_twin_spec(_template(vnet), _cache())

        assert self.translator.create_payload(spec) == {
            "name": "two-nic",
            "vnets": [
                {
                    "postfix": "data",
                    "type": "l2vpn",
                    "serverNics": ["eth1", "eth2"],
                    "ipv4DhcpEnabled": True,
                    "ipv4Gateway": {"assignType": "auto"},
                }
            ],
        }

    def test_server_assigned_values_are_not_drift(self) -> None:
        wanted = TemplateVNet(postfix="data", type="l3vpn", server_nics=("eth1",))
        assigned = TemplateVNet(
            postfix="data",
            type="l3vpn",
            server_nics=("eth1",),
            vlan_id="100",
            ipv4_gateway=TemplateGateway(assign_type="auto", allocation="10.0.0.0/24"),
        )
        spec = self.translator.build_twin_spec(_template(wanted), _cache())
        remote = RemoteServerClusterTemplate(id=11, name="two-nic", vnets=(assigned,))

        assert self.translator.compare(spec, remote) is None

    def test_changed_vnet_field_is_reported_with_index(self) -> None:
        first = TemplateVNet(postfix="mgmt", type="l3vpn")
        second = TemplateVNet(postfix="data", type="l2vpn", vlan_id="200")
        spec = self.translator.build_twin_spec(_template(first, second), _cache())
        remote = RemoteServerClusterTemplate(
            id=11,
            name="two-nic",
            vnets=(first, TemplateVNet(postfix="data", type="l2vpn", vlan_id="100")),
        )

        mismatch = self.translator.compare(spec, remote)

        assert mismatch is not None
        assert mismatch.field == "vnets[1].vlan_id"

    def test_vnet_count_change_is_detected(self) -> None:
        vnet = TemplateVNet(postfix="data", type="l2vpn")
        spec = self.translator.build_twin_spec(_template(vnet, vnet), _cache())
        remote = RemoteServerClusterTemplate(id=11, name="two-nic", vnets=(vnet,))

        mismatch = self.translator.compare(spec, remote)

        assert mismatch is not None
        assert mismatch.field == "vnets"
