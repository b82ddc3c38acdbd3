"""CR phase planning and execution against the in-memory store."""

from __future__ import annotations

from datetime import UTC, datetime

from netris_reconciler.domain.model import (
    DELETE_FINALIZER,
    IMPORT_ANNOTATION,
    RECLAIM_ANNOTATION,
    InventoryServerLink,
    ObjectKey,
    ResourceKind,
    StatusState,
)
from netris_reconciler.domain.reconciliation import (
    CrAction,
    ReconciliationEngine,
    plan_cr_phase,
    twin_is_stale,
)
from netris_reconciler.domain.reconciliation.translators import InventoryServerTranslator
from netris_reconciler.domain.resolution import ResolutionCache
from tests.support.remote import FakeRemoteClient
from tests.support.resources import (
    PORT,
    PROFILE,
    SITE,
    TENANT,
    make_inventory_server,
    make_inventory_twin,
    seeded_remote,
)
from tests.support.store import FakeObjectStore

TRANSLATOR = InventoryServerTranslator()


def _cache() -> ResolutionCache:
    return ResolutionCache(seeded_remote())


def test_deleting_resource_plans_deletion() -> None:
    desired = make_inventory_server(ready=True)
    desired.metadata.deletion_timestamp = datetime(2024, 1, 1, tzinfo=UTC)

    plan = plan_cr_phase(desired, None, TRANSLATOR, _cache())

    assert plan.action is CrAction.DELETE


def test_missing_annotations_get_defaults() -> None:
    desired = make_inventory_server()

    plan = plan_cr_phase(desired, None, TRANSLATOR, _cache())

    assert plan.action is CrAction.SET_ANNOTATIONS
    assert plan.desired is not None
    assert plan.desired.metadata.annotations == {
        IMPORT_ANNOTATION: "false",
        RECLAIM_ANNOTATION: "delete",
    }
    assert desired.metadata.annotations == {}


def test_invalid_annotation_values_are_replaced() -> None:
    desired = make_inventory_server()
    desired.metadata.annotations = {IMPORT_ANNOTATION: "yes", RECLAIM_ANNOTATION: "retain"}

    plan = plan_cr_phase(desired, None, TRANSLATOR, _cache())

    assert plan.desired is not None
    assert plan.desired.metadata.annotations[IMPORT_ANNOTATION] == "false"
    assert plan.desired.metadata.annotations[RECLAIM_ANNOTATION] == "retain"


def test_finalizer_is_attached_before_twin_is_created() -> None:
    desired = make_inventory_server(ready=True)
    desired.metadata.finalizers = []

    plan = plan_cr_phase(desired, None, TRANSLATOR, _cache())

    assert plan.action is CrAction.ATTACH_FINALIZER
    assert plan.desired is not None
    assert plan.desired.metadata.finalizers == [DELETE_FINALIZER]
    assert plan.twin is None


def test_twin_is_built_with_resolved_ids() -> None:
    desired = make_inventory_server(
        ready=True,
        tenant=TENANT.name,
        profile=PROFILE.name,
        description="rack 4",
        links=[InventoryServerLink("eth0", PORT.name)],
    )

    plan = plan_cr_phase(desired, None, TRANSLATOR, _cache())

    assert plan.action is CrAction.CREATE_TWIN
    assert plan.twin is not None
    assert plan.twin.metadata.name == desired.metadata.uid
    spec = plan.twin.spec
    assert spec.id == 0
    assert spec.resource_name == "srv01"
    assert spec.source_generation == 1
    assert (spec.site_id, spec.tenant_id, spec.profile_id) == (SITE.id, TENANT.id, PROFILE.id)
    assert spec.description == "rack 4"
    assert [(link.local, link.port_id, link.port_name) for link in spec.links] == [
        ("eth0", PORT.id, "swp1")
    ]


def test_unknown_site_rejects_the_spec() -> None:
    desired = make_inventory_server(ready=True, site="lon1")

    plan = plan_cr_phase(desired, None, TRANSLATOR, _cache())

    assert plan.action is CrAction.REJECT
    assert plan.failure == "invalid site 'lon1'"
    assert plan.twin is None


def test_unknown_port_rejects_the_spec() -> None:
    desired = make_inventory_server(ready=True, links=[InventoryServerLink("eth0", "swp9@leaf1")])

    plan = plan_cr_phase(desired, None, TRANSLATOR, _cache())

    assert plan.action is CrAction.REJECT
    assert plan.failure == "port 'swp9@leaf1' not found"


def test_current_twin_needs_nothing() -> None:
    desired = make_inventory_server(ready=True)
    twin = make_inventory_twin(desired, id=42)

    assert not twin_is_stale(desired, twin)
    assert plan_cr_phase(desired, twin, TRANSLATOR, _cache()).action is CrAction.NONE


def test_generation_change_rebuilds_twin_and_keeps_id() -> None:
    desired = make_inventory_server(ready=True, generation=3, description="new")
    twin = make_inventory_twin(desired, id=42, source_generation=2, description="old")

    plan = plan_cr_phase(desired, twin, TRANSLATOR, _cache())

    assert plan.action is CrAction.UPDATE_TWIN
    assert plan.twin is not None
    assert plan.twin.spec.id == 42
    assert plan.twin.spec.source_generation == 3
    assert plan.twin.spec.description == "new"
    assert plan.twin.metadata.name == twin.metadata.name
    # the control plane has not seen generation 3 yet
    assert plan.twin.spec.synced_generation == 2


def test_echoed_backfill_keeps_twin_in_sync() -> None:
    desired = make_inventory_server(ready=True, generation=3, main_ip="10.0.0.42")
    twin = make_inventory_twin(desired, id=42, source_generation=2, main_ip="10.0.0.42")

    plan = plan_cr_phase(desired, twin, TRANSLATOR, _cache())

    assert plan.twin is not None
    assert plan.twin.spec.synced_generation == 3


def test_annotation_flip_marks_twin_stale() -> None:
    desired = make_inventory_server(ready=True, retain=True)
    twin = make_inventory_twin(desired, id=42, reclaim=False)

    assert twin_is_stale(desired, twin)
    plan = plan_cr_phase(desired, twin, TRANSLATOR, _cache())
    assert plan.twin is not None
    assert plan.twin.spec.reclaim is True


class TestExecutor:
    def _engine(self, store: FakeObjectStore, remote: FakeRemoteClient) -> ReconciliationEngine:
        return ReconciliationEngine(
            store=store, remote=remote, cache=ResolutionCache(remote), requeue_interval=15.0
        )

    def test_first_passes_write_annotations_then_finalizer(self) -> None:
        store = FakeObjectStore()
        desired = make_inventory_server()
        store.put_desired(desired)
        engine = self._engine(store, seeded_remote())

        first = engine.reconcile_desired(ResourceKind.INVENTORY_SERVER, desired.key)
        second = engine.reconcile_desired(ResourceKind.INVENTORY_SERVER, desired.key)
        third = engine.reconcile_desired(ResourceKind.INVENTORY_SERVER, desired.key)

        assert not first.requeue
        assert not second.requeue
        assert third.requeue_after == 15.0
        assert store.writes == ["patch_metadata", "patch_metadata", "create_twin"]
        stored = store.desired(ResourceKind.INVENTORY_SERVER, desired.key)
        assert stored is not None
        assert stored.metadata.finalizers == [DELETE_FINALIZER]
        twin = store.only_twin(ResourceKind.INVENTORY_SERVER)
        assert twin.key == ObjectKey("default", "uid-srv01")

    def test_rejection_reports_failure_without_twin(self) -> None:
        store = FakeObjectStore()
        desired = make_inventory_server(ready=True, site="lon1")
        store.put_desired(desired)
        engine = self._engine(store, seeded_remote())

        result = engine.reconcile_desired(ResourceKind.INVENTORY_SERVER, desired.key)

        assert result.requeue_after == 15.0
        assert result.status is not None
        assert result.status.state is StatusState.FAILURE
        assert store.twins(ResourceKind.INVENTORY_SERVER) == []
        stored = store.desired(ResourceKind.INVENTORY_SERVER, desired.key)
        assert stored is not None
        assert stored.status.message == "invalid site 'lon1'"

    def test_missing_desired_resource_is_a_no_op(self) -> None:
        store = FakeObjectStore()
        engine = self._engine(store, seeded_remote())

        result = engine.reconcile_desired(
            ResourceKind.INVENTORY_SERVER, ObjectKey("default", "ghost")
        )

        assert not result.requeue
        assert store.writes == []
