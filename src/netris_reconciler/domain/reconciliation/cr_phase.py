"""CR phase: turn a desired resource into its resolved twin.

``plan_cr_phase`` decides what to do from the current desired resource and twin
without touching the store; ``CrPhaseReconciler`` applies that decision.

Decision order:

1. deletion marker -> deletion protocol
2. import / reclaim annotations unset or invalid -> write defaults, stop
3. twin absent -> attach the finalizer first (stop), then resolve and create
4. twin stale -> resolve again, keep the remote ID, update
5. twin current -> nothing; the Meta phase owns convergence
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Any

from netris_reconciler.domain.errors import ConfigurationReferenceError
from netris_reconciler.domain.model import (
    DELETE_FINALIZER,
    ObjectMeta,
    TwinResource,
    is_imported,
    is_reclaimed,
    must_update_annotations,
    with_default_annotations,
)

from .contracts import ReconcileResult

if TYPE_CHECKING:
    from netris_reconciler.domain.model import DesiredResource
    from netris_reconciler.domain.ports import ObjectStore
    from netris_reconciler.domain.resolution import ResolutionCache

    from .deletion import DeletionProtocol
    from .status import StatusReporter
    from .translators import ResourceTranslator

log = getLogger(__name__)


class CrAction(StrEnum):
    DELETE = "delete"
    SET_ANNOTATIONS = "set_annotations"
    ATTACH_FINALIZER = "attach_finalizer"
    CREATE_TWIN = "create_twin"
    UPDATE_TWIN = "update_twin"
    REJECT = "reject"
    NONE = "none"


@dataclass(frozen=True, slots=True, kw_only=True)
class CrPlan:
    """Next state computed by :func:`plan_cr_phase`.

    ``desired`` is set when the desired resource itself must be patched and
    ``twin`` when a twin must be created or updated. ``failure`` names the
    reference that made the plan reject the desired spec.
    """

    action: CrAction
    desired: DesiredResource[Any] | None = None
    twin: TwinResource[Any] | None = None
    failure: str | None = None


def twin_is_stale(desired: DesiredResource[Any], twin: TwinResource[Any]) -> bool:
    annotations = desired.metadata.annotations
    return (
        desired.metadata.generation != twin.spec.source_generation
        or is_imported(annotations) != twin.spec.imported
        or is_reclaimed(annotations) != twin.spec.reclaim
    )


def plan_cr_phase(
    desired: DesiredResource[Any],
    twin: TwinResource[Any] | None,
    translator: ResourceTranslator,
    cache: ResolutionCache,
) -> CrPlan:
    """Decide the next CR-phase step; neither argument is mutated."""

    metadata = desired.metadata
    if metadata.is_deleting:
        return CrPlan(action=CrAction.DELETE)

    if must_update_annotations(metadata.annotations):
        annotated = replace(
            metadata, annotations=with_default_annotations(metadata.annotations)
        )
        return CrPlan(action=CrAction.SET_ANNOTATIONS, desired=replace(desired, metadata=annotated))

    if twin is None:
        if DELETE_FINALIZER not in metadata.finalizers:
            finalized = replace(metadata, finalizers=[*metadata.finalizers, DELETE_FINALIZER])
            return CrPlan(
                action=CrAction.ATTACH_FINALIZER, desired=replace(desired, metadata=finalized)
            )
        try:
            twin_spec = translator.build_twin_spec(desired, cache)
        except ConfigurationReferenceError as exc:
            return CrPlan(action=CrAction.REJECT, failure=str(exc))
        created = TwinResource(
            kind=desired.kind,
            metadata=ObjectMeta(name=metadata.uid, namespace=metadata.namespace),
            spec=twin_spec,
        )
        return CrPlan(action=CrAction.CREATE_TWIN, twin=created)

    if not twin_is_stale(desired, twin):
        return CrPlan(action=CrAction.NONE)

    try:
        twin_spec = translator.build_twin_spec(desired, cache)
    except ConfigurationReferenceError as exc:
        return CrPlan(action=CrAction.REJECT, failure=str(exc))
    refreshed = replace(twin_spec, id=twin.spec.id, synced_generation=twin.spec.synced_generation)
    in_sync = twin.spec.synced_generation == twin.spec.source_generation
    if in_sync and translator.update_payload(refreshed) == translator.update_payload(twin.spec):
        # nothing the control plane receives changed, e.g. a backfill echoed back
        refreshed = replace(refreshed, synced_generation=refreshed.source_generation)
    return CrPlan(action=CrAction.UPDATE_TWIN, twin=replace(twin, spec=refreshed))


class CrPhaseReconciler:
    """Apply :class:`CrPlan` decisions through the object store.

    Store failures propagate as ``StoreError``; the engine turns them into a
    requeue.
    """

    def __init__(
        self,
        *,
        store: ObjectStore,
        cache: ResolutionCache,
        reporter: StatusReporter,
        deletion: DeletionProtocol,
        requeue_interval: float,
    ) -> None:
        self._store = store
        self._cache = cache
        self._reporter = reporter
        self._deletion = deletion
        self._requeue_interval = requeue_interval

    def reconcile(
        self, desired: DesiredResource[Any], translator: ResourceTranslator
    ) -> ReconcileResult:
        twin = self._store.get_twin(desired.kind, desired.twin_key)
        plan = plan_cr_phase(desired, twin, translator, self._cache)
        log.debug("CR phase for %s %s: %s", desired.kind, desired.key, plan.action)

        if plan.action is CrAction.DELETE:
            return self._deletion.run(desired, twin, translator.entity_kind)

        if plan.desired is not None:
            self._store.patch_metadata(plan.desired)
            log.info("%s %s: %s", desired.kind, desired.key, plan.action)
            return ReconcileResult()

        if plan.failure is not None:
            log.error("%s %s rejected: %s", desired.kind, desired.key, plan.failure)
            status = self._reporter.failure(desired, plan.failure)
            return ReconcileResult(requeue_after=self._requeue_interval, status=status)

        if plan.twin is not None and plan.action is CrAction.CREATE_TWIN:
            log.info("Creating twin %s for %s %s", plan.twin.key, desired.kind, desired.key)
            self._store.create_twin(plan.twin)
        elif plan.twin is not None:
            log.info(
                "Updating twin %s for %s %s to generation %s",
                plan.twin.key,
                desired.kind,
                desired.key,
                desired.metadata.generation,
            )
            self._store.update_twin(plan.twin)

        return ReconcileResult(requeue_after=self._requeue_interval)
