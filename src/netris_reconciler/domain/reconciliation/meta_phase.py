"""Meta phase: drive the remote entity towards the resolved twin."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Any

from netris_reconciler.domain.errors import ReconcileError, RemoteCallError, StoreError

from .contracts import FieldMismatch, ReconcileResult

if TYPE_CHECKING:
    from netris_reconciler.domain.model import DesiredResource, TwinHeader, TwinResource
    from netris_reconciler.domain.ports import ApiReply, ObjectStore, RemoteClient
    from netris_reconciler.domain.resolution import ResolutionCache

    from .status import StatusReporter
    from .translators import ResourceTranslator
    from .translators.base import Payload

log = getLogger(__name__)


class RemoteAction(StrEnum):
    NONE = "none"
    ADOPT = "adopt"
    CREATE = "create"
    UPDATE = "update"


@dataclass(frozen=True, slots=True, kw_only=True)
class MetaPlan:
    """Remote call to issue and the twin spec to persist afterwards.

    ``twin_spec`` already carries the adopted ID and any backfilled fields; for
    ``CREATE`` the executor fills in the ID the control plane returns.
    """

    action: RemoteAction
    twin_spec: Any
    payload: Payload | None = None
    mismatch: FieldMismatch | None = None


def plan_meta_phase(
    twin: TwinResource[Any], remote: Any | None, translator: ResourceTranslator
) -> MetaPlan:
    """Decide the remote action for ``twin`` given the entity found for it, if any."""

    spec = twin.spec
    if remote is None:
        return MetaPlan(
            action=RemoteAction.CREATE,
            twin_spec=replace(spec, synced_generation=spec.source_generation),
            payload=translator.create_payload(spec),
        )

    backfilled = translator.backfill_twin(spec, remote)
    if spec.id == 0:
        return MetaPlan(action=RemoteAction.ADOPT, twin_spec=replace(backfilled, id=remote.id))

    mismatch = translator.compare(backfilled, remote)
    if mismatch is None and backfilled.synced_generation != backfilled.source_generation:
        # the comparison cannot see every edit, e.g. a cleared optional field
        mismatch = FieldMismatch(
            "generation", backfilled.synced_generation, backfilled.source_generation
        )
    if mismatch is None:
        return MetaPlan(action=RemoteAction.NONE, twin_spec=backfilled)
    return MetaPlan(
        action=RemoteAction.UPDATE,
        twin_spec=replace(backfilled, synced_generation=backfilled.source_generation),
        payload=translator.update_payload(backfilled),
        mismatch=mismatch,
    )


def _require_success(reply: ApiReply, action: str) -> ApiReply:
    if not reply.is_success:
        raise RemoteCallError(
            reply.message or f"{action} returned status {reply.status_code}",
            status_code=reply.status_code,
        )
    return reply


class MetaPhaseReconciler:
    def __init__(
        self,
        *,
        store: ObjectStore,
        remote: RemoteClient,
        cache: ResolutionCache,
        reporter: StatusReporter,
        requeue_interval: float,
    ) -> None:
        self._store = store
        self._remote = remote
        self._cache = cache
        self._reporter = reporter
        self._requeue_interval = requeue_interval

    def reconcile(
        self, twin: TwinResource[Any], translator: ResourceTranslator
    ) -> ReconcileResult:
        desired = self._store.get_desired(twin.kind, twin.desired_key)
        if desired is None:
            log.debug("%s %s has no desired resource", twin.kind, twin.desired_key)
            return ReconcileResult()
        if twin.metadata.is_deleting or desired.metadata.is_deleting:
            return ReconcileResult()

        try:
            return self._converge(desired, twin, translator)
        except StoreError:
            raise
        except ReconcileError as exc:
            log.error("Syncing %s %s failed: %s", twin.kind, twin.desired_key, exc)
            status = self._reporter.failure(desired, str(exc))
            return ReconcileResult(requeue_after=self._requeue_interval, status=status)

    def _refresh(self, translator: ResourceTranslator) -> None:
        # the next pass compares against what was just written
        try:
            self._cache.download(translator.entity_kind)
        except RemoteCallError as exc:
            log.warning("Refreshing %s cache failed: %s", translator.entity_kind, exc)

    def _lookup(self, twin: TwinResource[Any], translator: ResourceTranslator) -> Any | None:
        spec = twin.spec
        if spec.id != 0:
            found = self._cache.find_by_id(translator.entity_kind, spec.id)
            if found is None:
                log.info("%s id=%s not found remotely", twin.kind, spec.id)
            return found
        if not spec.imported:
            return None
        log.info("Importing %s %s", twin.kind, spec.resource_name)
        found = self._cache.find_by_name(translator.entity_kind, spec.resource_name)
        if found is None:
            log.info("%s %s not found for import", twin.kind, spec.resource_name)
        return found

    def _converge(
        self,
        desired: DesiredResource[Any],
        twin: TwinResource[Any],
        translator: ResourceTranslator,
    ) -> ReconcileResult:
        remote = self._lookup(twin, translator)
        plan = plan_meta_phase(twin, remote, translator)
        twin_spec: TwinHeader = plan.twin_spec

        if plan.action is RemoteAction.ADOPT:
            self._store.update_twin(replace(twin, spec=twin_spec))
            log.info("%s %s imported as id=%s", twin.kind, twin_spec.resource_name, twin_spec.id)
            status = self._reporter.ok(desired)
            return ReconcileResult(requeue_after=self._requeue_interval, status=status)

        if plan.action is RemoteAction.CREATE:
            log.info("Creating %s %s", twin.kind, twin_spec.resource_name)
            log.debug("Create payload: %s", plan.payload)
            reply = _require_success(
                self._remote.add(translator.entity_kind, plan.payload or {}), "create"
            )
            twin_spec = replace(twin_spec, id=reply.entity_id)
            log.info(
                "%s %s created with id=%s", twin.kind, twin_spec.resource_name, reply.entity_id
            )
            self._refresh(translator)
        elif plan.action is RemoteAction.UPDATE:
            log.info("Updating %s %s: %s", twin.kind, twin_spec.resource_name, plan.mismatch)
            log.debug("Update payload: %s", plan.payload)
            _require_success(
                self._remote.update(translator.entity_kind, twin_spec.id, plan.payload or {}),
                "update",
            )
            self._refresh(translator)
        else:
            log.debug("%s %s unchanged", twin.kind, twin_spec.resource_name)

        if twin_spec != twin.spec:
            self._store.update_twin(replace(twin, spec=twin_spec))

        backfilled = translator.backfill_desired(desired.spec, twin_spec)
        if backfilled is not None:
            log.info("Backfilling %s %s from the control plane", desired.kind, desired.key)
            self._store.patch_desired(replace(desired, spec=backfilled))

        status = self._reporter.ok(desired)
        return ReconcileResult(requeue_after=self._requeue_interval, status=status)
