"""Finalizer-gated cleanup run when a desired resource carries a deletion marker.

Order matters: the remote entity goes first, then the twin, and the finalizer
is cleared last so the store only releases the desired resource once nothing
is left behind. A failure at any step leaves the finalizer in place and the
next reconcile starts over; every step is safe to repeat.
"""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from netris_reconciler.domain.errors import RemoteCallError

from .contracts import ReconcileResult

if TYPE_CHECKING:
    from typing import Any

    from netris_reconciler.domain.model import DesiredResource, EntityKind, TwinResource
    from netris_reconciler.domain.ports import ObjectStore, RemoteClient

    from .status import StatusReporter

log = getLogger(__name__)

NOT_FOUND = 404


class DeletionProtocol:
    def __init__(
        self,
        *,
        store: ObjectStore,
        remote: RemoteClient,
        reporter: StatusReporter,
        requeue_interval: float,
    ) -> None:
        self._store = store
        self._remote = remote
        self._reporter = reporter
        self._requeue_interval = requeue_interval

    def run(
        self,
        desired: DesiredResource[Any],
        twin: TwinResource[Any] | None,
        entity_kind: EntityKind,
    ) -> ReconcileResult:
        """Delete remote entity, twin and finalizer; ``StoreError`` propagates to the caller."""

        if twin is not None and twin.spec.id > 0 and not twin.spec.reclaim:
            try:
                self._delete_remote(entity_kind, twin.spec.id)
            except RemoteCallError as exc:
                log.error("Deleting %s %s failed: %s", desired.kind, desired.key, exc)
                status = self._reporter.failure(desired, str(exc))
                return ReconcileResult(requeue_after=self._requeue_interval, status=status)
        elif twin is not None and twin.spec.reclaim:
            log.info("Reclaim policy retains %s id=%s", entity_kind, twin.spec.id)

        if twin is not None:
            self._store.delete_twin(twin)
            log.debug("Twin %s deleted", twin.key)

        released = replace(desired, metadata=replace(desired.metadata, finalizers=[]))
        self._store.update_desired(released)
        log.info("%s %s released", desired.kind, desired.key)
        return ReconcileResult()

    def _delete_remote(self, entity_kind: EntityKind, entity_id: int) -> None:
        try:
            reply = self._remote.delete(entity_kind, entity_id)
        except RemoteCallError as exc:
            # a proxy in front of the control plane answers 404 without an envelope
            if exc.status_code != NOT_FOUND:
                raise
            log.info("%s id=%s already gone: %s", entity_kind, entity_id, exc)
            return
        if reply.is_success:
            log.info("Deleted %s id=%s", entity_kind, entity_id)
            return
        if reply.is_not_found:
            log.info("%s id=%s already gone", entity_kind, entity_id)
            return
        raise RemoteCallError(
            reply.message or f"delete returned status {reply.status_code}",
            status_code=reply.status_code,
        )
