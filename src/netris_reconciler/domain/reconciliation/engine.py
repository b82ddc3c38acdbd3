"""Façade wiring both phases, the deletion protocol and the status reporter to the ports.

The runtime calls :meth:`ReconciliationEngine.reconcile_desired` when a desired
resource changes and :meth:`ReconciliationEngine.reconcile_twin` when a twin
changes. At most one call per key runs at a time; distinct keys may run on
separate threads and share the resolution cache.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from netris_reconciler.domain.errors import StoreError

from .contracts import ReconcileResult
from .cr_phase import CrPhaseReconciler
from .deletion import DeletionProtocol
from .meta_phase import MetaPhaseReconciler
from .status import StatusReporter
from .translators import default_translators

if TYPE_CHECKING:
    from collections.abc import Mapping

    from netris_reconciler.domain.model import ObjectKey, ResourceKind
    from netris_reconciler.domain.ports import ObjectStore, RemoteClient
    from netris_reconciler.domain.resolution import ResolutionCache

    from .translators import ResourceTranslator

log = getLogger(__name__)


class ReconciliationEngine:
    def __init__(
        self,
        *,
        store: ObjectStore,
        remote: RemoteClient,
        cache: ResolutionCache,
        requeue_interval: float,
        translators: Mapping[ResourceKind, ResourceTranslator] | None = None,
    ) -> None:
        self.requeue_interval = requeue_interval
        self._store = store
        self._translators = translators if translators is not None else default_translators()
        reporter = StatusReporter(store)
        deletion = DeletionProtocol(
            store=store, remote=remote, reporter=reporter, requeue_interval=requeue_interval
        )
        self._cr_phase = CrPhaseReconciler(
            store=store,
            cache=cache,
            reporter=reporter,
            deletion=deletion,
            requeue_interval=requeue_interval,
        )
        self._meta_phase = MetaPhaseReconciler(
            store=store,
            remote=remote,
            cache=cache,
            reporter=reporter,
            requeue_interval=requeue_interval,
        )

    def translator_for(self, kind: ResourceKind) -> ResourceTranslator:
        return self._translators[kind]

    def reconcile_desired(self, kind: ResourceKind, key: ObjectKey) -> ReconcileResult:
        """Run the CR phase for the desired resource at ``key``."""

        try:
            desired = self._store.get_desired(kind, key)
            if desired is None:
                log.debug("%s %s is gone", kind, key)
                return ReconcileResult()
            return self._cr_phase.reconcile(desired, self.translator_for(kind))
        except StoreError as exc:
            log.error("Store rejected CR phase of %s %s: %s", kind, key, exc)
            return ReconcileResult(requeue_after=self.requeue_interval)

    def reconcile_twin(self, kind: ResourceKind, key: ObjectKey) -> ReconcileResult:
        """Run the Meta phase for the twin at ``key``."""

        try:
            twin = self._store.get_twin(kind, key)
            if twin is None:
                log.debug("Twin %s %s is gone", kind, key)
                return ReconcileResult()
            return self._meta_phase.reconcile(twin, self.translator_for(kind))
        except StoreError as exc:
            log.error("Store rejected Meta phase of %s %s: %s", kind, key, exc)
            return ReconcileResult(requeue_after=self.requeue_interval)
