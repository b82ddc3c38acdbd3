"""Application orchestration entry points."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from netris_reconciler.adapters.kubernetes import KubernetesObjectStore
from netris_reconciler.adapters.netris import NetrisClient
from netris_reconciler.config import get_netris_config, get_reconcile_config
from netris_reconciler.domain.errors import StoreError
from netris_reconciler.domain.model import ResourceKind
from netris_reconciler.domain.reconciliation import ReconciliationEngine
from netris_reconciler.domain.resolution import ResolutionCache

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from netris_reconciler.config import ReconcileConfig
    from netris_reconciler.domain.model import EntityKind, Identified, ObjectKey
    from netris_reconciler.domain.ports import ObjectStore, RemoteClient
    from netris_reconciler.domain.reconciliation import ReconcileResult


log = getLogger(__name__)


@dataclass(slots=True)
class SweepResult:
    """Counters for one pass over every key of the selected kinds."""

    reconciled: int = 0
    requeued: int = 0
    errors: int = 0

    def add(self, other: SweepResult) -> None:
        self.reconciled += other.reconciled
        self.requeued += other.requeued
        self.errors += other.errors


@dataclass(frozen=True, slots=True)
class Runtime:
    engine: ReconciliationEngine
    store: ObjectStore
    config: ReconcileConfig


def build_runtime(
    *,
    store: ObjectStore | None = None,
    remote: RemoteClient | None = None,
    config: ReconcileConfig | None = None,
) -> Runtime:
    """Wire the engine to the Kubernetes store and the Netris API unless overridden."""

    effective_config = config or get_reconcile_config()
    effective_store = store or KubernetesObjectStore()
    effective_remote = remote or NetrisClient(config=get_netris_config())
    engine = ReconciliationEngine(
        store=effective_store,
        remote=effective_remote,
        cache=ResolutionCache(effective_remote),
        requeue_interval=effective_config.requeue_interval,
    )
    return Runtime(engine=engine, store=effective_store, config=effective_config)


def download_partition(
    kind: EntityKind, *, remote: RemoteClient | None = None
) -> tuple[Identified, ...]:
    """Fetch one resolution cache partition straight from the control plane."""

    if remote is not None:
        cache = ResolutionCache(remote)
        cache.download(kind)
        return cache.get_all(kind)

    client = NetrisClient(config=get_netris_config())
    try:
        cache = ResolutionCache(client)
        cache.download(kind)
        return cache.get_all(kind)
    finally:
        client.close()


def _run_keys(
    pool: ThreadPoolExecutor,
    label: str,
    keys: Sequence[ObjectKey],
    reconcile: Callable[[ObjectKey], ReconcileResult],
) -> SweepResult:
    result = SweepResult()
    futures = [(key, pool.submit(reconcile, key)) for key in keys]
    for key, future in futures:
        try:
            outcome = future.result()
        except Exception:
            log.exception("Unexpected error reconciling %s %s", label, key)
            result.errors += 1
            continue
        result.reconciled += 1
        if outcome.requeue:
            result.requeued += 1
    return result


def reconcile_once(
    runtime: Runtime,
    *,
    kinds: Iterable[ResourceKind] | None = None,
) -> SweepResult:
    """Run the CR phase on every desired resource, then the Meta phase on every twin."""

    selected = list(kinds) if kinds is not None else list(ResourceKind)
    namespace = runtime.config.namespace
    engine = runtime.engine
    total = SweepResult()

    with ThreadPoolExecutor(
        max_workers=runtime.config.workers, thread_name_prefix="reconcile"
    ) as pool:
        for kind in selected:
            desired = runtime.store.list_desired(kind, namespace=namespace)
            desired_keys = [item.key for item in desired]
            total.add(
                _run_keys(
                    pool,
                    str(kind),
                    desired_keys,
                    partial(engine.reconcile_desired, kind),
                )
            )
            twins = runtime.store.list_twins(kind, namespace=namespace)
            twin_keys = [item.key for item in twins]
            total.add(
                _run_keys(
                    pool,
                    f"{kind} twin",
                    twin_keys,
                    partial(engine.reconcile_twin, kind),
                )
            )
            log.debug(
                "Swept %s: %s desired, %s twins", kind, len(desired_keys), len(twin_keys)
            )

    log.info(
        "Sweep finished: reconciled=%s, requeued=%s, errors=%s",
        total.reconciled,
        total.requeued,
        total.errors,
    )
    return total


def run_forever(
    runtime: Runtime,
    *,
    kinds: Iterable[ResourceKind] | None = None,
    interval: float | None = None,
    stop: threading.Event | None = None,
) -> None:
    """Sweep repeatedly, sleeping ``interval`` seconds in between, until ``stop`` is set."""

    selected = list(kinds) if kinds is not None else list(ResourceKind)
    pause = interval if interval is not None else runtime.config.requeue_interval
    stop_event = stop or threading.Event()
    log.info(
        "Starting reconcile loop: kinds=%s, interval=%ss, namespace=%s",
        ", ".join(str(kind) for kind in selected),
        pause,
        runtime.config.namespace or "<all>",
    )
    while not stop_event.is_set():
        try:
            reconcile_once(runtime, kinds=selected)
        except StoreError as exc:
            log.error("Listing resources failed, retrying after %ss: %s", pause, exc)
        stop_event.wait(pause)
    log.info("Reconcile loop stopped")
