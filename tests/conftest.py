from __future__ import annotations

import pytest

from netris_reconciler.domain.reconciliation import ReconciliationEngine
from netris_reconciler.domain.resolution import ResolutionCache
from tests.support.remote import FakeRemoteClient
from tests.support.resources import seeded_remote
from tests.support.store import FakeObjectStore

REQUEUE_INTERVAL = 15.0


@pytest.fixture
def remote() -> FakeRemoteClient:
    return seeded_remote()


@pytest.fixture
def store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def cache(remote: FakeRemoteClient) -> ResolutionCache:
    return ResolutionCache(remote)


@pytest.fixture
def engine(
    store: FakeObjectStore, remote: FakeRemoteClient, cache: ResolutionCache
) -> ReconciliationEngine:
    return ReconciliationEngine(
        store=store, remote=remote, cache=cache, requeue_interval=REQUEUE_INTERVAL
    )
