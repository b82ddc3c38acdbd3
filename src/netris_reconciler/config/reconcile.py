"""Reconciliation loop defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import optional_float_env, optional_int_env

DEFAULT_REQUEUE_INTERVAL_SECONDS = 15.0
DEFAULT_WORKERS = 4


@dataclass(frozen=True, slots=True)
class ReconcileConfig:
    requeue_interval: float = DEFAULT_REQUEUE_INTERVAL_SECONDS
    namespace: str | None = None
    workers: int = DEFAULT_WORKERS


def get_reconcile_config() -> ReconcileConfig:
    namespace = os.getenv("NOPERATOR_NAMESPACE")
    return ReconcileConfig(
        requeue_interval=optional_float_env(
            "NOPERATOR_REQUEUE_INTERVAL", DEFAULT_REQUEUE_INTERVAL_SECONDS
        ),
        namespace=namespace.strip() or None if namespace else None,
        workers=optional_int_env("NOPERATOR_WORKERS", DEFAULT_WORKERS),
    )
