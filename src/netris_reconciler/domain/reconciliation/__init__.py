"""Two-phase reconciliation of desired resources against the control plane.

1) CR phase: desired resource -> resolved twin (names become IDs)
2) Meta phase: twin -> remote entity (create, compare, update)
3) deletion protocol and status reporting shared by both
"""

from __future__ import annotations

from .contracts import FieldMismatch, ReconcileResult
from .cr_phase import CrAction, CrPhaseReconciler, CrPlan, plan_cr_phase, twin_is_stale
from .deletion import DeletionProtocol
from .engine import ReconciliationEngine
from .meta_phase import MetaPhaseReconciler, MetaPlan, RemoteAction, plan_meta_phase
from .status import StatusReporter

__all__ = [
    "CrAction",
    "CrPhaseReconciler",
    "CrPlan",
    "DeletionProtocol",
    "FieldMismatch",
    "MetaPhaseReconciler",
    "MetaPlan",
    "ReconcileResult",
    "ReconciliationEngine",
    "RemoteAction",
    "StatusReporter",
    "plan_cr_phase",
    "plan_meta_phase",
    "twin_is_stale",
]
