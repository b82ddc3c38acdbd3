"""Import / reclaim annotations and the deletion finalizer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping

IMPORT_ANNOTATION: Final[str] = "resource.k8s.netris.ai/import"
RECLAIM_ANNOTATION: Final[str] = "resource.k8s.netris.ai/reclaimPolicy"
DELETE_FINALIZER: Final[str] = "resource.k8s.netris.ai/delete"

_IMPORT_VALUES = frozenset({"true", "false"})
_RECLAIM_VALUES = frozenset({"retain", "delete"})


def is_imported(annotations: Mapping[str, str]) -> bool:
    return annotations.get(IMPORT_ANNOTATION) == "true"


def is_reclaimed(annotations: Mapping[str, str]) -> bool:
    """``True`` when the remote entity must survive removal of the desired resource."""

    return annotations.get(RECLAIM_ANNOTATION) == "retain"


def must_update_annotations(annotations: Mapping[str, str]) -> bool:
    return (
        annotations.get(IMPORT_ANNOTATION) not in _IMPORT_VALUES
        or annotations.get(RECLAIM_ANNOTATION) not in _RECLAIM_VALUES
    )


def with_default_annotations(annotations: Mapping[str, str]) -> dict[str, str]:
    """Return a copy where unset or unrecognized values fall back to defaults."""

    updated = dict(annotations)
    updated[IMPORT_ANNOTATION] = "true" if is_imported(annotations) else "false"
    updated[RECLAIM_ANNOTATION] = "retain" if is_reclaimed(annotations) else "delete"
    return updated
