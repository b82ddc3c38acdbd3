"""Translator protocol and the helpers every per-kind translator shares.

A translator owns all kind-specific knowledge: how names in a desired spec
resolve into a twin, which payload the control plane expects, which fields are
compared (and in which order) and which user-blank fields are backfilled from
the remote entity.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, Protocol

from netris_reconciler.domain.errors import ConfigurationReferenceError
from netris_reconciler.domain.model import is_imported, is_reclaimed

from ..contracts import FieldMismatch

if TYPE_CHECKING:
    from collections.abc import Iterable

    from netris_reconciler.domain.model import (
        DesiredResource,
        EntityKind,
        Identified,
        ResourceKind,
        TwinHeader,
    )
    from netris_reconciler.domain.resolution import ResolutionCache

log = getLogger(__name__)

type Payload = dict[str, object]
type FieldCheck = tuple[str, object, object]


class ResourceTranslator(Protocol):
    """Kind-specific mapping between desired spec, twin spec and remote entity."""

    kind: ResourceKind
    entity_kind: EntityKind

    def build_twin_spec(self, desired: DesiredResource[Any], cache: ResolutionCache) -> TwinHeader:
        """Resolve every reference of ``desired``.

        Raises ``ConfigurationReferenceError`` naming the first unresolvable one.
        """
        ...

    def create_payload(self, twin_spec: Any) -> Payload: ...

    def update_payload(self, twin_spec: Any) -> Payload: ...

    def compare(self, twin_spec: Any, remote: Any) -> FieldMismatch | None: ...

    def backfill_twin(self, twin_spec: Any, remote: Any) -> Any:
        """Return ``twin_spec`` with blank server-assigned fields taken from ``remote``."""
        ...

    def backfill_desired(self, spec: Any, twin_spec: Any) -> Any | None:
        """Return an updated desired spec, or ``None`` when nothing was blank."""
        ...


def header_fields(desired: DesiredResource[Any]) -> dict[str, Any]:
    """Twin header values derived from the desired resource; ``id`` is left to the caller."""

    annotations = desired.metadata.annotations
    return {
        "imported": is_imported(annotations),
        "reclaim": is_reclaimed(annotations),
        "source_generation": desired.metadata.generation,
        "resource_name": desired.metadata.name,
    }


def resolve(cache: ResolutionCache, kind: EntityKind, name: str, message: str) -> Identified:
    """Look ``name`` up in ``cache`` or raise with ``message`` formatted around it."""

    found = cache.find_by_name(kind, name)
    if found is None:
        raise ConfigurationReferenceError(message % name)
    return found


def first_mismatch(checks: Iterable[FieldCheck]) -> FieldMismatch | None:
    """Walk ``(field, remote, twin)`` triples in order and stop at the first difference."""

    for label, remote_value, twin_value in checks:
        if remote_value != twin_value:
            log.debug(
                "%s changed: remote=%r twin=%r", label, remote_value, twin_value
            )
            return FieldMismatch(field=label, remote_value=remote_value, twin_value=twin_value)
    return None


def id_ref(entity_id: int) -> Payload:
    return {"id": entity_id}


def id_name_ref(entity_id: int, name: str) -> Payload:
    return {"id": entity_id, "name": name}
