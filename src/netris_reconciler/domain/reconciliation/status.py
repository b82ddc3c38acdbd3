"""Writes the observed outcome back onto desired resources."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from netris_reconciler.domain.errors import StoreError
from netris_reconciler.domain.model import ResourceStatus, StatusState

if TYPE_CHECKING:
    from typing import Any

    from netris_reconciler.domain.model import DesiredResource
    from netris_reconciler.domain.ports import ObjectStore

log = getLogger(__name__)


class StatusReporter:
    def __init__(self, store: ObjectStore) -> None:
        self._store = store

    def report(
        self, desired: DesiredResource[Any], state: StatusState, message: str = ""
    ) -> ResourceStatus:
        """Patch ``{state, message}`` onto ``desired`` unless it is already recorded.

        A rejected patch is logged and otherwise ignored; the caller requeues
        anyway, so the next invocation writes it again.
        """

        status = ResourceStatus(state=state, message=message)
        if desired.status == status:
            log.debug("Status of %s %s unchanged (%s)", desired.kind, desired.key, state)
            return status
        try:
            self._store.patch_status(desired, status)
        except StoreError as exc:
            log.error("Patching status of %s %s failed: %s", desired.kind, desired.key, exc)
            return status
        desired.status = status
        return status

    def ok(self, desired: DesiredResource[Any]) -> ResourceStatus:
        return self.report(desired, StatusState.OK, "Success")

    def failure(self, desired: DesiredResource[Any], message: str) -> ResourceStatus:
        return self.report(desired, StatusState.FAILURE, message)
