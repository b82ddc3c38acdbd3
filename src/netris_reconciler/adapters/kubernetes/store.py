"""Object store backed by the Kubernetes custom objects API."""

from __future__ import annotations

from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING, Any

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException
from pydantic import ValidationError

from netris_reconciler.domain.errors import StoreConflictError, StoreError

from .translator import (
    CUSTOM_RESOURCES,
    GROUP,
    VERSION,
    desired_from_body,
    metadata_patch,
    spec_patch,
    status_patch,
    twin_body,
    twin_from_body,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from netris_reconciler.domain.model import (
        DesiredResource,
        ObjectKey,
        ResourceKind,
        ResourceStatus,
        TwinResource,
    )

log = getLogger(__name__)

NOT_FOUND = 404
CONFLICT = 409


def load_custom_objects_api() -> client.CustomObjectsApi:
    """Prefer the in-cluster service account, fall back to the local kubeconfig."""

    try:
        config.load_incluster_config()
        log.info("Loaded in-cluster Kubernetes configuration")
    except ConfigException:
        config.load_kube_config()
        log.info("Loaded Kubernetes configuration from kubeconfig")
    return client.CustomObjectsApi()


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except ApiException as exc:
        if exc.status == CONFLICT:
            raise StoreConflictError(f"{action}: {exc.reason}") from exc
        raise StoreError(f"{action}: {exc.status} {exc.reason}") from exc


class KubernetesObjectStore:
    """:class:`ObjectStore` over ``k8s.netris.ai/v1alpha1`` custom resources."""

    def __init__(self, api: client.CustomObjectsApi | None = None) -> None:
        self._api = api if api is not None else load_custom_objects_api()

    # desired resources

    def get_desired(self, kind: ResourceKind, key: ObjectKey) -> DesiredResource[Any] | None:
        body = self._get(CUSTOM_RESOURCES[kind].plural, key)
        if body is None:
            return None
        return self._parse(f"{kind} {key}", lambda: desired_from_body(kind, body))

    def list_desired(
        self, kind: ResourceKind, *, namespace: str | None = None
    ) -> Sequence[DesiredResource[Any]]:
        items = self._list(CUSTOM_RESOURCES[kind].plural, namespace)
        return self._parse_items(kind, items, desired_from_body)

    def patch_metadata(self, desired: DesiredResource[Any]) -> None:
        self._patch(desired, metadata_patch(desired), "patch metadata of")

    def patch_desired(self, desired: DesiredResource[Any]) -> None:
        self._patch(desired, spec_patch(desired), "patch")

    def update_desired(self, desired: DesiredResource[Any]) -> None:
        plural = CUSTOM_RESOURCES[desired.kind].plural
        key = desired.key
        current = self._get(plural, key)
        if current is None:
            return
        metadata = dict(current.get("metadata", {}))
        metadata.update(metadata_patch(desired)["metadata"])
        body = {**current, "metadata": metadata}
        with _store_errors(f"update {desired.kind} {key}"):
            self._api.replace_namespaced_custom_object(
                GROUP, VERSION, key.namespace, plural, key.name, body
            )

    def patch_status(self, desired: DesiredResource[Any], status: ResourceStatus) -> None:
        key = desired.key
        with _store_errors(f"patch status of {desired.kind} {key}"):
            self._api.patch_namespaced_custom_object_status(
                GROUP,
                VERSION,
                key.namespace,
                CUSTOM_RESOURCES[desired.kind].plural,
                key.name,
                status_patch(status),
            )

    # twins

    def get_twin(self, kind: ResourceKind, key: ObjectKey) -> TwinResource[Any] | None:
        body = self._get(CUSTOM_RESOURCES[kind].twin_plural, key)
        if body is None:
            return None
        return self._parse(f"twin {kind} {key}", lambda: twin_from_body(kind, body))

    def list_twins(
        self, kind: ResourceKind, *, namespace: str | None = None
    ) -> Sequence[TwinResource[Any]]:
        items = self._list(CUSTOM_RESOURCES[kind].twin_plural, namespace)
        return self._parse_items(kind, items, twin_from_body)

    def create_twin(self, twin: TwinResource[Any]) -> None:
        key = twin.key
        with _store_errors(f"create twin {twin.kind} {key}"):
            self._api.create_namespaced_custom_object(
                GROUP,
                VERSION,
                key.namespace,
                CUSTOM_RESOURCES[twin.kind].twin_plural,
                twin_body(twin),
            )

    def update_twin(self, twin: TwinResource[Any]) -> None:
        key = twin.key
        with _store_errors(f"update twin {twin.kind} {key}"):
            self._api.replace_namespaced_custom_object(
                GROUP,
                VERSION,
                key.namespace,
                CUSTOM_RESOURCES[twin.kind].twin_plural,
                key.name,
                twin_body(twin),
            )

    def delete_twin(self, twin: TwinResource[Any]) -> None:
        key = twin.key
        try:
            self._api.delete_namespaced_custom_object(
                GROUP, VERSION, key.namespace, CUSTOM_RESOURCES[twin.kind].twin_plural, key.name
            )
        except ApiException as exc:
            if exc.status == NOT_FOUND:
                return
            raise StoreError(f"delete twin {twin.kind} {key}: {exc.status} {exc.reason}") from exc

    # helpers

    def _patch(self, desired: DesiredResource[Any], body: dict[str, Any], action: str) -> None:
        key = desired.key
        with _store_errors(f"{action} {desired.kind} {key}"):
            self._api.patch_namespaced_custom_object(
                GROUP,
                VERSION,
                key.namespace,
                CUSTOM_RESOURCES[desired.kind].plural,
                key.name,
                body,
            )

    def _get(self, plural: str, key: ObjectKey) -> dict[str, Any] | None:
        try:
            return self._api.get_namespaced_custom_object(
                GROUP, VERSION, key.namespace, plural, key.name
            )
        except ApiException as exc:
            if exc.status == NOT_FOUND:
                return None
            raise StoreError(f"get {plural} {key}: {exc.status} {exc.reason}") from exc

    def _list(self, plural: str, namespace: str | None) -> list[dict[str, Any]]:
        with _store_errors(f"list {plural}"):
            if namespace is None:
                response = self._api.list_cluster_custom_object(GROUP, VERSION, plural)
            else:
                response = self._api.list_namespaced_custom_object(
                    GROUP, VERSION, namespace, plural
                )
        return list(response.get("items", []))

    def _parse[T](self, label: str, parse: Callable[[], T]) -> T:
        try:
            return parse()
        except ValidationError as exc:
            raise StoreError(f"Malformed {label}: {exc}") from exc

    def _parse_items[T](
        self,
        kind: ResourceKind,
        items: list[dict[str, Any]],
        parse: Callable[[ResourceKind, dict[str, Any]], T],
    ) -> list[T]:
        parsed: list[T] = []
        for item in items:
            try:
                parsed.append(parse(kind, item))
            except ValidationError as exc:
                name = item.get("metadata", {}).get("name", "?")
                log.warning("Skipping malformed %s %s: %s", kind, name, exc)
        return parsed
