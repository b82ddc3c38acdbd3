"""Netris control-plane API client."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, ValidationError

from netris_reconciler.adapters.http_resilience import ResilientClient
from netris_reconciler.domain.errors import RemoteCallError
from netris_reconciler.domain.model import EntityKind
from netris_reconciler.domain.ports import ApiReply

from .schema import (
    NetrisEnvelope,
    NetrisIDName,
    NetrisInventory,
    NetrisPort,
    NetrisServerCluster,
    NetrisServerClusterTemplate,
    NetrisVPC,
)
from .translator import (
    translate_inventory_server,
    translate_port,
    translate_ref,
    translate_server_cluster,
    translate_server_cluster_template,
    translate_vpc,
)

if TYPE_CHECKING:
    from collections.abc import Coroutine, Mapping, Sequence

    from netris_reconciler.config.http_resilience import ResilienceConfig
    from netris_reconciler.config.netris import NetrisConfig
    from netris_reconciler.domain.model import Identified

log = getLogger(__name__)

AUTH_PATH = "/api/auth"
INVENTORY_SERVER_TYPE = "server"


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Paths and record parsing for one entity kind.

    ``item_path`` is ``None`` for read-only kinds that are only ever listed.
    """

    list_path: str
    schema: type[BaseModel]
    translate: Callable[[Any], Identified]
    add_path: str | None = None
    item_path: str | None = None
    list_filter: Callable[[Any], bool] | None = None


ENDPOINTS: dict[EntityKind, Endpoint] = {
    EntityKind.SITE: Endpoint("/api/v2/sites", NetrisIDName, translate_ref),
    EntityKind.TENANT: Endpoint("/api/v2/tenants", NetrisIDName, translate_ref),
    EntityKind.PROFILE: Endpoint("/api/v2/inventory-profiles", NetrisIDName, translate_ref),
    EntityKind.PORT: Endpoint("/api/v2/ports", NetrisPort, translate_port),
    EntityKind.VPC: Endpoint(
        "/api/v2/vpc",
        NetrisVPC,
        translate_vpc,
        add_path="/api/v2/vpc",
        item_path="/api/v2/vpc/{id}",
    ),
    EntityKind.SERVER_CLUSTER: Endpoint(
        "/api/v2/servercluster",
        NetrisServerCluster,
        translate_server_cluster,
        add_path="/api/v2/servercluster",
        item_path="/api/v2/servercluster/{id}",
    ),
    EntityKind.SERVER_CLUSTER_TEMPLATE: Endpoint(
        "/api/v2/servercluster-template",
        NetrisServerClusterTemplate,
        translate_server_cluster_template,
        add_path="/api/v2/servercluster-template",
        item_path="/api/v2/servercluster-template/{id}",
    ),
    EntityKind.INVENTORY_SERVER: Endpoint(
        "/api/v2/inventory",
        NetrisInventory,
        translate_inventory_server,
        add_path="/api/v2/inventory/server",
        item_path="/api/v2/inventory/server/{id}",
        list_filter=lambda item: item.type == INVENTORY_SERVER_TYPE,
    ),
}


class NetrisAPIError(RemoteCallError):
    """Raised when the Netris API cannot be reached or answers with garbage."""


class NetrisClient:
    """Synchronous :class:`RemoteClient` over the Netris REST API.

    Calls from any thread are handed to one event loop running on a private
    I/O thread, so every request goes through the same ``ResilientClient`` and
    its rate limit. The session cookie obtained from ``/api/auth`` is refreshed
    once when a call comes back with 401.
    """

    def __init__(
        self,
        *,
        config: NetrisConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._session_lock = threading.Lock()
        self._cookies: dict[str, str] | None = None
        self._loop_lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._client: ResilientClient | None = None

    def list(self, kind: EntityKind) -> Sequence[Identified]:
        endpoint = ENDPOINTS[kind]
        envelope = self._run(self._call_async("GET", endpoint.list_path)).envelope
        if not envelope.is_success:
            raise NetrisAPIError(envelope.message or f"listing {kind} failed")
        if not isinstance(envelope.data, list):
            raise NetrisAPIError(f"Unexpected {kind} list payload: {type(envelope.data).__name__}")
        try:
            records = [endpoint.schema.model_validate(item) for item in envelope.data]
        except ValidationError as exc:
            raise NetrisAPIError(f"Malformed {kind} entry: {exc}") from exc
        if endpoint.list_filter is not None:
            records = [record for record in records if endpoint.list_filter(record)]
        return [endpoint.translate(record) for record in records]

    def add(self, kind: EntityKind, payload: Mapping[str, object]) -> ApiReply:
        path = _require(ENDPOINTS[kind].add_path, kind, "add")
        return self._run(self._call_async("POST", path, payload)).reply

    def update(self, kind: EntityKind, entity_id: int, payload: Mapping[str, object]) -> ApiReply:
        path = _require(ENDPOINTS[kind].item_path, kind, "update").format(id=entity_id)
        return self._run(self._call_async("PUT", path, payload)).reply

    def delete(self, kind: EntityKind, entity_id: int) -> ApiReply:
        path = _require(ENDPOINTS[kind].item_path, kind, "delete").format(id=entity_id)
        return self._run(self._call_async("DELETE", path)).reply

    def close(self) -> None:
        """Close the HTTP client and stop the I/O thread; a later call starts both again."""

        with self._loop_lock:
            loop, thread = self._loop, self._thread
            self._loop = self._thread = None
        if loop is None or thread is None:
            return
        try:
            asyncio.run_coroutine_threadsafe(self._close_client(), loop).result()
        finally:
            loop.call_soon_threadsafe(loop.stop)
            thread.join()
            loop.close()

    def _run[T](self, coro: Coroutine[Any, Any, T]) -> T:
        return asyncio.run_coroutine_threadsafe(coro, self._event_loop()).result()

    def _event_loop(self) -> asyncio.AbstractEventLoop:
        with self._loop_lock:
            if self._loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(target=loop.run_forever, name="netris-io", daemon=True)
                thread.start()
                self._loop, self._thread = loop, thread
            return self._loop

    def _http(self) -> ResilientClient:
        # only called on the I/O thread
        if self._client is None:
            self._client = self._client_factory(self._resilience)
        return self._client

    async def _close_client(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def _call_async(
        self, method: str, path: str, payload: Mapping[str, object] | None = None
    ) -> _Answer:
        client = self._http()
        cookies = await self._session(client)
        response = await self._send(client, method, path, payload, cookies)
        if response.status_code == httpx.codes.UNAUTHORIZED:
            log.info("Netris session expired, logging in again")
            cookies = await self._session(client, stale=cookies)
            response = await self._send(client, method, path, payload, cookies)
        return _parse(response)

    async def _session(
        self, client: ResilientClient, *, stale: dict[str, str] | None = None
    ) -> dict[str, str]:
        with self._session_lock:
            if self._cookies is not None and self._cookies is not stale:
                return self._cookies
        cookies = await self._login(client)
        with self._session_lock:
            self._cookies = cookies
        return cookies

    async def _login(self, client: ResilientClient) -> dict[str, str]:
        body = {
            "user": self._config.login,
            "password": self._config.password,
            "auth_scheme_id": self._config.auth_scheme_id,
        }
        try:
            response = await client.post(AUTH_PATH, json=body)
        except httpx.HTTPError as exc:
            raise NetrisAPIError(f"Netris login failed: {exc}") from exc
        if response.status_code != httpx.codes.OK:
            raise NetrisAPIError(
                f"Netris login failed with status {response.status_code}",
                status_code=response.status_code,
            )
        log.debug("Logged in to %s as %s", self._config.address, self._config.login)
        return dict(response.cookies)

    async def _send(
        self,
        client: ResilientClient,
        method: str,
        path: str,
        payload: Mapping[str, object] | None,
        cookies: dict[str, str],
    ) -> httpx.Response:
        log.debug("%s %s", method, path)
        headers = {"Cookie": "; ".join(f"{name}={value}" for name, value in cookies.items())}
        try:
            if payload is None:
                return await client.request(method, path, headers=headers)
            return await client.request(method, path, json=dict(payload), headers=headers)
        except httpx.HTTPError as exc:
            raise NetrisAPIError(f"{method} {path} failed: {exc}") from exc


@dataclass(frozen=True, slots=True)
class _Answer:
    envelope: NetrisEnvelope
    reply: ApiReply


def _parse(response: httpx.Response) -> _Answer:
    try:
        envelope = NetrisEnvelope.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        raise NetrisAPIError(
            f"Malformed Netris response ({response.status_code}): {exc}",
            status_code=response.status_code,
        ) from exc

    status_code = response.status_code
    if envelope.meta is not None and envelope.meta.status_code is not None:
        status_code = envelope.meta.status_code

    entity_id = 0
    if isinstance(envelope.data, dict):
        raw_id = envelope.data.get("id")
        if isinstance(raw_id, int | float):
            entity_id = int(raw_id)

    reply = ApiReply(
        status_code=status_code,
        is_success=envelope.is_success and response.is_success,
        message=envelope.message,
        entity_id=entity_id,
    )
    return _Answer(envelope=envelope, reply=reply)


def _require(path: str | None, kind: EntityKind, operation: str) -> str:
    if path is None:
        raise ValueError(f"{kind} does not support {operation}")
    return path
