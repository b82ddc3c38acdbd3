from __future__ import annotations

import json
from collections.abc import Callable  # noqa: TC003
from concurrent.futures import ThreadPoolExecutor

import httpx
import pytest

from netris_reconciler.adapters.http_resilience import ResilientClient
from netris_reconciler.adapters.netris import NetrisAPIError, NetrisClient
from netris_reconciler.config import NetrisConfig, RateLimit, ResilienceConfig
from netris_reconciler.domain.model import (
    EntityKind,
    RemoteInventoryServer,
    RemotePort,
    RemoteRef,
    RemoteServerClusterTemplate,
    ResolvedLink,
    TemplateGateway,
    TemplateVNet,
)

BASE_URL = "https://netris.test"

type Handler = Callable[[httpx.Request], httpx.Response]


class FakeNetris:
    """Answers ``/api/auth`` itself and hands every other request to ``routes``."""

    def __init__(self, routes: dict[tuple[str, str], Handler]) -> None:
        self.routes = routes
        self.logins = 0
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/auth":
            self.logins += 1
            return httpx.Response(
                200,
                headers={"Set-Cookie": f"session=s{self.logins}; Path=/"},
                json={"isSuccess": True},
            )
        return self.routes[(request.method, request.url.path)](request)

    def api_requests(self) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path != "/api/auth"]


def _envelope(
    data: object, *, status: int = 200, success: bool = True, message: str = ""
) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status, json={"isSuccess": success, "message": message, "data": data}
        )

    return handler


def _make_client(fake: FakeNetris) -> NetrisClient:
    def factory(resilience: ResilienceConfig) -> ResilientClient:
        return ResilientClient(resilience, transport=httpx.MockTransport(fake))

    config = NetrisConfig(
        address=BASE_URL,
        login="admin",
        password="secret",
        resilience=ResilienceConfig(name="netris", base_url=BASE_URL),
    )
    return NetrisClient(config=config, client_factory=factory)


def test_list_logs_in_and_parses_sites() -> None:
    fake = FakeNetris({("GET", "/api/v2/sites"): _envelope([{"id": 1, "name": "nyc1"}])})
    client = _make_client(fake)

    sites = client.list(EntityKind.SITE)

    assert sites == [RemoteRef(1, "nyc1")]
    login = fake.requests[0]
    assert login.method == "POST"
    assert json.loads(login.content) == {
        "user": "admin",
        "password": "secret",
        "auth_scheme_id": 1,
    }
    assert fake.api_requests()[0].headers["Cookie"] == "session=s1"


def test_session_is_reused_between_calls() -> None:
    fake = FakeNetris({("GET", "/api/v2/tenants"): _envelope([])})
    client = _make_client(fake)

    client.list(EntityKind.TENANT)
    client.list(EntityKind.TENANT)

    assert fake.logins == 1


def test_inventory_list_keeps_servers_only() -> None:
    data = [
        {
            "id": 5,
            "name": "srv01",
            "type": "server",
            "site": {"id": 1, "name": "nyc1"},
            "tenant": {"id": 2, "name": "Admin"},
            "mainIP": {"address": "10.0.0.5"},
            "mgmtIP": {"address": "192.168.0.5"},
            "asn": 65005,
            "tags": ["rack4"],
            "links": [
                {"local": {"id": 0, "name": "eth0"}, "remote": {"id": 7, "name": "swp1@leaf1"}}
            ],
        },
        {"id": 6, "name": "leaf1", "type": "switch"},
    ]
    fake = FakeNetris({("GET", "/api/v2/inventory"): _envelope(data)})

    servers = _make_client(fake).list(EntityKind.INVENTORY_SERVER)

    assert servers == [
        RemoteInventoryServer(
            id=5,
            name="srv01",
            tenant_id=2,
            site_id=1,
            main_ip="10.0.0.5",
            mgmt_ip="192.168.0.5",
            asn=65005,
            tags=("rack4",),
            links=(ResolvedLink(local="eth0", port_id=7, port_name="swp1@leaf1"),),
        )
    ]


def test_ports_are_named_port_at_switch() -> None:
    data = [{"id": 7, "name": "swp1", "port_": "swp1", "switchName": "leaf1"}]
    fake = FakeNetris({("GET", "/api/v2/ports"): _envelope(data)})

    ports = _make_client(fake).list(EntityKind.PORT)

    assert ports == [RemotePort(id=7, name="swp1@leaf1", port="swp1", switch_name="leaf1")]


def test_template_vnets_are_parsed() -> None:
    data = [
        {
            "id": 11,
            "name": "two-nic",
            "vnets": [
                {
                    "postfix": "data",
                    "type": "l3vpn",
                    "serverNics": ["eth1"],
                    "vlanID": "100",
                    "ipv4Gateway": {"assignType": "auto", "childSubnetPrefixLength": 26},
                    "ipv4DhcpEnabled": True,
                }
            ],
        }
    ]
    fake = FakeNetris({("GET", "/api/v2/servercluster-template"): _envelope(data)})

    templates = _make_client(fake).list(EntityKind.SERVER_CLUSTER_TEMPLATE)

    assert templates == [
        RemoteServerClusterTemplate(
            id=11,
            name="two-nic",
            vnets=(
                TemplateVNet(
                    postfix="data",
                    type="l3vpn",
                    server_nics=("eth1",),
                    vlan_id="100",
                    ipv4_gateway=TemplateGateway(
                        assign_type="auto", child_subnet_prefix_length=26
                    ),
                    ipv4_dhcp_enabled=True,
                ),
            ),
        )
    ]


def test_add_returns_created_id() -> None:
    fake = FakeNetris(
        {("POST", "/api/v2/inventory/server"): _envelope({"id": 55}, message="created")}
    )

    reply = _make_client(fake).add(EntityKind.INVENTORY_SERVER, {"name": "srv01"})

    assert reply.is_success
    assert reply.entity_id == 55
    assert reply.message == "created"
    assert json.loads(fake.api_requests()[0].content) == {"name": "srv01"}


def test_update_and_delete_address_the_entity() -> None:
    fake = FakeNetris(
        {
            ("PUT", "/api/v2/vpc/9"): _envelope(None),
            ("DELETE", "/api/v2/vpc/9"): _envelope(None),
        }
    )
    client = _make_client(fake)

    assert client.update(EntityKind.VPC, 9, {"name": "vpc-a"}).is_success
    assert client.delete(EntityKind.VPC, 9).is_success
    assert [request.method for request in fake.api_requests()] == ["PUT", "DELETE"]


def test_failure_envelope_is_returned_not_raised() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"isSuccess": False, "message": "not found", "meta": {"statusCode": 404}},
        )

    fake = FakeNetris({("DELETE", "/api/v2/inventory/server/7"): handler})

    reply = _make_client(fake).delete(EntityKind.INVENTORY_SERVER, 7)

    assert not reply.is_success
    assert reply.is_not_found
    assert reply.message == "not found"


def test_expired_session_logs_in_again() -> None:
    answers = iter(
        [
            httpx.Response(401, json={"isSuccess": False}),
            httpx.Response(200, json={"isSuccess": True, "data": []}),
        ]
    )
    fake = FakeNetris({("GET", "/api/v2/vpc"): lambda request: next(answers)})

    assert _make_client(fake).list(EntityKind.VPC) == []
    assert fake.logins == 2
    assert fake.api_requests()[-1].headers["Cookie"] == "session=s2"


def test_failed_list_raises_with_message() -> None:
    fake = FakeNetris(
        {("GET", "/api/v2/sites"): _envelope(None, status=500, success=False, message="db down")}
    )

    with pytest.raises(NetrisAPIError, match="db down"):
        _make_client(fake).list(EntityKind.SITE)


def test_malformed_response_raises() -> None:
    fake = FakeNetris(
        {("GET", "/api/v2/sites"): lambda request: httpx.Response(502, text="<html>bad gateway")}
    )

    with pytest.raises(NetrisAPIError) as excinfo:
        _make_client(fake).list(EntityKind.SITE)

    assert excinfo.value.status_code == 502


def test_transport_error_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fake = FakeNetris({("GET", "/api/v2/sites"): handler})

    with pytest.raises(NetrisAPIError, match="connection refused"):
        _make_client(fake).list(EntityKind.SITE)


def test_rejected_login_raises() -> None:
    def transport(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"isSuccess": False})

    config = NetrisConfig(
        address=BASE_URL,
        login="admin",
        password="wrong",
        resilience=ResilienceConfig(name="netris", base_url=BASE_URL),
    )
    client = NetrisClient(
        config=config,
        client_factory=lambda resilience: ResilientClient(
            resilience, transport=httpx.MockTransport(transport)
        ),
    )

    with pytest.raises(NetrisAPIError) as excinfo:
        client.list(EntityKind.SITE)

    assert excinfo.value.status_code == 403


def test_read_only_kinds_reject_mutations() -> None:
    client = _make_client(FakeNetris({}))

    with pytest.raises(ValueError, match="does not support add"):
        client.add(EntityKind.SITE, {"name": "nyc1"})
    with pytest.raises(ValueError, match="does not support delete"):
        client.delete(EntityKind.PORT, 7)


def test_text_not_found_on_delete_keeps_status_code() -> None:
    fake = FakeNetris(
        {
            ("DELETE", "/api/v2/inventory/server/7"): lambda request: httpx.Response(
                404, text="404 page not found"
            )
        }
    )

    with pytest.raises(NetrisAPIError) as excinfo:
        _make_client(fake).delete(EntityKind.INVENTORY_SERVER, 7)

    assert excinfo.value.status_code == 404


def test_calls_from_many_threads_share_one_rate_limited_client() -> None:
    fake = FakeNetris({("GET", "/api/v2/sites"): _envelope([{"id": 1, "name": "nyc1"}])})
    built: list[ResilientClient] = []

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience, transport=httpx.MockTransport(fake))
        built.append(client)
        return client

    config = NetrisConfig(
        address=BASE_URL,
        login="admin",
        password="secret",
        resilience=ResilienceConfig(
            name="netris", base_url=BASE_URL, ratelimit=RateLimit(max_calls=100, per_seconds=1)
        ),
    )
    client = NetrisClient(config=config, client_factory=factory)

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: client.list(EntityKind.SITE), range(8)))

    assert results == [[RemoteRef(1, "nyc1")]] * 8
    assert len(built) == 1

    client.close()
    client.list(EntityKind.SITE)

    assert len(built) == 2
    client.close()
