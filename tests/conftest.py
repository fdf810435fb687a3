"""Shared fixtures: settings, an in-memory cache and a fake remote order store."""

import json
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import unquote

import httpx
import pytest

from mediblood.api import OrderStoreClient
from mediblood.config import Settings, get_settings
from mediblood.desk import OrderDesk
from mediblood.storage import InMemoryMedium, LocalOrderCache

BASE_URL = "http://orders.test"
ORDERS_PATH = "/api/mediblood/orders"
HEALTH_PATH = "/api/health"


class FakeOrderStore:
    """
    In-process stand-in for the remote order store, served through httpx.MockTransport.

    ``failure`` switches every order endpoint to a failure mode: ``"network"``,
    ``"timeout"``, an HTTP status code, or ``"garbage"`` for an unparseable body.
    """

    def __init__(self):
        self.orders: Dict[str, Dict[str, Any]] = {}
        self.healthy: Union[bool, str] = True
        self.failure: Optional[Union[str, int]] = None
        self.list_status: Optional[int] = None
        self.requests: List[Tuple[str, str]] = []
        self._counter = 0

    def seed(self, record: Dict[str, Any]) -> None:
        self.orders[record["id"]] = record

    def _fail(self, request: httpx.Request) -> Optional[httpx.Response]:
        if self.failure == "network":
            raise httpx.ConnectError("connection refused", request=request)
        if self.failure == "timeout":
            raise httpx.ReadTimeout("timed out", request=request)
        if self.failure == "garbage":
            return httpx.Response(200, text="<html>proxy error</html>")
        if isinstance(self.failure, int):
            return httpx.Response(self.failure, json={"message": f"Upstream failed with {self.failure}"})
        return None

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append((request.method, path))

        if path == HEALTH_PATH:
            if self.healthy == "timeout":
                raise httpx.ConnectTimeout("timed out", request=request)
            if not self.healthy:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={"ok": True})

        failed = self._fail(request)
        if failed is not None:
            return failed

        if path == ORDERS_PATH and request.method == "POST":
            draft = json.loads(request.content)["order"]
            self._counter += 1
            order_id = f"R-{self._counter}"
            record = dict(draft, id=order_id, createdAt=f"2025-01-01T00:00:0{self._counter % 10}.000Z")
            record["status"] = "Placed" if draft.get("kind") == "commodity" else "Requested"
            if draft.get("items"):
                record["total"] = round(sum(i["price"] * i["qty"] for i in draft["items"]), 2)
            self.orders[order_id] = record
            return httpx.Response(201, json={"orderId": order_id})

        if path == ORDERS_PATH and request.method == "GET":
            if self.list_status is not None:
                return httpx.Response(self.list_status, json={"message": "Forbidden"})
            return httpx.Response(200, json={"orders": list(self.orders.values())})

        if path.startswith(ORDERS_PATH + "/"):
            order_id = unquote(path[len(ORDERS_PATH) + 1:])
            if order_id in self.orders:
                return httpx.Response(200, json={"order": self.orders[order_id]})
            return httpx.Response(404, json={"message": "Order not found."})

        return httpx.Response(404, json={"message": "No such endpoint"})

    def calls(self, method: str, path: str) -> int:
        return sum(1 for m, p in self.requests if m == method and p == path)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Keep cached settings and environment from leaking between tests."""
    monkeypatch.setenv("MEDIBLOOD_STORAGE_PATH", str(tmp_path / "storage.json"))
    monkeypatch.setenv("MEDIBLOOD_LOG_FILE", str(tmp_path / "mediblood.log"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        api_base_url=BASE_URL,
        storage_path=str(tmp_path / "storage.json"),
    )


@pytest.fixture
def order_store() -> FakeOrderStore:
    return FakeOrderStore()


@pytest.fixture
def client(order_store, settings) -> OrderStoreClient:
    return OrderStoreClient(settings=settings, transport=httpx.MockTransport(order_store.handler))


@pytest.fixture
def cache() -> LocalOrderCache:
    return LocalOrderCache(InMemoryMedium())


@pytest.fixture
def start_desk(client, cache, settings):
    """Coroutine factory building a probed desk on the fake store and in-memory cache."""

    async def _start() -> OrderDesk:
        return await OrderDesk.start(settings=settings, client=client, cache=cache)

    return _start


@pytest.fixture
def medicine_draft_data() -> Dict[str, Any]:
    return {
        "kind": "commodity",
        "contact": {"name": "Asha", "phone": "98450 00000", "address": "12 MG Road", "city": "Pune"},
        "items": [
            {"sku": "A", "name": "Paracetamol", "price": 2.50, "qty": 2},
            {"sku": "B", "name": "ORS Sachet", "price": 1.00, "qty": 1},
        ],
        "note": "Leave at the gate",
    }


@pytest.fixture
def blood_draft_data() -> Dict[str, Any]:
    return {
        "kind": "biological-request",
        "contact": {"name": "Ravi", "phone": "98860 00000", "city": "Pune"},
        "request": {"bloodType": "O-", "units": "2", "urgency": "High", "hospital": "City Hospital"},
    }
