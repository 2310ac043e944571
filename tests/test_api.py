import math

import pytest
from fastapi.testclient import TestClient

import api.main
from api.app import create_app
from api.dependencies import get_settings
from inventory_service.loading import InventoryItem, InventoryLoader, InventoryStore

WIDGET = InventoryItem(
    id=1,
    sku="SKU1",
    product_name="Widget",
    category="Tools",
    stock=10,
    price=9.99,
    last_updated="2024-01-01",
)


@pytest.fixture
def store():
    return InventoryStore()


@pytest.fixture
def client(store):
    return TestClient(create_app(store, allowed_origin="http://localhost:5173"))


@pytest.fixture
def clean_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_list_inventory_empty(client):
    response = client.get("/api/inventory")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == []


def test_list_inventory_returns_items(client, store):
    store.append(WIDGET)
    response = client.get("/api/inventory")
    assert response.status_code == 200
    assert response.json() == [
        {
            "id": 1,
            "sku": "SKU1",
            "product_name": "Widget",
            "category": "Tools",
            "stock": 10,
            "price": 9.99,
            "last_updated": "2024-01-01",
        }
    ]


def test_options_returns_empty_ok(client, store):
    assert client.options("/api/inventory").status_code == 200
    store.append(WIDGET)
    response = client.options("/api/inventory")
    assert response.status_code == 200
    assert response.content == b""


@pytest.mark.parametrize("method", ["post", "put", "delete", "patch"])
def test_other_methods_are_not_allowed(client, method):
    response = getattr(client, method)("/api/inventory")
    assert response.status_code == 405


def test_unencodable_price_is_a_server_error(client, store):
    store.append(WIDGET)
    store.append(
        InventoryItem(
            id=2,
            sku="SKU2",
            product_name="Gadget",
            category="Tools",
            stock=1,
            price=math.nan,
            last_updated="2024-01-01",
        )
    )
    response = client.get("/api/inventory")
    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to encode response"}
    assert len(store) == 2


def test_cors_allows_configured_origin(client):
    response = client.get("/api/inventory", headers={"Origin": "http://localhost:5173"})
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"

    other = client.get("/api/inventory", headers={"Origin": "http://evil.example"})
    assert "access-control-allow-origin" not in other.headers


def test_main_exits_when_source_is_missing(tmp_path, monkeypatch, clean_settings):
    monkeypatch.setenv("INVENTORY_FILE", str(tmp_path / "missing.csv"))
    served = []
    monkeypatch.setattr(api.main.uvicorn, "run", lambda app, **kwargs: served.append(app))

    with pytest.raises(SystemExit) as excinfo:
        api.main.main()

    assert excinfo.value.code == 1
    assert served == []


def test_main_loads_before_serving(tmp_path, monkeypatch, clean_settings):
    source = tmp_path / "inventory.csv"
    source.write_text(
        "id,sku,product_name,category,stock,price,last_updated\n"
        "1,SKU1,Widget,Tools,10,9.99,2024-01-01\n"
        "x,SKU2,Bad,Tools,5,1.0,2024-01-01\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("INVENTORY_FILE", str(source))
    monkeypatch.setenv("INVENTORY_PORT", "9191")
    served = []
    monkeypatch.setattr(api.main.uvicorn, "run", lambda app, **kwargs: served.append((app, kwargs)))

    api.main.main()

    assert len(served) == 1
    app, kwargs = served[0]
    assert kwargs["port"] == 9191
    response = TestClient(app).get("/api/inventory")
    assert [item["sku"] for item in response.json()] == ["SKU1"]


@pytest.mark.parametrize("origin", ["http://localhost:5173", "http://other.example"])
def test_preflight_returns_empty_ok(client, origin):
    response = client.options(
        "/api/inventory",
        headers={"Origin": origin, "Access-Control-Request-Method": "GET"},
    )
    assert response.status_code == 200
    assert response.content == b""


def test_preflight_allows_only_configured_origin(client):
    allowed = client.options(
        "/api/inventory",
        headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"},
    )
    assert allowed.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert "GET" in allowed.headers["access-control-allow-methods"]

    other = client.options(
        "/api/inventory",
        headers={"Origin": "http://other.example", "Access-Control-Request-Method": "GET"},
    )
    assert "access-control-allow-origin" not in other.headers


def test_out_of_range_rows_do_not_break_the_endpoint(tmp_path):
    source = tmp_path / "inventory.csv"
    source.write_text(
        "id,sku,product_name,category,stock,price,last_updated\n"
        "1,SKU1,Widget,Tools,10,9.99,2024-01-01\n"
        "2,SKU2,Gadget,Tools,5,1e400,2024-01-01\n"
        "3,SKU3,Gizmo,Tools,99999999999999999999,1.0,2024-01-01\n",
        encoding="utf-8",
    )
    store = InventoryStore()
    report = InventoryLoader(store).load(source)

    assert report.loaded == 1
    assert report.skipped == 2
    response = TestClient(create_app(store)).get("/api/inventory")
    assert response.status_code == 200
    assert [item["sku"] for item in response.json()] == ["SKU1"]
