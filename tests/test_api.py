import asyncio

import pytest
from fastapi.testclient import TestClient

from agents.order_store import order_item_store, sale_summary_store
from api.deps import get_item_store, get_summary_store
from api.server import app

HEADER = ",".join(f"h{i}" for i in range(25))


def order_line(txn, order_id, state, country="United States", total="10.00"):
    fields = [""] * 25
    fields[0], fields[1], fields[3] = "3/1/26", "Mug", "1"
    fields[11], fields[13] = total, txn
    fields[21], fields[23], fields[24] = state, country, order_id
    return ",".join(fields)


@pytest.fixture
def client(tmp_path):
    items = order_item_store(tmp_path / "orders.json")
    summaries = sale_summary_store(tmp_path / "summaries.json")
    app.dependency_overrides[get_item_store] = lambda: items
    app.dependency_overrides[get_summary_store] = lambda: summaries
    yield TestClient(app)
    app.dependency_overrides.clear()


def upload(client, text, name="orders.csv", kind="items"):
    return client.post(
        "/api/orders/upload",
        params={"kind": kind},
        files={"file": (name, text.encode("utf-8"), "text/csv")},
    )


def test_upload_twice_then_regions(client):
    text = "\n".join([HEADER, order_line("1", "A", "CA"), order_line("2", "B", "NY"), order_line("3", "C", "", country="Canada")])
    first = upload(client, text).json()
    assert (first["added"], first["duplicates"], first["total"]) == (3, 0, 3)
    second = upload(client, text).json()
    assert (second["added"], second["duplicates"]) == (0, 3)

    regions = client.get("/api/orders/regions").json()
    assert regions["total_orders"] == 3
    assert {s["key"] for s in regions["by_state"]} == {"CA", "NY"}
    assert regions["available_years"] == ["2026"]


def test_upload_merges_outside_the_event_loop(client, tmp_path):
    store = order_item_store(tmp_path / "threaded.json")
    original = store.merge
    calls = []

    def merge(records):
        try:
            asyncio.get_running_loop()
            calls.append("event loop")
        except RuntimeError:
            calls.append("worker thread")
        return original(records)

    store.merge = merge
    app.dependency_overrides[get_item_store] = lambda: store
    resp = upload(client, HEADER + "\n" + order_line("1", "A", "CA"))
    assert resp.status_code == 200
    assert resp.json()["total"] == 1
    assert calls == ["worker thread"]


def test_upload_nothing_to_import(client):
    resp = upload(client, HEADER + "\n" + ",,,\n")
    assert resp.status_code == 422
    assert "Nothing to import" in resp.json()["detail"]


def test_upload_rejects_non_csv(client):
    assert upload(client, "x", name="orders.xlsx").status_code == 400


def test_unknown_kind(client):
    assert client.delete("/api/orders", params={"kind": "bogus"}).status_code == 400


def test_clear(client):
    upload(client, HEADER + "\n" + order_line("1", "A", "CA"))
    assert client.delete("/api/orders").json()["persisted"] is True
    assert client.get("/api/orders/regions").json()["total_orders"] == 0


def test_forecast_endpoint():
    payload = {
        "as_of": "2026-03-31",
        "components": [
            {"id": "C1", "current_stock": 100, "lead_time_days": 10, "safety_stock": 20, "unit_cost": 1},
            {"id": "C2", "current_stock": 0},
        ],
        "consumption": [{"component_id": "C1", "date": "2026-03-31", "units_consumed": 300}],
    }
    body = TestClient(app).post("/api/forecast", json=payload).json()
    assert body["count"] == 2
    c1, c2 = body["rows"]
    assert c1["risk_status"] == "Critical"
    assert c1["predicted_reorder_date"] == "2026-03-31"
    assert c2["days_until_reorder"] is None
    assert c2["risk_status"] == "OK"
    assert body["summary"]["critical_count"] == 1


def test_listing_parse_endpoint():
    fields = [""] * 24
    fields[0], fields[5] = "Vase", '"a,b"'
    text = "TITLE\n" + ",".join(fields) + "\n"
    resp = TestClient(app).post(
        "/api/listings/parse", files={"file": ("listings.csv", text.encode("utf-8"), "text/csv")}
    )
    body = resp.json()
    assert body["count"] == 1
    assert body["listings"][0]["tags"] == ["a", "b"]
