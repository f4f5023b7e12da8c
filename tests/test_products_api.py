# tests/test_products_api.py
from inventory.errors import StorageUnavailable
from inventory.main import app, get_store

RICE = {"name": "Rice 1kg", "price": 60, "quantity": 10, "category": "Grocery"}


def test_create_assigns_unique_ids(client):
    ids = set()
    for i in range(5):
        r = client.post("/api/products", json={**RICE, "name": f"Rice {i}"})
        assert r.status_code == 200
        body = r.json()
        assert body["id"]
        ids.add(body["id"])
    assert len(ids) == 5


def test_list_returns_every_product(client):
    assert client.get("/api/products").json() == []
    client.post("/api/products", json=RICE)
    client.post("/api/products", json={"name": "Soap", "price": 25.5, "quantity": 2, "category": ""})
    names = [p["name"] for p in client.get("/api/products").json()]
    assert names == ["Rice 1kg", "Soap"]


def test_lifecycle_create_update_delete(client):
    # create
    r = client.post("/api/products", json=RICE)
    assert r.status_code == 200
    pid = r.json()["id"]
    listed = client.get("/api/products").json()
    assert [p["id"] for p in listed] == [pid]

    # update quantity only, other fields resent unchanged
    r2 = client.put(f"/api/products/{pid}", json={**RICE, "quantity": 3})
    assert r2.status_code == 200
    assert r2.json() == {"id": pid, "name": "Rice 1kg", "price": 60, "quantity": 3, "category": "Grocery"}
    listed = client.get("/api/products").json()
    assert listed[0]["quantity"] == 3
    assert listed[0]["quantity"] < 5

    # delete, then delete again
    r3 = client.delete(f"/api/products/{pid}")
    assert r3.status_code == 200
    assert r3.json() == {"message": "Product deleted successfully"}
    assert pid not in [p["id"] for p in client.get("/api/products").json()]
    r4 = client.delete(f"/api/products/{pid}")
    assert r4.status_code == 200
    assert r4.json() == {"message": "Product deleted successfully"}


def test_update_keeps_id_and_ignores_body_id(client):
    pid = client.post("/api/products", json=RICE).json()["id"]
    r = client.put(f"/api/products/{pid}", json={**RICE, "id": "something-else", "name": "Basmati"})
    assert r.status_code == 200
    assert r.json()["id"] == pid
    assert [p["id"] for p in client.get("/api/products").json()] == [pid]


def test_update_unknown_id_is_not_found(client):
    r = client.put("/api/products/doesnotexist", json=RICE)
    assert r.status_code == 404
    assert r.json()["code"] == "not_found"
    assert client.get("/api/products").json() == []


def test_missing_category_is_stored_empty(client):
    r = client.post("/api/products", json={"name": "Loose item", "price": 1, "quantity": 1})
    assert r.json()["category"] == ""
    r = client.post("/api/products", json={"name": "Other", "price": 1, "quantity": 1, "category": None})
    assert r.json()["category"] == ""


def test_rejects_invalid_payloads(client):
    bad = [
        {**RICE, "quantity": -1},
        {**RICE, "price": -0.5},
        {**RICE, "name": ""},
        {**RICE, "name": "   "},
        {**RICE, "price": "cheap"},
        {**RICE, "quantity": 2.5},
        {"price": 10, "quantity": 1},
    ]
    for payload in bad:
        r = client.post("/api/products", json=payload)
        assert r.status_code == 422, payload
        body = r.json()
        assert body["code"] == "validation_error"
        assert body["details"]
    assert client.get("/api/products").json() == []


def test_rejects_non_finite_price(client):
    # 1e400 overflows to inf when parsed; NaN is accepted by Python's json module
    for raw in ('{"name":"X","price":1e400,"quantity":1}', '{"name":"X","price":NaN,"quantity":1}'):
        r = client.post("/api/products", content=raw, headers={"Content-Type": "application/json"})
        assert r.status_code == 422, raw
        assert r.json()["code"] == "validation_error"
    assert client.get("/api/products").json() == []


def test_rejected_update_leaves_product_untouched(client):
    pid = client.post("/api/products", json=RICE).json()["id"]
    r = client.put(f"/api/products/{pid}", json={**RICE, "quantity": -4})
    assert r.status_code == 422
    assert client.get("/api/products").json()[0]["quantity"] == 10


class BrokenStore:
    def list_all(self):
        raise StorageUnavailable("disk on fire")

    def create(self, fields):
        raise StorageUnavailable("disk on fire")

    def update(self, product_id, fields):
        raise StorageUnavailable("disk on fire")

    def delete(self, product_id):
        raise StorageUnavailable("disk on fire")


def test_storage_failure_is_503(client):
    app.dependency_overrides[get_store] = lambda: BrokenStore()

    r = client.get("/api/products")
    assert r.status_code == 503
    assert r.json() == {"error": "disk on fire", "code": "storage_unavailable"}
    assert client.post("/api/products", json=RICE).status_code == 503
    assert client.delete("/api/products/abc").status_code == 503


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_routing_errors_use_error_envelope(client):
    r = client.patch("/api/products/abc", json=RICE)
    assert r.status_code == 405
    assert r.json() == {"error": "Method Not Allowed", "code": "method_not_allowed"}

    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found", "code": "not_found"}
