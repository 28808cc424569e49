# Smoke tests against a running instance; skipped unless RUN_HTTP_TESTS=1.
import requests


def test_health(live_service: str):
    r = requests.get(f"{live_service}/api/health", timeout=10)
    assert r.status_code == 200, r.text
    assert r.json()["success"] is True


def test_openapi_exposes_product_routes(live_service: str):
    r = requests.get(f"{live_service}/openapi.json", timeout=10)
    assert r.status_code == 200, r.text
    paths = r.json().get("paths", {})
    assert "/api/products" in paths, f"available paths: {sorted(paths)}"
    assert "/api/products/{product_id}" in paths


def test_product_round_trip(live_service: str):
    payload = {"name": "Pen", "price": 1.5, "description": "Blue ink pen"}
    r = requests.post(f"{live_service}/api/products", json=payload, timeout=10)
    assert r.status_code == 201, r.text
    product_id = r.json()["data"]["id"]

    r = requests.put(f"{live_service}/api/products/{product_id}", json={"price": 2.0}, timeout=10)
    assert r.status_code == 200, r.text
    assert r.json()["data"]["name"] == "Pen"

    assert requests.delete(f"{live_service}/api/products/{product_id}", timeout=10).status_code == 200
    assert requests.get(f"{live_service}/api/products/{product_id}", timeout=10).status_code == 404
