import os
import time
from typing import Any, Dict, Optional

import pytest
import requests
from fastapi.testclient import TestClient

# Defaults so importing product_api.main never reaches for a real server.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from product_api.core.config import Settings  # noqa: E402
from product_api.core.db import Database  # noqa: E402
from product_api.main import create_app  # noqa: E402

PEN = {"name": "Pen", "price": 1.5, "description": "Blue ink pen"}


@pytest.fixture
def settings() -> Settings:
    return Settings(DATABASE_URL="sqlite://", ENVIRONMENT="test", APP_VERSION="1.0.0")


@pytest.fixture
def database(settings: Settings) -> Database:
    return Database(settings.database_url_resolved)


@pytest.fixture
def client(settings: Settings, database: Database):
    app = create_app(settings, database=database)
    # entering the client runs the lifespan (tables created, db attached)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(database: Database):
    database.create_all()
    with database.session() as session:
        yield session
    database.dispose()


@pytest.fixture
def create(client: TestClient):
    def _create(**overrides: Any) -> Dict[str, Any]:
        r = client.post("/api/products", json={**PEN, **overrides})
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _create


# =========================
# Live HTTP tests (optional)
# =========================
@pytest.fixture(scope="session")
def base_url() -> str:
    """
    Base URL of a running instance, used only by tests/test_live.py.
    """
    if os.getenv("RUN_HTTP_TESTS", "0").strip() != "1":
        pytest.skip("live HTTP tests disabled (set RUN_HTTP_TESTS=1)")
    url = os.getenv("PRODUCT_API_BASE_URL", "http://localhost:5000").strip()
    return url.rstrip("/")


@pytest.fixture(scope="session")
def live_service(base_url: str) -> str:
    """Wait for /api/health before running live tests."""
    deadline = time.time() + 60.0
    last: Optional[Exception] = None
    while time.time() < deadline:
        try:
            r = requests.get(f"{base_url}/api/health", timeout=3)
            if r.status_code == 200:
                return base_url
        except requests.RequestException as e:
            last = e
        time.sleep(1.0)

    raise RuntimeError(f"product-crud-api not answering on {base_url}/api/health. Last error: {last}")
