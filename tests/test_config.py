import pytest
from sqlalchemy.pool import StaticPool

from product_api.core.config import Settings
from product_api.core.db import Database


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("DATABASE_URL", "STORAGE_URI", "PORT", "CORS_ALLOWED_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = Settings(_env_file=None)
    assert s.port == 5000
    assert s.cors_origins_list() == ["*"]
    assert s.database_url_resolved == "postgresql+psycopg://products_app:@localhost:5432/products_db"


def test_database_url_from_pieces(clean_env):
    clean_env.setenv("DB_HOST", "db")
    clean_env.setenv("DB_PASSWORD", "s3cret")
    clean_env.setenv("DB_NAME", "shop")
    s = Settings(_env_file=None)
    assert s.database_url_resolved == "postgresql+psycopg://products_app:s3cret@db:5432/shop"


def test_storage_uri_alias(clean_env):
    clean_env.setenv("STORAGE_URI", "sqlite:///./products.db")
    assert Settings(_env_file=None).database_url_resolved == "sqlite:///./products.db"


def test_port_override(clean_env):
    clean_env.setenv("PORT", "8080")
    assert Settings(_env_file=None).port == 8080


def test_cors_csv(clean_env):
    clean_env.setenv("CORS_ALLOWED_ORIGINS", "http://a.test, http://b.test ,")
    assert Settings(_env_file=None).cors_origins_list() == ["http://a.test", "http://b.test"]


def test_memory_database_uses_single_connection():
    db = Database("sqlite://")
    try:
        assert isinstance(db.engine.pool, StaticPool)
    finally:
        db.dispose()


def test_file_database_uses_default_pool(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'products.db'}")
    try:
        assert not isinstance(db.engine.pool, StaticPool)
    finally:
        db.dispose()
