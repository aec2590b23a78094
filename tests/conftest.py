# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from loopcart.catalog import CatalogProvider
from loopcart.config import Settings
from loopcart.database import CartStore
from loopcart.main import create_app


@pytest.fixture
def settings(tmp_path):
    frontend = tmp_path / "frontend"
    (frontend / "js").mkdir(parents=True)
    (frontend / "index.html").write_text("<h1>LoopCart</h1>", encoding="utf-8")
    (frontend / "js" / "main.js").write_text("console.log('main');", encoding="utf-8")
    return Settings(
        host="127.0.0.1",
        port=5000,
        log_level="INFO",
        frontend_dir=str(frontend),
        cors_origins=("*",),
    )


@pytest.fixture
def catalog():
    return CatalogProvider()


@pytest.fixture
def store(catalog):
    return CartStore(catalog)


@pytest.fixture
def app(settings, catalog, store):
    return create_app(settings=settings, catalog=catalog, cart_store=store)


@pytest.fixture
def client(app):
    return TestClient(app)
