"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient

from stockload import create_service
from stockload.api import create_app
from stockload.config import Settings
from stockload.ingestion import SIMPLE, SKU, ensure_schema


@pytest.fixture
def db_service(tmp_path):
    """Provide a fresh SQLite DatabaseService for each test."""
    db_path = tmp_path / "test.db"
    service = create_service(f"sqlite:///{db_path}")
    service.connect()
    yield service
    service.close()


@pytest.fixture
def simple_db(db_service):
    ensure_schema(db_service, SIMPLE)
    return db_service


@pytest.fixture
def sku_db(db_service):
    ensure_schema(db_service, SKU)
    return db_service


def _client(service, variant):
    app = create_app(Settings(database_url="unused", variant=variant), service=service)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def simple_client(db_service):
    yield from _client(db_service, SIMPLE)


@pytest.fixture
def sku_client(db_service):
    yield from _client(db_service, SKU)
