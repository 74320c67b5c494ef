# type: ignore
"""Shared fixtures: an in-memory SQLite store and a fully wired app per test."""
import pytest
from fastapi.testclient import TestClient

from main import create_app
from resource_service.core.config import Settings
from resource_service.core.database import create_db_engine, init_schema
from resource_service.core.dependencies import ServiceContainer

TEST_SECRET = "test-secret-key"


def make_settings(**overrides) -> Settings:
    cfg = Settings()
    cfg.JWT_KEY = TEST_SECRET
    cfg.BCRYPT_ROUNDS = 4
    cfg.AUTO_ENROLL_ON_ASSIGN = True
    for key, value in overrides.items():
        setattr(cfg, key, value)
    return cfg


@pytest.fixture
def engine():
    eng = create_db_engine("sqlite://")
    init_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def container(engine):
    return ServiceContainer(engine, make_settings())


@pytest.fixture
def client(engine):
    app = create_app(engine=engine, config=make_settings())
    with TestClient(app) as test_client:
        yield test_client
