import asyncpg
import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.db import Database
from feedback.service import FeedbackService

from fakes import FakePool


@pytest.fixture()
def pool():
    return FakePool()


@pytest.fixture()
def database(pool):
    return Database(pool)


@pytest.fixture()
def service(database):
    return FeedbackService(database)


@pytest.fixture()
def create_pool_calls(monkeypatch, pool):
    # Route Database.open() to the in-memory pool instead of Postgres.
    calls = []

    async def fake_create_pool(**kwargs):
        calls.append(kwargs)
        return pool

    monkeypatch.setattr(asyncpg, "create_pool", fake_create_pool)
    return calls


@pytest.fixture()
def client(create_pool_calls):
    from main import create_app

    app = create_app(Settings(db_name="feedback_test"))
    with TestClient(app) as test_client:
        yield test_client
