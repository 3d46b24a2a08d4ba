from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cooking_suggest.main import create_app
from cooking_suggest.services.storage import FallbackStore, MemoryStore, SqliteStore

from fakes import FakeLLM


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def sqlite_store(tmp_path) -> SqliteStore:
    store = SqliteStore(tmp_path / "cooking.sqlite3")
    store.init_schema()
    return store


@pytest.fixture
def client(memory_store: MemoryStore, llm: FakeLLM) -> TestClient:
    return TestClient(create_app(store=memory_store, llm_client=llm))


@pytest.fixture
def db_client(sqlite_store: SqliteStore, llm: FakeLLM) -> TestClient:
    return TestClient(create_app(store=FallbackStore(sqlite_store), llm_client=llm))
