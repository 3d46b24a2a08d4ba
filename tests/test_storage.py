from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from cooking_suggest.models.recipe import RecipeCreate
from cooking_suggest.services.storage import (
    DuplicateUserError,
    FallbackStore,
    MemoryStore,
    SqliteStore,
    StorageError,
    StorageUnavailable,
    open_store,
)

BASE = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def _draft(title: str, minutes: int = 0, user_id=None) -> RecipeCreate:
    return RecipeCreate(
        title=title,
        ingredients=["egg"],
        instructions="Cook.",
        cooking_time="10 minutes",
        servings="2",
        difficulty="Easy",
        user_id=user_id,
        created_at=BASE + timedelta(minutes=minutes),
    )


class BrokenStore:
    """Durable store whose driver fails on every call."""

    durable = True

    def ping(self):
        raise StorageError("disk I/O error")

    def insert_recipe(self, draft):
        raise StorageError("disk I/O error")

    def list_recent(self, limit):
        raise StorageError("disk I/O error")

    def list_by_owner(self, user_id):
        raise StorageError("disk I/O error")

    def insert_user(self, *, username, email, password_hash):
        raise StorageError("disk I/O error")

    def find_user(self, *, email=None, username=None):
        raise StorageError("disk I/O error")


@pytest.mark.parametrize("store_fixture", ["memory_store", "sqlite_store"])
def test_recent_listing_is_newest_first_and_bounded(request: pytest.FixtureRequest, store_fixture: str):
    store = request.getfixturevalue(store_fixture)
    store.insert_recipe(_draft("middle", 5))
    store.insert_recipe(_draft("oldest", 0))
    store.insert_recipe(_draft("newest", 10))

    assert [r.title for r in store.list_recent(10)] == ["newest", "middle", "oldest"]
    assert [r.title for r in store.list_recent(2)] == ["newest", "middle"]


@pytest.mark.parametrize("store_fixture", ["memory_store", "sqlite_store"])
def test_owner_listing_only_returns_owned_records(request: pytest.FixtureRequest, store_fixture: str):
    store = request.getfixturevalue(store_fixture)
    store.insert_recipe(_draft("mine-old", 0, user_id=1))
    store.insert_recipe(_draft("theirs", 1, user_id=2))
    store.insert_recipe(_draft("anonymous", 2))
    store.insert_recipe(_draft("mine-new", 3, user_id=1))

    assert [r.title for r in store.list_by_owner(1)] == ["mine-new", "mine-old"]
    assert store.list_by_owner(3) == []


def test_sqlite_round_trips_recipe_fields(sqlite_store: SqliteStore):
    saved = sqlite_store.insert_recipe(_draft("Toast", user_id=4))

    loaded = sqlite_store.list_recent(1)[0]
    assert loaded == saved
    assert loaded.ingredients == ["egg"]
    assert loaded.created_at == BASE


def test_sqlite_users_are_unique(sqlite_store: SqliteStore):
    user = sqlite_store.insert_user(username="ana", email="ana@example.com", password_hash="x")

    assert sqlite_store.find_user(email="ana@example.com") == user
    assert sqlite_store.find_user(username="ana") == user
    assert sqlite_store.find_user(email="nobody@example.com", username="nobody") is None

    with pytest.raises(DuplicateUserError):
        sqlite_store.insert_user(username="ana", email="other@example.com", password_hash="y")
    with pytest.raises(DuplicateUserError):
        sqlite_store.insert_user(username="other", email="ana@example.com", password_hash="y")


def test_memory_store_has_no_users(memory_store: MemoryStore):
    with pytest.raises(StorageUnavailable):
        memory_store.find_user(email="ana@example.com")
    with pytest.raises(StorageUnavailable):
        memory_store.insert_user(username="ana", email="ana@example.com", password_hash="x")


def test_fallback_accepts_recipes_when_primary_fails():
    store = FallbackStore(BrokenStore())

    saved = store.insert_recipe(_draft("kept anyway"))

    assert saved.title == "kept anyway"
    assert store.list_recent(10) == [saved]
    assert store.list_by_owner(1) == []


def test_fallback_merges_both_sources(sqlite_store: SqliteStore):
    store = FallbackStore(sqlite_store)
    store.insert_recipe(_draft("durable", 0))
    store.fallback.insert_recipe(_draft("transient", 5))

    assert [r.title for r in store.list_recent(10)] == ["transient", "durable"]
    assert [r.title for r in store.list_recent(1)] == ["transient"]


class LockedAfterFirstInsert:
    """Sqlite store whose recipe inserts fail once the first one has landed."""

    durable = True

    def __init__(self, inner: SqliteStore):
        self.inner = inner
        self.inserts = 0

    def insert_recipe(self, draft):
        self.inserts += 1
        if self.inserts > 1:
            raise StorageError("database is locked")
        return self.inner.insert_recipe(draft)

    def list_recent(self, limit):
        return self.inner.list_recent(limit)

    def list_by_owner(self, user_id):
        return self.inner.list_by_owner(user_id)


def test_fallback_ids_never_collide_with_database_ids(sqlite_store: SqliteStore):
    store = FallbackStore(LockedAfterFirstInsert(sqlite_store))

    saved = store.insert_recipe(_draft("durable", 0, user_id=1))
    spilled = store.insert_recipe(_draft("transient", 5, user_id=1))

    assert saved.id > 0
    assert spilled.id < 0
    recent = store.list_recent(10)
    assert [r.title for r in recent] == ["transient", "durable"]
    assert len({r.id for r in recent}) == 2
    assert len({r.id for r in store.list_by_owner(1)}) == 2


def test_fallback_user_errors_propagate():
    store = FallbackStore(BrokenStore())

    with pytest.raises(StorageError):
        store.find_user(email="ana@example.com")


def test_open_store_uses_sqlite_when_possible(tmp_path):
    store = open_store(tmp_path / "nested" / "cooking.sqlite3")

    assert isinstance(store, FallbackStore)
    assert store.durable is True
    assert (tmp_path / "nested" / "cooking.sqlite3").exists()


def test_open_store_falls_back_to_memory(tmp_path):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("x")

    store = open_store(blocker / "cooking.sqlite3")

    assert isinstance(store, MemoryStore)
    assert store.durable is False
