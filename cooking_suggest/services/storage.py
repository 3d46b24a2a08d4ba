# cooking_suggest/services/storage.py
from __future__ import annotations

import json
import logging
import sqlite3
import threading
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Protocol

from cooking_suggest.models.recipe import Recipe, RecipeCreate
from cooking_suggest.models.user import UserRecord

log = logging.getLogger("cooking_suggest.storage")

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  username TEXT NOT NULL UNIQUE,
  email TEXT NOT NULL UNIQUE,
  password_hash TEXT NOT NULL,
  created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS recipes (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  title TEXT NOT NULL,
  description TEXT NOT NULL DEFAULT '',
  ingredients_json TEXT NOT NULL DEFAULT '[]',
  instructions TEXT NOT NULL DEFAULT '',
  cooking_time TEXT NOT NULL,
  servings TEXT NOT NULL,
  difficulty TEXT NOT NULL,
  user_id INTEGER REFERENCES users(id),
  created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_recipes_created_at ON recipes (created_at);
CREATE INDEX IF NOT EXISTS idx_recipes_user_id ON recipes (user_id);
"""


class StorageError(Exception):
    pass


class StorageUnavailable(StorageError):
    pass


class DuplicateUserError(StorageError):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _newest_first(recipes: List[Recipe]) -> List[Recipe]:
    return sorted(recipes, key=lambda r: (_as_utc(r.created_at), r.id), reverse=True)


class RecipeStore(Protocol):
    durable: bool

    def insert_recipe(self, draft: RecipeCreate) -> Recipe: ...

    def list_recent(self, limit: int) -> List[Recipe]: ...

    def list_by_owner(self, user_id: int) -> List[Recipe]: ...

    def insert_user(self, *, username: str, email: str, password_hash: str) -> UserRecord: ...

    def find_user(self, *, email: Optional[str] = None, username: Optional[str] = None) -> Optional[UserRecord]: ...

    def ping(self) -> None: ...


class SqliteStore:
    """
    Durable store on a single sqlite file. A connection is opened per
    operation and closed again.
    """

    durable = True

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.path), timeout=5)
        conn.row_factory = sqlite3.Row
        return conn

    def init_schema(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with closing(self._connect()) as conn:
                conn.executescript(SCHEMA)
                conn.commit()
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Failed to open database {self.path}: {e}") from e

    def ping(self) -> None:
        try:
            with closing(self._connect()) as conn:
                conn.execute("SELECT 1;").fetchone()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e

    @staticmethod
    def _row_to_recipe(row: sqlite3.Row) -> Recipe:
        try:
            ingredients = json.loads(row["ingredients_json"] or "[]")
        except ValueError:
            ingredients = []
        return Recipe(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            ingredients=ingredients,
            instructions=row["instructions"],
            cooking_time=row["cooking_time"],
            servings=row["servings"],
            difficulty=row["difficulty"],
            user_id=row["user_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> UserRecord:
        return UserRecord(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def insert_recipe(self, draft: RecipeCreate) -> Recipe:
        created_at = _as_utc(draft.created_at)
        try:
            with closing(self._connect()) as conn:
                cur = conn.execute(
                    """
                    INSERT INTO recipes
                      (title, description, ingredients_json, instructions,
                       cooking_time, servings, difficulty, user_id, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        draft.title,
                        draft.description,
                        json.dumps(draft.ingredients, ensure_ascii=False),
                        draft.instructions,
                        draft.cooking_time,
                        draft.servings,
                        draft.difficulty,
                        draft.user_id,
                        created_at.isoformat(),
                    ),
                )
                conn.commit()
                recipe_id = int(cur.lastrowid)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to save recipe: {e}") from e

        return Recipe(id=recipe_id, **{**draft.model_dump(), "created_at": created_at})

    def list_recent(self, limit: int) -> List[Recipe]:
        return self._select_recipes(
            "SELECT * FROM recipes ORDER BY created_at DESC, id DESC LIMIT ?",
            (int(limit),),
        )

    def list_by_owner(self, user_id: int) -> List[Recipe]:
        return self._select_recipes(
            "SELECT * FROM recipes WHERE user_id = ? ORDER BY created_at DESC, id DESC",
            (int(user_id),),
        )

    def _select_recipes(self, sql: str, params: tuple[Any, ...]) -> List[Recipe]:
        try:
            with closing(self._connect()) as conn:
                rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to fetch recipes: {e}") from e
        return [self._row_to_recipe(r) for r in rows]

    def insert_user(self, *, username: str, email: str, password_hash: str) -> UserRecord:
        created_at = _now()
        try:
            with closing(self._connect()) as conn:
                cur = conn.execute(
                    "INSERT INTO users (username, email, password_hash, created_at) VALUES (?, ?, ?, ?)",
                    (username, email, password_hash, created_at.isoformat()),
                )
                conn.commit()
                user_id = int(cur.lastrowid)
        except sqlite3.IntegrityError as e:
            raise DuplicateUserError("User already exists") from e
        except sqlite3.Error as e:
            raise StorageError(f"Failed to create user: {e}") from e

        return UserRecord(
            id=user_id,
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=created_at,
        )

    def find_user(self, *, email: Optional[str] = None, username: Optional[str] = None) -> Optional[UserRecord]:
        clauses: List[str] = []
        params: List[str] = []
        if email is not None:
            clauses.append("email = ?")
            params.append(email)
        if username is not None:
            clauses.append("username = ?")
            params.append(username)
        if not clauses:
            return None

        try:
            with closing(self._connect()) as conn:
                row = conn.execute(
                    f"SELECT * FROM users WHERE {' OR '.join(clauses)} LIMIT 1",
                    tuple(params),
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to look up user: {e}") from e
        return self._row_to_user(row) if row else None


class MemoryStore:
    """
    Process-local recipe list used when no database is reachable.
    A negative `id_step` numbers records -1, -2, ... so they never clash
    with sqlite rowids.
    """

    durable = False

    def __init__(self, id_step: int = 1) -> None:
        self._recipes: List[Recipe] = []
        self._id_step = id_step
        self._next_id = id_step
        self._lock = threading.Lock()

    def ping(self) -> None:
        return None

    def insert_recipe(self, draft: RecipeCreate) -> Recipe:
        with self._lock:
            recipe = Recipe(id=self._next_id, **{**draft.model_dump(), "created_at": _as_utc(draft.created_at)})
            self._next_id += self._id_step
            self._recipes.append(recipe)
        return recipe

    def list_recent(self, limit: int) -> List[Recipe]:
        return _newest_first(list(self._recipes))[: max(int(limit), 0)]

    def list_by_owner(self, user_id: int) -> List[Recipe]:
        return _newest_first([r for r in self._recipes if r.user_id == user_id])

    def insert_user(self, *, username: str, email: str, password_hash: str) -> UserRecord:
        raise StorageUnavailable("Database not available")

    def find_user(self, *, email: Optional[str] = None, username: Optional[str] = None) -> Optional[UserRecord]:
        raise StorageUnavailable("Database not available")


class FallbackStore:
    """
    Durable primary with a process-local fallback. Recipe writes that fail on
    the primary land in the fallback; listings merge both.
    """

    def __init__(self, primary: RecipeStore, fallback: Optional[MemoryStore] = None):
        self.primary = primary
        self.fallback = fallback if fallback is not None else MemoryStore(id_step=-1)

    @property
    def durable(self) -> bool:
        return self.primary.durable

    def ping(self) -> None:
        self.primary.ping()

    def insert_recipe(self, draft: RecipeCreate) -> Recipe:
        try:
            return self.primary.insert_recipe(draft)
        except StorageError as e:
            log.warning("recipe saved to in-memory fallback", extra={"error": str(e)})
            return self.fallback.insert_recipe(draft)

    def list_recent(self, limit: int) -> List[Recipe]:
        try:
            primary = self.primary.list_recent(limit)
        except StorageError as e:
            log.warning("listing from in-memory fallback only", extra={"error": str(e)})
            primary = []
        return _newest_first(primary + self.fallback.list_recent(limit))[: max(int(limit), 0)]

    def list_by_owner(self, user_id: int) -> List[Recipe]:
        try:
            primary = self.primary.list_by_owner(user_id)
        except StorageError as e:
            log.warning("listing from in-memory fallback only", extra={"error": str(e)})
            primary = []
        return _newest_first(primary + self.fallback.list_by_owner(user_id))

    def insert_user(self, *, username: str, email: str, password_hash: str) -> UserRecord:
        return self.primary.insert_user(username=username, email=email, password_hash=password_hash)

    def find_user(self, *, email: Optional[str] = None, username: Optional[str] = None) -> Optional[UserRecord]:
        return self.primary.find_user(email=email, username=username)


def open_store(path: Path | str) -> RecipeStore:
    store = SqliteStore(path)
    try:
        store.init_schema()
    except StorageError as e:
        log.warning("database not available, using in-memory storage", extra={"error": str(e)})
        return MemoryStore()
    log.info("database connected", extra={"path": str(store.path)})
    return FallbackStore(store)
