"""sqlite-backed local store with publish-on-write live queries.

All sqlite work happens on the default executor so the event loop never
blocks on disk I/O. A single connection is shared and every statement
(or transaction) holds ``_lock``, which makes compound operations such as
:meth:`LocalStore.upsert_cart_entry` serializable.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from collections.abc import AsyncIterator, Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeVar

from pyfruitties._constants import MEMORY_DB_PATH
from pyfruitties.config import FruittiesConfig
from pyfruitties.exceptions import CartEntryNotFoundError, StorageError
from pyfruitties.models.cart import CartEntry, CartEntryView
from pyfruitties.models.fruit import FruitItem
from pyfruitties.store import schema
from pyfruitties.store.events import AFFECTED_TABLES, StoreTable
from pyfruitties.store.live import LiveQuery

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(eq=False)
class _Watcher:
    """One active live-query subscription."""

    tables: frozenset[StoreTable]
    dirty: asyncio.Event = field(default_factory=asyncio.Event)


@contextmanager
def _transaction(conn: sqlite3.Connection) -> Iterator[None]:
    conn.execute("BEGIN IMMEDIATE")
    try:
        yield
    except BaseException:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise
    conn.execute("COMMIT")


def _row_to_fruit(row: sqlite3.Row) -> FruitItem:
    return FruitItem(
        id=row["id"],
        name=row["name"],
        full_name=row["fullName"],
        calories=row["calories"],
    )


# ----------------------------------------------------------------------
# Statement helpers (run on a worker thread with the lock held)
# ----------------------------------------------------------------------


def _select_fruits(conn: sqlite3.Connection) -> list[FruitItem]:
    return [_row_to_fruit(row) for row in conn.execute(schema.SELECT_FRUITS)]


def _count_fruits(conn: sqlite3.Connection) -> int:
    row = conn.execute(schema.COUNT_FRUITS).fetchone()
    return int(row[0])


def _insert_fruits(conn: sqlite3.Connection, items: Sequence[FruitItem]) -> list[int]:
    ids: list[int] = []
    with _transaction(conn):
        for item in items:
            cursor = conn.execute(
                schema.INSERT_OR_REPLACE_FRUIT,
                # id 0 lets sqlite assign the next rowid.
                (item.id or None, item.name, item.full_name, item.calories),
            )
            ids.append(int(cursor.lastrowid or 0))
    return ids


def _delete_fruit(conn: sqlite3.Connection, fruit_id: int) -> bool:
    cursor = conn.execute(schema.DELETE_FRUIT, (fruit_id,))
    return cursor.rowcount > 0


def _select_cart_with_fruits(conn: sqlite3.Connection) -> list[CartEntryView]:
    # One statement: the join is consistent with a single point in time.
    return [
        CartEntryView(
            fruit=_row_to_fruit(row),
            cart=CartEntry(id=row["id"], count=row["count"]),
        )
        for row in conn.execute(schema.SELECT_CART_WITH_FRUITS)
    ]


def _find_cart_entry(conn: sqlite3.Connection, fruit_id: int) -> CartEntry | None:
    row = conn.execute(schema.SELECT_CART_ENTRY, (fruit_id,)).fetchone()
    if row is None:
        return None
    return CartEntry(id=row["id"], count=row["count"])


def _insert_cart_entry(conn: sqlite3.Connection, entry: CartEntry) -> bool:
    cursor = conn.execute(schema.INSERT_OR_IGNORE_CART_ENTRY, (entry.id, entry.count))
    return cursor.rowcount > 0


def _update_cart_entry(conn: sqlite3.Connection, entry: CartEntry) -> None:
    cursor = conn.execute(schema.UPDATE_CART_ENTRY, (entry.count, entry.id))
    if cursor.rowcount == 0:
        raise CartEntryNotFoundError(f"No cart entry for fruit id {entry.id}", fruit_id=entry.id)


def _upsert_cart_entry(conn: sqlite3.Connection, fruit_id: int) -> CartEntry:
    with _transaction(conn):
        existing = _find_cart_entry(conn, fruit_id)
        if existing is None:
            entry = CartEntry(id=fruit_id)
            _insert_cart_entry(conn, entry)
        else:
            entry = existing.incremented()
            _update_cart_entry(conn, entry)
    return entry


def _connect(db_path: str, wal_enabled: bool) -> sqlite3.Connection:
    if db_path != MEMORY_DB_PATH:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    # Autocommit mode; transactions are opened explicitly with BEGIN IMMEDIATE.
    conn = sqlite3.connect(db_path, check_same_thread=False, isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys=ON")
    if wal_enabled and db_path != MEMORY_DB_PATH:
        conn.execute("PRAGMA journal_mode=WAL")
    conn.executescript(schema.SCHEMA)
    return conn


class LocalStore:
    """Durable, queryable, observable store for fruits and cart entries.

    Usage::

        async with LocalStore("fruits.db") as store:
            await store.insert_fruits(items)
            async for fruits in store.observe_fruits():
                ...
    """

    def __init__(self, db_path: str | Path = MEMORY_DB_PATH, *, wal_enabled: bool = True) -> None:
        self._db_path = str(db_path)
        if self._db_path != MEMORY_DB_PATH:
            self._db_path = str(Path(self._db_path).expanduser())
        self._wal_enabled = wal_enabled
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()
        self._watchers: set[_Watcher] = set()
        self._closed = False

    @classmethod
    def from_config(cls, config: FruittiesConfig) -> LocalStore:
        return cls(config.db_path, wal_enabled=config.wal_enabled)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> None:
        """Open the database and create the tables if needed."""
        if self._conn is not None:
            return
        try:
            self._conn = await asyncio.to_thread(_connect, self._db_path, self._wal_enabled)
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open database {self._db_path}: {exc}") from exc
        self._closed = False
        _logger.debug("Opened local store at %s", self._db_path)

    async def close(self) -> None:
        """Close the database and end every live subscription."""
        self._closed = True
        for watcher in self._watchers:
            watcher.dirty.set()
        conn = self._conn
        self._conn = None
        if conn is None:
            return

        def _close() -> None:
            with self._lock:
                conn.close()

        await asyncio.to_thread(_close)
        _logger.debug("Closed local store at %s", self._db_path)

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    async def __aenter__(self) -> LocalStore:
        await self.open()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError("Local store is not open. Use 'async with LocalStore(...)' or 'await store.open()'")
        return self._conn

    async def _run(
        self,
        fn: Callable[..., T],
        *args: Any,
        writes: StoreTable | None = None,
    ) -> T:
        """Run *fn(conn, *args)* on a worker thread with the lock held.

        When *writes* is given, subscribers of the affected tables are
        notified once the statement has committed. The notification is
        queued from the worker thread so it happens even if the awaiting
        task is cancelled meanwhile.
        """
        conn = self._require_conn()
        loop = asyncio.get_running_loop()

        def _locked() -> T:
            with self._lock:
                result = fn(conn, *args)
            if writes is not None and not loop.is_closed():
                loop.call_soon_threadsafe(self._notify, AFFECTED_TABLES[writes])
            return result

        try:
            return await asyncio.to_thread(_locked)
        except sqlite3.Error as exc:
            raise StorageError(f"{fn.__name__.lstrip('_')} failed: {exc}") from exc

    def _notify(self, tables: frozenset[StoreTable]) -> None:
        for watcher in self._watchers:
            if watcher.tables & tables:
                watcher.dirty.set()

    def _observe(self, tables: frozenset[StoreTable], query: Callable[[sqlite3.Connection], T]) -> LiveQuery[T]:
        async def _subscribe() -> AsyncIterator[T]:
            self._require_conn()
            watcher = _Watcher(tables)
            self._watchers.add(watcher)
            try:
                while not self._closed:
                    # Clear before querying: a write landing mid-query
                    # leaves the flag set and triggers another emission.
                    watcher.dirty.clear()
                    try:
                        result = await self._run(query)
                    except StorageError:
                        if self._closed:
                            return
                        raise
                    yield result
                    await watcher.dirty.wait()
            finally:
                self._watchers.discard(watcher)

        return LiveQuery(_subscribe)

    # ------------------------------------------------------------------
    # Fruit table
    # ------------------------------------------------------------------

    async def insert_fruits(self, items: Sequence[FruitItem]) -> list[int]:
        """Insert *items*, replacing any row with the same id.

        Returns the row id of each item, in input order.
        """
        if not items:
            return []
        ids = await self._run(_insert_fruits, list(items), writes=StoreTable.FRUIT)
        _logger.debug("Inserted %d fruit row(s)", len(ids))
        return ids

    async def count_fruits(self) -> int:
        return await self._run(_count_fruits)

    async def get_fruits(self) -> list[FruitItem]:
        return await self._run(_select_fruits)

    async def delete_fruit(self, fruit_id: int) -> bool:
        """Delete one fruit; its cart entry is removed by cascade."""
        return await self._run(_delete_fruit, fruit_id, writes=StoreTable.FRUIT)

    def observe_fruits(self) -> LiveQuery[list[FruitItem]]:
        return self._observe(frozenset({StoreTable.FRUIT}), _select_fruits)

    # ------------------------------------------------------------------
    # Cart table
    # ------------------------------------------------------------------

    async def find_cart_entry(self, fruit_id: int) -> CartEntry | None:
        return await self._run(_find_cart_entry, fruit_id)

    async def insert_cart_entry(self, entry: CartEntry) -> bool:
        """Insert *entry*; an existing entry with the same id is left untouched.

        Returns ``True`` when a row was written.
        """
        return await self._run(_insert_cart_entry, entry, writes=StoreTable.CART)

    async def update_cart_entry(self, entry: CartEntry) -> None:
        """Overwrite the entry with the same id.

        Raises :class:`CartEntryNotFoundError` when there is none.
        """
        await self._run(_update_cart_entry, entry, writes=StoreTable.CART)

    async def upsert_cart_entry(self, fruit_id: int) -> CartEntry:
        """Add one unit of *fruit_id* to the cart in a single transaction.

        Inserts ``count=1`` when the fruit is not in the cart yet,
        otherwise increments the existing count. Returns the stored entry.
        """
        entry = await self._run(_upsert_cart_entry, fruit_id, writes=StoreTable.CART)
        _logger.debug("Cart entry %d now has count %d", entry.id, entry.count)
        return entry

    async def get_cart_with_fruits(self) -> list[CartEntryView]:
        return await self._run(_select_cart_with_fruits)

    def observe_cart_with_fruits(self) -> LiveQuery[list[CartEntryView]]:
        return self._observe(frozenset({StoreTable.FRUIT, StoreTable.CART}), _select_cart_with_fruits)
