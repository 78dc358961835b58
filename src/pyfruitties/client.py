"""High-level async client: local-first fruit catalogue and cart."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

import aiohttp

from pyfruitties._api.feed import FruittiesApi, FruittiesNetworkApi
from pyfruitties._client.refresh import refresh_if_empty
from pyfruitties._transport import HttpTransport
from pyfruitties.config import FruittiesConfig
from pyfruitties.exceptions import FruittiesError
from pyfruitties.models.cart import CartEntry, CartEntryView
from pyfruitties.models.fruit import FruitItem
from pyfruitties.models.ui_state import CartUiState, HomeUiState
from pyfruitties.store.live import LiveQuery
from pyfruitties.store.local import LocalStore

_logger = logging.getLogger(__name__)


class FruittiesClient:
    """Coordinates the local store and the remote feed.

    Reads are always served from the local store. Asking for the fruit
    list schedules a detached background refresh that fills the store
    when it is empty; the returned live query picks the new rows up
    as soon as they are committed.

    Usage::

        async with FruittiesClient(config) as client:
            async for fruits in client.get_fruit_list():
                ...
            await client.add_to_cart(fruit)
    """

    def __init__(
        self,
        config: FruittiesConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        store: LocalStore | None = None,
        api: FruittiesApi | None = None,
    ) -> None:
        self._config = config or FruittiesConfig()
        self._external_session = session is not None
        self._http_session = session
        self._store = store if store is not None else LocalStore.from_config(self._config)
        self._opened_store = False
        self._external_api = api is not None
        self._api = api
        self._background_tasks: set[asyncio.Task[Any]] = set()
        self._refresh_task: asyncio.Task[int] | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FruittiesClient:
        if self._api is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._api = FruittiesNetworkApi(HttpTransport(self._config, self._http_session))
        if not self._store.is_open:
            await self._store.open()
            self._opened_store = True
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._cancel_background_tasks()
        if self._opened_store:
            await self._store.close()
            self._opened_store = False
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_api:
            self._api = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def config(self) -> FruittiesConfig:
        return self._config

    @property
    def store(self) -> LocalStore:
        return self._store

    def _require_api(self) -> FruittiesApi:
        if self._api is None or not self._store.is_open:
            raise FruittiesError("Client not initialized. Use 'async with FruittiesClient(...) as client:'")
        return self._api

    def _spawn(self, coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Task[Any]:
        """Start a detached task whose failure is logged and goes no further."""
        task = asyncio.create_task(coro, name=name)
        self._background_tasks.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task[Any]) -> None:
        self._background_tasks.discard(task)
        if task.cancelled():
            _logger.debug("Background task %s cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            _logger.error("Background task %s failed", task.get_name(), exc_info=exc)

    async def _cancel_background_tasks(self) -> None:
        pending = list(self._background_tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.wait(pending)

    # ------------------------------------------------------------------
    # Fruit catalogue
    # ------------------------------------------------------------------

    def get_fruit_list(self) -> LiveQuery[list[FruitItem]]:
        """Return the live fruit list, refreshing it in the background if empty.

        Must be called from a running event loop. The caller never waits
        on the network: a slow or failed fetch leaves the list empty or
        stale, and a later call retries. Calls made while a refresh is
        still pending share it.
        """
        api = self._require_api()
        if self._refresh_task is None or self._refresh_task.done():
            self._refresh_task = self._spawn(
                refresh_if_empty(self._store, api, self._config.page_number),
                name="pyfruitties-refresh",
            )
        return self._store.observe_fruits()

    async def refresh(self, page_number: int | None = None) -> int:
        """Fetch a feed page now and store it, even if the cache has rows.

        Unlike the background refresh this raises :class:`FetchError`.
        Returns the number of rows written.
        """
        api = self._require_api()
        page = self._config.page_number if page_number is None else page_number
        feed = await api.get_data(page)
        ids = await self._store.insert_fruits(feed.to_models())
        return len(ids)

    async def wait_for_background_tasks(self) -> None:
        """Wait until the currently scheduled refreshes have finished.

        Cancelling this wait does not cancel the refreshes.
        """
        pending = list(self._background_tasks)
        if pending:
            await asyncio.wait(pending)

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------

    def cart_data(self) -> LiveQuery[list[CartEntryView]]:
        return self._store.observe_cart_with_fruits()

    async def add_to_cart(self, fruit: FruitItem | int) -> CartEntry:
        """Add one unit of *fruit* to the cart.

        Storage failures (for example an id with no stored fruit) raise
        :class:`StorageError`; cart writes are never retried.
        """
        fruit_id = fruit.id if isinstance(fruit, FruitItem) else int(fruit)
        if fruit_id <= 0:
            raise ValueError(f"Fruit has no stored id: {fruit!r}")
        return await self._store.upsert_cart_entry(fruit_id)

    # ------------------------------------------------------------------
    # Presentation helpers
    # ------------------------------------------------------------------

    def home_ui_state(self) -> LiveQuery[HomeUiState]:
        return self.get_fruit_list().map(lambda items: HomeUiState(item_list=items))

    def cart_ui_state(self) -> LiveQuery[CartUiState]:
        return self.cart_data().map(lambda items: CartUiState(item_list=items))

    async def add_item_to_cart(self, fruit: FruitItem) -> CartEntry:
        return await self.add_to_cart(fruit)
