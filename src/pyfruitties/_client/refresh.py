"""Local-first refresh policy for :class:`pyfruitties.client.FruittiesClient`.

The fruit cache is filled from the remote feed only when it is empty. A
failed fetch is "no data this round": nothing is written, nothing is
deleted, and nothing is raised to the caller.
"""

from __future__ import annotations

import logging

from pyfruitties._api.feed import FruittiesApi
from pyfruitties.exceptions import FetchError
from pyfruitties.models.fruit import FruitItem
from pyfruitties.store.local import LocalStore

_logger = logging.getLogger(__name__)


async def fetch_fruits_or_empty(api: FruittiesApi, page_number: int) -> list[FruitItem]:
    """Fetch one feed page, converting every failure into an empty result.

    ``asyncio.CancelledError`` is a ``BaseException`` and is not caught here,
    so cancellation always propagates.
    """
    try:
        feed = await api.get_data(page_number)
    except FetchError as exc:
        _logger.warning("Fruit feed refresh failed: %s", exc)
        return []
    except Exception:
        _logger.exception("Unexpected error while fetching fruit feed page %d", page_number)
        return []
    return feed.to_models()


async def refresh_if_empty(store: LocalStore, api: FruittiesApi, page_number: int) -> int:
    """Fill the fruit table from the remote feed if it has no rows.

    Returns the number of rows written.
    """
    count = await store.count_fruits()
    if count > 0:
        _logger.debug("Fruit cache has %d row(s); skipping remote refresh", count)
        return 0

    _logger.debug("Fruit cache is empty; fetching feed page %d", page_number)
    items = await fetch_fruits_or_empty(api, page_number)
    if not items:
        return 0
    ids = await store.insert_fruits(items)
    _logger.info("Cached %d fruit(s) from feed page %d", len(ids), page_number)
    return len(ids)
