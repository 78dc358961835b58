"""Fruit feed endpoint: ``GET <base-url>/<pageNumber>.json``."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from pydantic import ValidationError

from pyfruitties._constants import DEFAULT_PAGE_NUMBER
from pyfruitties._transport import Transport
from pyfruitties.exceptions import FetchError
from pyfruitties.models.fruit import FruitFeed

_logger = logging.getLogger(__name__)


class FruittiesApi(Protocol):
    """Remote source of fruit pages."""

    async def get_data(self, page_number: int = DEFAULT_PAGE_NUMBER) -> FruitFeed:
        ...


def page_path(page_number: int) -> str:
    if page_number < 0:
        raise ValueError(f"page_number must be >= 0, got {page_number}")
    return f"{page_number}.json"


def parse_feed(payload: Any, *, url: str = "") -> FruitFeed:
    """Decode a feed page.

    Raises
    ------
    FetchError
        If the body is not a JSON object or cannot be decoded at all.
        Malformed entries and unknown keys do not raise.
    """
    if not isinstance(payload, dict):
        raise FetchError(f"Feed body is not an object: {type(payload).__name__}", url=url)
    try:
        feed = FruitFeed.model_validate(payload)
    except ValidationError as exc:
        raise FetchError(f"Undecodable feed body: {exc}", url=url) from exc
    return feed


class FruittiesNetworkApi:
    """:class:`FruittiesApi` backed by an HTTP :class:`Transport`."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def get_data(self, page_number: int = DEFAULT_PAGE_NUMBER) -> FruitFeed:
        path = page_path(page_number)
        payload = await self._transport.get_json(path)
        feed = parse_feed(payload, url=path)
        _logger.debug("Feed page %d decoded with %d entr(ies)", page_number, len(feed.feed))
        return feed
