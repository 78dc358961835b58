from __future__ import annotations

import asyncio

import aiohttp
import pytest
from aiohttp import web
from aiohttp import test_utils

from pyfruitties._api.feed import FruittiesNetworkApi, page_path
from pyfruitties._transport import HttpTransport
from pyfruitties.config import FruittiesConfig
from pyfruitties.exceptions import FetchError


async def _page_zero(_request: web.Request) -> web.Response:
    return web.json_response(
        {
            "feed": [
                {"name": "Apple", "full_name": "Malus domestica", "calories": "52", "color": "red"},
                {"name": "Lemon", "fullName": "Citrus limon", "calories": 29},
            ],
            "totalPages": 3,
            "currentPage": 0,
            "etag": "unknown-field",
        }
    )


async def _server_error(_request: web.Request) -> web.Response:
    return web.Response(status=503, text="maintenance")


async def _not_json(_request: web.Request) -> web.Response:
    return web.Response(text="<html>oops</html>", content_type="text/html")


async def _array_body(_request: web.Request) -> web.Response:
    return web.json_response([1, 2, 3])


async def _slow(_request: web.Request) -> web.Response:
    await asyncio.sleep(1.0)
    return web.json_response({"feed": []})


def _app() -> web.Application:
    app = web.Application()
    app.router.add_get("/api/0.json", _page_zero)
    app.router.add_get("/api/1.json", _server_error)
    app.router.add_get("/api/2.json", _not_json)
    app.router.add_get("/api/3.json", _array_body)
    app.router.add_get("/api/4.json", _slow)
    return app


def test_page_path() -> None:
    assert page_path(0) == "0.json"
    assert page_path(12) == "12.json"
    with pytest.raises(ValueError):
        page_path(-1)


@pytest.mark.asyncio
async def test_network_api_decodes_feed_page() -> None:
    async with test_utils.TestServer(_app()) as server, aiohttp.ClientSession() as session:
        config = FruittiesConfig(base_url=str(server.make_url("/api/")))
        api = FruittiesNetworkApi(HttpTransport(config, session))

        feed = await api.get_data(0)

    assert [fruit.name for fruit in feed.feed] == ["Apple", "Lemon"]
    assert feed.feed[1].full_name == "Citrus limon"
    assert feed.feed[1].calories == "29"
    assert feed.total_pages == 3
    assert feed.current_page == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("page", "status_code", "message"),
    [
        (1, 503, "HTTP 503"),
        (2, None, "Invalid JSON"),
        (3, None, "not an object"),
        (9, 404, "HTTP 404"),
    ],
)
async def test_network_api_failures_raise_fetch_error(page: int, status_code: int | None, message: str) -> None:
    async with test_utils.TestServer(_app()) as server, aiohttp.ClientSession() as session:
        config = FruittiesConfig(base_url=str(server.make_url("/api")))
        api = FruittiesNetworkApi(HttpTransport(config, session))

        with pytest.raises(FetchError) as excinfo:
            await api.get_data(page)

    assert message in str(excinfo.value)
    assert excinfo.value.status_code == status_code


@pytest.mark.asyncio
async def test_timeout_raises_fetch_error() -> None:
    async with test_utils.TestServer(_app()) as server, aiohttp.ClientSession() as session:
        config = FruittiesConfig(base_url=str(server.make_url("/api")), request_timeout=0.1)
        transport = HttpTransport(config, session)

        with pytest.raises(FetchError, match="timed out"):
            await transport.get_json("4.json")


@pytest.mark.asyncio
async def test_connection_failure_raises_fetch_error() -> None:
    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(FruittiesConfig(base_url="http://127.0.0.1:1", request_timeout=2.0), session)

        with pytest.raises(FetchError) as excinfo:
            await transport.get_json("0.json")

    assert excinfo.value.url == "http://127.0.0.1:1/0.json"


def test_url_for_joins_without_double_slash() -> None:
    transport = HttpTransport(FruittiesConfig(base_url="https://example.test/api/"), None)  # type: ignore[arg-type]
    assert transport.url_for("/0.json") == "https://example.test/api/0.json"
