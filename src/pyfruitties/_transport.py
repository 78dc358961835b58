"""HTTP transport for the remote feed."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from pyfruitties._constants import USER_AGENT
from pyfruitties.config import FruittiesConfig
from pyfruitties.exceptions import FetchError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, path: str) -> Any:
        ...


class HttpTransport:
    """GETs JSON documents relative to the configured base URL."""

    def __init__(self, config: FruittiesConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def url_for(self, path: str) -> str:
        return f"{self._config.base_url}/{path.lstrip('/')}"

    async def get_json(self, path: str) -> Any:
        """GET ``{base_url}/{path}`` and decode the JSON body.

        Every failure (network, timeout, non-200, invalid JSON) is raised
        as :class:`FetchError`. Cancellation is never converted.
        """
        url = self.url_for(path)
        headers = {"accept": "application/json", "user-agent": USER_AGENT}

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise FetchError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        url=url,
                    )
        except FetchError:
            raise
        except TimeoutError as exc:
            raise FetchError(f"Request to {url} timed out", url=url) from exc
        except aiohttp.ClientError as exc:
            raise FetchError(f"Request to {url} failed: {exc}", url=url) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FetchError(f"Invalid JSON from {url}: {text[:200]}", url=url) from exc
