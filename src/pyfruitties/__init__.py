"""pyfruitties - Async offline-first fruit catalogue and shopping cart."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyfruitties")
except PackageNotFoundError:
    __version__ = "0+local"
from pyfruitties._api.feed import FruittiesApi, FruittiesNetworkApi
from pyfruitties.client import FruittiesClient
from pyfruitties.config import FruittiesConfig
from pyfruitties.exceptions import (
    CartEntryNotFoundError,
    FetchError,
    FruittiesConfigError,
    FruittiesError,
    StorageError,
)
from pyfruitties.models import (
    CartEntry,
    CartEntryView,
    CartUiState,
    FruitFeed,
    FruitItem,
    HomeUiState,
    RemoteFruit,
)
from pyfruitties.store import LiveQuery, LocalStore

__all__ = [
    "__version__",
    "CartEntry",
    "CartEntryNotFoundError",
    "CartEntryView",
    "CartUiState",
    "FetchError",
    "FruitFeed",
    "FruitItem",
    "FruittiesApi",
    "FruittiesClient",
    "FruittiesConfig",
    "FruittiesConfigError",
    "FruittiesError",
    "FruittiesNetworkApi",
    "HomeUiState",
    "LiveQuery",
    "LocalStore",
    "RemoteFruit",
    "StorageError",
]
