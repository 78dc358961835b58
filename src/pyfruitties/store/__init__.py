"""Local store layer.

This package exclusively owns the durable fruit and cart tables. Every
mutation goes through :class:`LocalStore`, which notifies live queries
after each committed write.
"""

from pyfruitties.store.events import StoreTable
from pyfruitties.store.live import LiveQuery
from pyfruitties.store.local import LocalStore

__all__ = ["LiveQuery", "LocalStore", "StoreTable"]
