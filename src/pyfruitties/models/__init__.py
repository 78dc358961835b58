"""Data models for the fruit catalogue and the shopping cart."""

from pyfruitties.models._base import FruittiesBaseModel, LenientInt, NumericStr, lenient_int
from pyfruitties.models.cart import CartEntry, CartEntryView
from pyfruitties.models.fruit import FruitFeed, FruitItem, RemoteFruit
from pyfruitties.models.ui_state import CartUiState, HomeUiState

__all__ = [
    "CartEntry",
    "CartEntryView",
    "CartUiState",
    "FruitFeed",
    "FruitItem",
    "FruittiesBaseModel",
    "HomeUiState",
    "LenientInt",
    "NumericStr",
    "RemoteFruit",
    "lenient_int",
]
