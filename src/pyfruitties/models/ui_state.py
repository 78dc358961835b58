"""Snapshot containers handed to a presentation layer."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pyfruitties.models.cart import CartEntryView
from pyfruitties.models.fruit import FruitItem


class HomeUiState(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_list: list[FruitItem] = Field(default_factory=list)


class CartUiState(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_list: list[CartEntryView] = Field(default_factory=list)

    @property
    def total_count(self) -> int:
        return sum(view.count for view in self.item_list)
