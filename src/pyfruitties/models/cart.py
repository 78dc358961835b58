"""Shopping cart models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pyfruitties.models.fruit import FruitItem


class CartEntry(BaseModel):
    """One cart row. ``id`` is the id of the fruit it refers to.

    There is at most one entry per fruit; adding the same fruit again
    increments ``count``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int = Field(..., gt=0)
    count: int = Field(default=1, ge=1)

    def incremented(self) -> CartEntry:
        return self.model_copy(update={"count": self.count + 1})


class CartEntryView(BaseModel):
    """A cart entry joined with its fruit, read at a single point in time."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    fruit: FruitItem
    cart: CartEntry

    @property
    def count(self) -> int:
        return self.cart.count
