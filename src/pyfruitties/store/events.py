"""Table identifiers used for change notification."""

from __future__ import annotations

from enum import StrEnum


class StoreTable(StrEnum):
    FRUIT = "fruit"
    CART = "cartitem"


#: Tables whose contents change when a given table is written.
#: Deleting or replacing a fruit cascades into the cart.
AFFECTED_TABLES: dict[StoreTable, frozenset[StoreTable]] = {
    StoreTable.FRUIT: frozenset({StoreTable.FRUIT, StoreTable.CART}),
    StoreTable.CART: frozenset({StoreTable.CART}),
}
