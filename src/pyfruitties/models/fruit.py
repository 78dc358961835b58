"""Fruit models: the stored catalogue row and the remote feed payload."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from pyfruitties.models._base import FruittiesBaseModel, LenientInt, NumericStr, lenient_int

_logger = logging.getLogger(__name__)


class FruitItem(BaseModel):
    """A fruit as stored in the local catalogue.

    ``id == 0`` means the row has not been stored yet; the database
    assigns the id on insert.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int = Field(default=0, ge=0)
    name: str
    full_name: str
    calories: str


class RemoteFruit(FruittiesBaseModel):
    """One entry of the remote ``feed`` array."""

    id: int = 0
    name: str
    full_name: str = Field(validation_alias=AliasChoices("full_name", "fullName"))
    calories: NumericStr = ""

    @field_validator("id", mode="before")
    @classmethod
    def _lenient_id(cls, value: Any) -> int:
        parsed = lenient_int(value)
        if parsed is None or parsed < 0:
            return 0
        return parsed

    def to_model(self) -> FruitItem:
        """Convert to the stored representation (field renames only)."""
        return FruitItem(
            id=self.id,
            name=self.name,
            full_name=self.full_name,
            calories=self.calories,
        )


class FruitFeed(FruittiesBaseModel):
    """A page of the remote feed.

    Entries that fail validation are dropped rather than failing the whole
    page. The paging fields are informational and decode to ``None`` when
    absent or malformed.
    """

    feed: list[RemoteFruit] = Field(default_factory=list)
    total_pages: LenientInt = None
    current_page: LenientInt = None
    skip: LenientInt = None
    limit: LenientInt = None

    @field_validator("feed", mode="before")
    @classmethod
    def _drop_malformed_entries(cls, value: Any) -> list[RemoteFruit]:
        if not isinstance(value, list):
            _logger.debug("Ignoring non-list feed field: %r", type(value).__name__)
            return []
        entries: list[RemoteFruit] = []
        for index, item in enumerate(value):
            if isinstance(item, RemoteFruit):
                entries.append(item)
                continue
            try:
                entries.append(RemoteFruit.model_validate(item))
            except ValidationError:
                _logger.debug("Dropping malformed feed entry #%d", index, exc_info=True)
        return entries

    def to_models(self) -> list[FruitItem]:
        return [entry.to_model() for entry in self.feed]
