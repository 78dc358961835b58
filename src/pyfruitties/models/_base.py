"""Base model for Fruitties feed payloads.

Every remote payload model inherits from :class:`FruittiesBaseModel`
which provides:

* ``alias_generator=to_camel`` so camelCase feed keys map
  automatically to snake_case fields.
* ``extra="ignore"`` so fields added to the feed later never break
  decoding.
* A ``model_validator(mode="wrap")`` that drops ``None`` and blank
  values so the field default is used.
* A read-only ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

import math
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    PrivateAttr,
    ValidatorFunctionWrapHandler,
    model_validator,
)
from pydantic.alias_generators import to_camel


def lenient_int(value: Any) -> int | None:
    """Coerce *value* to ``int``, returning ``None`` for anything unparsable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return int(result)


def coerce_str(value: Any) -> Any:
    """Render numbers as strings; leave everything else to pydantic."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return str(value)
    return value


LenientInt = Annotated[int | None, BeforeValidator(lenient_int)]
"""Annotated type that decodes malformed numbers to ``None`` instead of failing."""

NumericStr = Annotated[str, BeforeValidator(coerce_str)]
"""Annotated type that accepts a string or a bare number."""


class FruittiesBaseModel(BaseModel):
    """Base for remote feed models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    _raw: dict[str, Any] = PrivateAttr(default_factory=dict)

    @property
    def raw(self) -> dict[str, Any]:
        """Original payload dict."""
        return self._raw

    @model_validator(mode="wrap")
    @classmethod
    def _clean_values(cls, values: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        """Drop empty values and stash the raw payload.

        The payload is kept in a private attribute so a feed key named
        ``raw`` is just another unknown field.
        """
        if not isinstance(values, dict):
            return handler(values)
        original = dict(values)
        cleaned: dict[str, Any] = {}
        for key, value in original.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            cleaned[key] = value
        model = handler(cleaned)
        model._raw = original
        return model
