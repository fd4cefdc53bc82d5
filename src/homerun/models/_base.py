"""Base model and shared coercions for homerun models.

Every API-facing model inherits from :class:`HomeRunBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase API keys (``staticDuration``,
  ``distanceMeters``) map automatically to snake_case fields.
* A ``model_validator(mode="before")`` that drops empty strings and
  ``None`` so the field default is used.
* Frozen instances; every state change produces a new object.
"""

from __future__ import annotations

import math
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


def parse_duration_seconds(value: Any) -> int | None:
    """Convert a Routes API duration (``"1532s"``, ``"1532"`` or a number) to whole seconds.

    Returns ``None`` when the value is ``None`` or not numeric.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return None
        return int(value)
    text = str(value).strip()
    if text.endswith("s"):
        text = text[:-1]
    if not text:
        return None
    try:
        return int(float(text))
    except ValueError:
        return None


DurationSeconds = Annotated[int | None, BeforeValidator(parse_duration_seconds)]
"""Annotated type that coerces string-encoded durations to integer seconds."""


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity.

    Python's ``round`` uses banker's rounding; minute counts shown to the
    user round ``2.5`` to ``3``.
    """
    return math.floor(value + 0.5)


class HomeRunBaseModel(BaseModel):
    """Base for homerun models.

    Handles:
    * camelCase → snake_case via ``alias_generator=to_camel``
    * empty string / ``None`` values → dropped so the field default is used
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_empty_values(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            cleaned[key] = value
        return cleaned
