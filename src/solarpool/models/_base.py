"""Base model and lenient field types for remote payloads.

Every solarpool model inherits from :class:`SolarPoolModel` which provides:

* ``alias_generator=to_camel`` so camelCase remote keys map
  automatically to snake_case fields.
* Frozen instances, so a model handed to a reader can never change
  underneath it.

The remote feeds are not schema-validated. Numeric calibration and channel
fields therefore use :data:`LenientFloat`, which turns anything that is not
a number into NaN instead of raising. Degenerate values surface later as
non-numeric temperatures on the chart.
"""

from __future__ import annotations

import math
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


def lenient_float(value: Any) -> float | None:
    """Coerce *value* to ``float``; ``None`` stays ``None``, garbage becomes NaN."""
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def lenient_int(value: Any) -> int | None:
    """Coerce *value* to ``int``; anything non-integral becomes ``None``."""
    parsed = lenient_float(value)
    if parsed is None or not math.isfinite(parsed):
        return None
    return int(parsed)


def lenient_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


LenientFloat = Annotated[float | None, BeforeValidator(lenient_float)]
"""Optional float that never fails validation."""

LenientInt = Annotated[int | None, BeforeValidator(lenient_int)]
"""Optional int that never fails validation."""

LenientStr = Annotated[str | None, BeforeValidator(lenient_str)]


class SolarPoolModel(BaseModel):
    """Base for solarpool models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
