"""A single logged sensor sample."""

from __future__ import annotations

import math
from typing import Annotated, Any

from pydantic import AliasChoices, BeforeValidator, Field, field_validator

from solarpool.models._base import SolarPoolModel, lenient_float


def _channel(value: Any) -> float:
    parsed = lenient_float(value)
    return math.nan if parsed is None else parsed


def _truthy(value: Any) -> bool:
    return bool(value)


AdcReading = Annotated[float, BeforeValidator(_channel)]
"""Raw 10-bit ADC reading; unreadable values become NaN."""


class Sample(SolarPoolModel):
    """Two thermistor ADC readings and the collector state at one instant.

    The device logs ``{"time": ..., "0": <adc0>, "1": <adc1>, "active": ...}``;
    channel ``0`` is the pool thermistor and channel ``1`` the collector.
    """

    key: int = Field(..., ge=0, description="Slot in the remote log")
    time: float = Field(..., description="Unix timestamp (seconds)")
    channel_a: AdcReading = Field(
        default=math.nan,
        validation_alias=AliasChoices("0", "channelA", "channel_a"),
    )
    channel_b: AdcReading = Field(
        default=math.nan,
        validation_alias=AliasChoices("1", "channelB", "channel_b"),
    )
    active: Annotated[bool, BeforeValidator(_truthy)] = False

    @field_validator("time")
    @classmethod
    def _finite_time(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("time must be a finite number")
        return value
