"""Chart-ready series."""

from __future__ import annotations

from pydantic import Field, model_validator

from solarpool.models._base import SolarPoolModel


class Series(SolarPoolModel):
    """Parallel arrays, one entry per sample in time order.

    Index ``i`` of every array refers to the same source sample.
    """

    labels: list[str] = Field(default_factory=list)
    pool_temp: list[float] = Field(default_factory=list)
    collector_temp: list[float] = Field(default_factory=list)
    collector_active: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_lengths(self) -> Series:
        size = len(self.labels)
        if not (len(self.pool_temp) == len(self.collector_temp) == len(self.collector_active) == size):
            raise ValueError("series arrays must have equal length")
        return self

    def __len__(self) -> int:
        return len(self.labels)
