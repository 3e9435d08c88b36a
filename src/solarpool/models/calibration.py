"""Calibration and polling configuration pushed by the remote config feed."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import Field

from solarpool.models._base import LenientFloat, LenientInt, LenientStr, SolarPoolModel

#: Polling period in effect before the first remote config arrives.
DEFAULT_POLLING_MILLISECONDS = 5000


class CalibrationConfig(SolarPoolModel):
    """Thermistor calibration plus the controller settings stored alongside it.

    Replaced wholesale on every remote update; fields missing from a payload
    are ``None`` rather than carried over from the previous config.

    Parameters
    ----------
    polling_milliseconds : int or None
        Device sampling period.
    series_resistor : float or None
        Fixed resistor of the voltage divider (ohms).
    resistance_at_0 : float or None
        Thermistor resistance at ``temperature_at_0`` (ohms).
    temperature_at_0 : float or None
        Temperature at which ``resistance_at_0`` was measured (C).
    b_coefficient : float or None
        Thermistor B constant.
    """

    polling_milliseconds: LenientInt = None
    series_resistor: LenientFloat = None
    resistance_at_0: LenientFloat = None
    temperature_at_0: LenientFloat = None
    b_coefficient: LenientFloat = None

    max_entries: LenientInt = None
    min_t_on: LenientFloat = Field(default=None, alias="minTOn")
    delta_t_on: LenientFloat = Field(default=None, alias="deltaTOn")
    delta_t_off: LenientFloat = Field(default=None, alias="deltaTOff")
    oversample: LenientInt = None
    ntp_server: LenientStr = None
    gmt_offset: LenientInt = None

    @classmethod
    def default(cls) -> CalibrationConfig:
        """Config in effect until the remote feed delivers one."""
        return cls(polling_milliseconds=DEFAULT_POLLING_MILLISECONDS)

    @classmethod
    def from_remote(cls, value: Any) -> CalibrationConfig:
        """Build a config from a remote payload without validating it.

        ``None`` (the remote node was deleted) and non-mapping payloads give an
        empty config, which later yields NaN temperatures.
        """
        if isinstance(value, CalibrationConfig):
            return value
        if not isinstance(value, Mapping):
            return cls()
        return cls.model_validate(dict(value))

    @property
    def is_complete(self) -> bool:
        """Whether every thermistor parameter is present."""
        return None not in (
            self.series_resistor,
            self.resistance_at_0,
            self.temperature_at_0,
            self.b_coefficient,
        )
