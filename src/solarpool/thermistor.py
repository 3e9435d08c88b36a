"""Thermistor model: raw ADC reading -> temperature.

The thermistor sits in a voltage divider with a fixed series resistor and is
sampled by a 10-bit ADC. Resistance is converted to temperature with the
beta (B-parameter) equation::

    1/T = 1/T0 + (1/B) * ln(R/R0)

All arithmetic follows IEEE float semantics: degenerate readings and missing
calibration produce ``inf``/``NaN`` rather than raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from solarpool.models.calibration import CalibrationConfig

#: 0 degrees Celsius in Kelvin.
KELVIN_OFFSET = 273.15

#: Full-scale code of the 10-bit ADC.
ADC_FULL_SCALE = 1023.0

_HUNDREDTH = Decimal("0.01")

# Every float at or above this magnitude is already an integer.
_INTEGRAL_FLOAT = 2.0**52


def _float(value: float | None) -> float:
    return math.nan if value is None else float(value)


def _div(numerator: float, denominator: float) -> float:
    """Division with IEEE semantics for a zero denominator."""
    if denominator == 0:
        if math.isnan(numerator) or numerator == 0:
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _log(value: float) -> float:
    if value == 0:
        return -math.inf
    if value < 0 or math.isnan(value):
        return math.nan
    return math.log(value)


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 1.8 + 32.0


def adc_to_resistance(adc: float, series_resistor: float | None) -> float:
    """Solve the voltage divider for the thermistor resistance (ohms)."""
    return _div(_float(series_resistor), _div(ADC_FULL_SCALE, float(adc)) - 1.0)


def resistance_to_celsius(resistance: float, config: CalibrationConfig) -> float:
    """Beta equation, resistance (ohms) -> degrees Celsius."""
    t0 = _float(config.temperature_at_0) + KELVIN_OFFSET
    r0 = _float(config.resistance_at_0)
    b = _float(config.b_coefficient)

    if math.isinf(resistance) and resistance > 0:
        # Full-scale reading: the log term collapses and T = T0.
        return _float(config.temperature_at_0)

    steinhart = _log(_div(resistance, r0))
    steinhart = _div(steinhart, b)
    steinhart += _div(1.0, t0)
    return _div(1.0, steinhart) - KELVIN_OFFSET


def round_half_up(value: float, places: Decimal = _HUNDREDTH) -> float:
    """Round the exact binary value of *value*, ties away from zero.

    Matches JavaScript's ``Number.prototype.toFixed``: ``2.675`` is stored
    below the tie and gives ``2.67`` while ``78.125`` gives ``78.13``.
    """
    if not math.isfinite(value) or abs(value) >= _INTEGRAL_FLOAT:
        return value
    return float(Decimal(value).quantize(places, rounding=ROUND_HALF_UP))


def _calibrated(config: CalibrationConfig) -> bool:
    params = (
        config.series_resistor,
        config.resistance_at_0,
        config.temperature_at_0,
        config.b_coefficient,
    )
    return all(value is not None and math.isfinite(value) for value in params)


@dataclass(frozen=True)
class ThermistorReading:
    """A raw ADC reading with its derived resistance and temperature."""

    adc: float
    resistance: float
    celsius: float

    @property
    def fahrenheit(self) -> float:
        return celsius_to_fahrenheit(self.celsius)


def to_reading(adc: float, config: CalibrationConfig) -> ThermistorReading:
    """Map a raw ADC reading to resistance (ohms) and temperature (C)."""
    resistance = adc_to_resistance(adc, config.series_resistor)
    if adc == 0 and _calibrated(config):
        # Zero resistance: ln(0) diverges and the reading has no temperature.
        celsius = -math.inf
    else:
        celsius = resistance_to_celsius(resistance, config)
    return ThermistorReading(adc=float(adc), resistance=resistance, celsius=celsius)


def temperature_f(adc: float, config: CalibrationConfig) -> float:
    """Temperature in Fahrenheit rounded to 2 decimals, as plotted.

    ``adc == 1023`` returns the calibration temperature ``T0`` and ``adc == 0``
    returns ``-inf``. Missing calibration parameters give NaN.
    """
    return round_half_up(to_reading(adc, config).fahrenheit)
