"""Typed models for solarpool."""

from solarpool.models.calibration import DEFAULT_POLLING_MILLISECONDS, CalibrationConfig
from solarpool.models.sample import Sample
from solarpool.models.series import Series

__all__ = [
    "DEFAULT_POLLING_MILLISECONDS",
    "CalibrationConfig",
    "Sample",
    "Series",
]
