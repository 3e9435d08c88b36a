"""Holder for the active calibration config."""

from __future__ import annotations

import logging
from typing import Any

from solarpool.models.calibration import CalibrationConfig

_logger = logging.getLogger(__name__)


class ConfigStore:
    """Latest :class:`CalibrationConfig`, swapped atomically on every update.

    The incoming payload is fully converted into a frozen model before the
    single reference assignment, so a reader sees either the old config or the
    new one, never a mix of both.
    """

    def __init__(self, initial: CalibrationConfig | None = None) -> None:
        self._current = initial if initial is not None else CalibrationConfig.default()
        self._revision = 0

    def replace(self, new_config: CalibrationConfig | Any) -> CalibrationConfig:
        """Replace the whole config with *new_config* (model, mapping or ``None``)."""
        config = CalibrationConfig.from_remote(new_config)
        if not config.is_complete:
            _logger.debug("Calibration config is incomplete; temperatures will be NaN")
        self._current = config
        self._revision += 1
        _logger.debug("Calibration config replaced revision=%s", self._revision)
        return config

    def current(self) -> CalibrationConfig:
        return self._current

    @property
    def revision(self) -> int:
        """Number of replacements applied since startup."""
        return self._revision
