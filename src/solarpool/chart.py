"""Visualization sinks and the fixed chart layout.

The pipeline's only obligation towards the chart is to hand over a
well-formed :class:`~solarpool.models.Series` and ask for a redraw. Sinks here
turn that into a Chart.js line-chart config document.
"""

from __future__ import annotations

import json
import logging
import math
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict

from solarpool.models.series import Series

_logger = logging.getLogger(__name__)

TEMPERATURE_AXIS_ID = "y-axis-1"
ACTIVITY_AXIS_ID = "y-axis-2"


class DatasetOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    y_axis_id: str
    background_color: str
    border_color: str


class ChartOptions(BaseModel):
    """Rendering options: two temperature lines on the left axis and the
    collector activity (0/1) on a hidden right axis."""

    model_config = ConfigDict(frozen=True)

    chart_type: str = "line"
    pool: DatasetOptions = DatasetOptions(
        label="Pool °F",
        y_axis_id=TEMPERATURE_AXIS_ID,
        background_color="rgba(54,162,235,0.2)",
        border_color="rgba(54,162,235,1)",
    )
    collector: DatasetOptions = DatasetOptions(
        label="Collector °F",
        y_axis_id=TEMPERATURE_AXIS_ID,
        background_color="rgba(255,99,132,0.2)",
        border_color="rgba(255,99,132,1)",
    )
    collector_active: DatasetOptions = DatasetOptions(
        label="Collector Active",
        y_axis_id=ACTIVITY_AXIS_ID,
        background_color="rgba(255,99,132,0.2)",
        border_color="transparent",
    )
    show_activity_axis: bool = False


class VisualizationSink(Protocol):
    """Consumer of built series."""

    def render(self, series: Series, options: ChartOptions) -> None: ...


def _json_number(value: float) -> float | None:
    # JSON has no NaN/Infinity; degenerate points become gaps.
    return value if math.isfinite(value) else None


def _dataset(options: DatasetOptions, data: list[Any]) -> dict[str, Any]:
    return {
        "label": options.label,
        "yAxisID": options.y_axis_id,
        "backgroundColor": options.background_color,
        "borderColor": options.border_color,
        "pointRadius": 0,
        "pointHitRadius": 4,
        "data": data,
    }


def _axis(axis_id: str, *, position: str, display: bool) -> dict[str, Any]:
    return {
        "type": "linear",
        "display": display,
        "position": position,
        "id": axis_id,
        "beginAtZero": True,
        "gridLines": {"color": "rgba(0, 0, 0, 0.05)", "zeroLineColor": "rgba(0,0,0,0.25)"},
    }


def build_chart_config(series: Series, options: ChartOptions | None = None) -> dict[str, Any]:
    """Chart.js config for *series*; non-finite temperatures are emitted as ``null``."""
    opts = options or ChartOptions()
    return {
        "type": opts.chart_type,
        "data": {
            "labels": list(series.labels),
            "datasets": [
                _dataset(opts.pool, [_json_number(v) for v in series.pool_temp]),
                _dataset(opts.collector, [_json_number(v) for v in series.collector_temp]),
                _dataset(opts.collector_active, list(series.collector_active)),
            ],
        },
        "options": {
            "responsive": True,
            "maintainAspectRatio": False,
            "scales": {
                "xAxes": [{"gridLines": {"offsetGridLines": False}}],
                "yAxes": [
                    _axis(TEMPERATURE_AXIS_ID, position="left", display=True),
                    _axis(ACTIVITY_AXIS_ID, position="right", display=opts.show_activity_axis),
                ],
            },
        },
    }


class ChartJsFileSink:
    """Rewrites a Chart.js config JSON file on every render.

    The file is replaced atomically so a page polling it never reads a
    partial document.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self.render_count = 0

    @property
    def path(self) -> Path:
        return self._path

    def render(self, series: Series, options: ChartOptions) -> None:
        document = build_chart_config(series, options)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".chart-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        self.render_count += 1
        _logger.debug("Chart written path=%s points=%s", self._path, len(series))


class CallbackSink:
    """Adapts a plain ``(series, options)`` callable to :class:`VisualizationSink`."""

    def __init__(self, callback: Callable[[Series, ChartOptions], None]) -> None:
        self._callback = callback

    def render(self, series: Series, options: ChartOptions) -> None:
        self._callback(series, options)
