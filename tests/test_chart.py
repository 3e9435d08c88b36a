from __future__ import annotations

import json
import math
from pathlib import Path

from solarpool.chart import ChartJsFileSink, ChartOptions, build_chart_config
from solarpool.models import Series


def _series() -> Series:
    return Series(
        labels=["2017-07-14T02:40", "2017-07-14T02:41"],
        pool_temp=[77.0, math.nan],
        collector_temp=[-math.inf, 90.5],
        collector_active=[0, 1],
    )


def test_chart_config_layout() -> None:
    config = build_chart_config(_series())

    assert config["type"] == "line"
    pool, collector, active = config["data"]["datasets"]
    assert pool["label"] == "Pool °F"
    assert collector["label"] == "Collector °F"
    assert active["label"] == "Collector Active"
    assert pool["yAxisID"] == collector["yAxisID"] == "y-axis-1"
    assert active["yAxisID"] == "y-axis-2"

    left, right = config["options"]["scales"]["yAxes"]
    assert (left["position"], left["display"]) == ("left", True)
    assert (right["position"], right["display"]) == ("right", False)


def test_non_finite_temperatures_become_gaps() -> None:
    pool, collector, active = build_chart_config(_series())["data"]["datasets"]
    assert pool["data"] == [77.0, None]
    assert collector["data"] == [None, 90.5]
    assert active["data"] == [0, 1]


def test_file_sink_writes_json_document(tmp_path: Path) -> None:
    target = tmp_path / "out" / "chart.json"
    sink = ChartJsFileSink(target)

    sink.render(_series(), ChartOptions())
    sink.render(_series(), ChartOptions(show_activity_axis=True))

    document = json.loads(target.read_text(encoding="utf-8"))
    assert document["data"]["labels"] == ["2017-07-14T02:40", "2017-07-14T02:41"]
    assert document["options"]["scales"]["yAxes"][1]["display"] is True
    assert sink.render_count == 2
    assert [p.name for p in target.parent.iterdir()] == ["chart.json"]
