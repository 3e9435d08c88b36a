#!/usr/bin/env python3
"""Replay a database export through the monitor and write the chart.

The export is the JSON dump of the remote store root::

    {"config": {...}, "log": {"0": {...}, "1": {...}} }

(``log`` may also be an array with ``null`` holes.) The config is applied
first, then every log entry is delivered as ``child_added``; bursts are
coalesced exactly as they would be live, and the resulting Chart.js config is
written to ``--output``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from solarpool import ChartJsFileSink, MemoryConfigFeed, MemoryLogFeed, MonitorConfig, SolarPoolMonitor  # noqa: E402
from solarpool.state.events import IngestionSource  # noqa: E402

_LOG = logging.getLogger("replay_export")


class _DeferredScheduler:
    """Collects scheduled fires so they can run after the replay burst."""

    def __init__(self) -> None:
        self.pending: list[Callable[[], None]] = []

    def __call__(self, _delay: float, callback: Callable[[], None]) -> None:
        self.pending.append(callback)

    def run_pending(self) -> int:
        fired = 0
        while self.pending:
            self.pending.pop(0)()
            fired += 1
        return fired


def _load_export(path: Path) -> dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise SystemExit(f"{path}: export root must be a JSON object")
    return data


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("export", type=Path, help="JSON export with 'config' and 'log' nodes")
    parser.add_argument("-o", "--output", type=Path, default=Path("chart.json"), help="Chart.js config output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    export = _load_export(args.export)
    scheduler = _DeferredScheduler()
    sink = ChartJsFileSink(args.output)
    monitor = SolarPoolMonitor(MonitorConfig(coalesce_delay=0.0), sink=sink, scheduler=scheduler)

    log_feed = MemoryLogFeed(source=IngestionSource.REPLAY)
    config_feed = MemoryConfigFeed(source=IngestionSource.REPLAY)
    monitor.attach(log_feed, config_feed)

    if "config" in export:
        config_feed.push(export["config"])
    delivered = log_feed.push_log(export.get("log"))
    fired = scheduler.run_pending()
    if fired == 0:
        monitor.refresh()

    series = monitor.last_series
    _LOG.info(
        "Replayed %s log entries (%s stored, %s points) -> %s",
        delivered,
        len(monitor.samples),
        len(series) if series is not None else 0,
        sink.path,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
