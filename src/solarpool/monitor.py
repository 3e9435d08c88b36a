"""Live monitor: wires feeds, stores, the coalescer and a chart sink."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from solarpool._mqtt import MqttFeedRuntime
from solarpool.chart import ChartJsFileSink, ChartOptions, VisualizationSink
from solarpool.coalescer import Scheduler, UpdateCoalescer
from solarpool.config import MonitorConfig
from solarpool.exceptions import SolarPoolError
from solarpool.ingestion.feeds import ConfigFeed, LogFeed, Unsubscribe
from solarpool.ingestion.normalize import parse_sample, parse_sample_key
from solarpool.models.series import Series
from solarpool.series import SeriesBuilder
from solarpool.state.config import ConfigStore
from solarpool.state.events import ConfigUpdate, SampleUpdate
from solarpool.state.samples import SampleStore

_logger = logging.getLogger(__name__)


class SolarPoolMonitor:
    """Keeps a chart of pool/collector temperatures in step with the remote log.

    Data flow::

        config feed -> ConfigStore.replace
        log feed    -> SampleStore.upsert -> UpdateCoalescer.notify
        coalescer   -> SeriesBuilder.build -> sink.render

    Usage::

        async with SolarPoolMonitor(MonitorConfig.from_env()) as monitor:
            ...

    or, without a transport, ``monitor.attach(log_feed, config_feed)``.
    """

    def __init__(
        self,
        config: MonitorConfig | None = None,
        *,
        sink: VisualizationSink | None = None,
        options: ChartOptions | None = None,
        samples: SampleStore | None = None,
        calibration: ConfigStore | None = None,
        scheduler: Scheduler | None = None,
        on_series: Callable[[Series], None] | None = None,
    ) -> None:
        self._config = config or MonitorConfig()
        if sink is None and self._config.chart_output:
            sink = ChartJsFileSink(self._config.chart_output)
        self._sink = sink
        self._options = options or ChartOptions()
        self._samples = samples if samples is not None else SampleStore()
        self._calibration = calibration if calibration is not None else ConfigStore()
        self._builder = SeriesBuilder()
        self._coalescer = UpdateCoalescer(
            self._on_coalesced,
            delay=self._config.coalesce_delay,
            scheduler=scheduler,
        )
        self._on_series = on_series
        self._last_series: Series | None = None
        self._subscriptions: list[Unsubscribe] = []
        self._mqtt_runtime: MqttFeedRuntime | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SolarPoolMonitor:
        if self._config.mqtt_enabled:
            self._start_mqtt(asyncio.get_running_loop())
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self._stop_mqtt()
        self.detach()

    def _start_mqtt(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._mqtt_runtime is not None and self._mqtt_runtime.is_running:
            return
        runtime = MqttFeedRuntime(loop=loop, settings=self._config.mqtt, logger=_logger)
        try:
            runtime.start()
        except OSError as exc:
            runtime.stop()
            raise SolarPoolError(
                f"Could not connect to MQTT broker {self._config.mqtt.host}:{self._config.mqtt.port}"
            ) from exc
        # Deliveries are queued on this loop, so nothing is missed before attaching.
        self.attach(runtime.log_feed, runtime.config_feed)
        self._mqtt_runtime = runtime

    def _stop_mqtt(self) -> None:
        runtime = self._mqtt_runtime
        self._mqtt_runtime = None
        if runtime is not None:
            runtime.stop()

    # ------------------------------------------------------------------
    # Feeds
    # ------------------------------------------------------------------

    def attach(self, log_feed: LogFeed | None = None, config_feed: ConfigFeed | None = None) -> None:
        """Subscribe to a log feed and/or a config feed."""
        if config_feed is not None:
            self._subscriptions.append(config_feed.subscribe(self.handle_config))
        if log_feed is not None:
            self._subscriptions.append(log_feed.subscribe(self.handle_sample))

    def detach(self) -> None:
        """Drop every feed subscription."""
        subscriptions, self._subscriptions = self._subscriptions, []
        for unsubscribe in subscriptions:
            unsubscribe()

    def handle_config(self, update: ConfigUpdate) -> None:
        """Replace the calibration config with the delivered payload."""
        self._calibration.replace(update.value)

    def handle_sample(self, update: SampleUpdate) -> None:
        """Upsert a delivered sample and schedule a coalesced rebuild."""
        key = parse_sample_key(update.key)
        if key is None:
            _logger.warning("Dropping sample with invalid key=%r", update.key)
            return
        sample = parse_sample(key, update.value)
        if sample is None:
            _logger.warning("Dropping unreadable sample key=%s", key)
            return
        self._samples.upsert(key, sample)
        _logger.debug("Sample upserted key=%s kind=%s source=%s", key, update.kind, update.source)
        self._coalescer.notify()

    # ------------------------------------------------------------------
    # Series
    # ------------------------------------------------------------------

    def refresh(self) -> Series:
        """Rebuild the series from current state and push it to the sink."""
        series = self._builder.build(self._samples, self._calibration.current())
        self._last_series = series
        _logger.debug("Series rebuilt points=%s", len(series))

        if self._sink is not None:
            try:
                self._sink.render(series, self._options)
            except Exception:
                _logger.warning("Chart render failed", exc_info=True)

        if self._on_series is not None:
            try:
                self._on_series(series)
            except Exception:
                _logger.debug("on_series callback failed", exc_info=True)
        return series

    def _on_coalesced(self) -> None:
        self.refresh()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def samples(self) -> SampleStore:
        return self._samples

    @property
    def calibration(self) -> ConfigStore:
        return self._calibration

    @property
    def coalescer(self) -> UpdateCoalescer:
        return self._coalescer

    @property
    def last_series(self) -> Series | None:
        return self._last_series

    @property
    def mqtt_running(self) -> bool:
        return self._mqtt_runtime is not None and self._mqtt_runtime.is_running
