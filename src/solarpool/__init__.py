"""solarpool - live temperature chart pipeline for a solar pool heater."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("solarpool")
except PackageNotFoundError:
    __version__ = "0+local"
from solarpool.chart import CallbackSink, ChartJsFileSink, ChartOptions, VisualizationSink, build_chart_config
from solarpool.coalescer import CoalescerState, UpdateCoalescer
from solarpool.config import MonitorConfig, MqttSettings
from solarpool.exceptions import SolarPoolConfigError, SolarPoolError, SolarPoolFeedError
from solarpool.ingestion import ConfigFeed, LogFeed, MemoryConfigFeed, MemoryLogFeed
from solarpool.models import CalibrationConfig, Sample, Series
from solarpool.monitor import SolarPoolMonitor
from solarpool.series import SeriesBuilder, build_series
from solarpool.state import ConfigStore, SampleStore
from solarpool.thermistor import ThermistorReading, temperature_f

__all__ = [
    "__version__",
    "CalibrationConfig",
    "CallbackSink",
    "ChartJsFileSink",
    "ChartOptions",
    "CoalescerState",
    "ConfigFeed",
    "ConfigStore",
    "LogFeed",
    "MemoryConfigFeed",
    "MemoryLogFeed",
    "MonitorConfig",
    "MqttSettings",
    "Sample",
    "SampleStore",
    "Series",
    "SeriesBuilder",
    "SolarPoolConfigError",
    "SolarPoolError",
    "SolarPoolFeedError",
    "SolarPoolMonitor",
    "ThermistorReading",
    "UpdateCoalescer",
    "VisualizationSink",
    "build_chart_config",
    "build_series",
    "temperature_f",
]
