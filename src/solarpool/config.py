"""Local process configuration for solarpool.

This is distinct from :class:`solarpool.models.CalibrationConfig`, which is
pushed by the remote config feed and replaced at runtime.
"""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from solarpool.exceptions import SolarPoolConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env: dict[str, str], key: str, cast: type[int] | type[float]) -> int | float | None:
    raw = env.get(key)
    if raw is None:
        return None
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise SolarPoolConfigError(f"{key} must be a {cast.__name__}, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class MqttSettings:
    """Broker settings for the optional MQTT feed.

    Samples are expected on ``<topic_prefix>/log/<key>`` and the full
    calibration config on ``<topic_prefix>/config``.
    """

    host: str = "localhost"
    port: int = 1883
    topic_prefix: str = "solarpool"
    username: str | None = None
    password: str | None = dataclasses.field(default=None, repr=False)
    tls: bool = False
    keepalive: int = 60
    client_id: str = "solarpool-monitor"


@dataclasses.dataclass(frozen=True)
class MonitorConfig:
    """Monitor configuration.

    Parameters
    ----------
    coalesce_delay : float
        Quiet period in seconds between the first sample update and the
        single chart rebuild that covers the whole burst.
    mqtt_enabled : bool
        Start the MQTT feed runtime when the monitor is entered.
    mqtt : MqttSettings
        Broker settings used when ``mqtt_enabled`` is set.
    chart_output : str or None
        Path of a Chart.js config document rewritten on every render.
    """

    coalesce_delay: float = 3.0
    mqtt_enabled: bool = False
    mqtt: MqttSettings = dataclasses.field(default_factory=MqttSettings)
    chart_output: str | None = None

    def __post_init__(self) -> None:
        if self.coalesce_delay < 0:
            raise SolarPoolConfigError("coalesce_delay must be non-negative")

    @classmethod
    def from_env(cls, **overrides: Any) -> MonitorConfig:
        """Create configuration from ``SOLARPOOL_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = dict(os.environ)

        mqtt_kwargs: dict[str, Any] = {}
        _ENV_MQTT_MAP = {
            "SOLARPOOL_MQTT_HOST": "host",
            "SOLARPOOL_MQTT_TOPIC_PREFIX": "topic_prefix",
            "SOLARPOOL_MQTT_USERNAME": "username",
            "SOLARPOOL_MQTT_PASSWORD": "password",
            "SOLARPOOL_MQTT_CLIENT_ID": "client_id",
        }
        for env_key, field_name in _ENV_MQTT_MAP.items():
            val = env.get(env_key)
            if val is not None:
                mqtt_kwargs[field_name] = val

        port = _env_number(env, "SOLARPOOL_MQTT_PORT", int)
        if port is not None:
            mqtt_kwargs["port"] = port
        keepalive = _env_number(env, "SOLARPOOL_MQTT_KEEPALIVE", int)
        if keepalive is not None:
            mqtt_kwargs["keepalive"] = keepalive
        if "SOLARPOOL_MQTT_TLS" in env:
            mqtt_kwargs["tls"] = _env_bool(env.get("SOLARPOOL_MQTT_TLS"), False)

        mqtt_overrides = overrides.pop("mqtt", None)
        if isinstance(mqtt_overrides, dict):
            mqtt_kwargs.update(mqtt_overrides)
        elif isinstance(mqtt_overrides, MqttSettings):
            mqtt_kwargs = dataclasses.asdict(mqtt_overrides)

        config_kwargs: dict[str, Any] = {"mqtt": MqttSettings(**mqtt_kwargs)}

        delay = _env_number(env, "SOLARPOOL_COALESCE_DELAY", float)
        if delay is not None and "coalesce_delay" not in overrides:
            config_kwargs["coalesce_delay"] = delay

        if "mqtt_enabled" not in overrides:
            config_kwargs["mqtt_enabled"] = _env_bool(env.get("SOLARPOOL_MQTT_ENABLED"), False)

        chart_output = env.get("SOLARPOOL_CHART_OUTPUT")
        if chart_output:
            config_kwargs["chart_output"] = chart_output

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
