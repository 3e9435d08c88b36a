"""MQTT feed runtime and message parsing.

Topics under the configured prefix:

* ``<prefix>/config`` -- the full calibration config as a JSON object
* ``<prefix>/log/<key>`` -- one sample as a JSON object

paho-mqtt runs its network loop on its own thread. Every decoded message is
handed to the asyncio loop with ``call_soon_threadsafe`` so the stores keep a
single writer.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, cast

import paho.mqtt.client as mqtt

from solarpool.config import MqttSettings
from solarpool.exceptions import SolarPoolFeedError
from solarpool.ingestion.feeds import MemoryConfigFeed, MemoryLogFeed
from solarpool.state.events import IngestionSource, LogEventKind


class FeedTopic(StrEnum):
    CONFIG = "config"
    LOG = "log"


@dataclass(frozen=True)
class FeedMessage:
    """Decoded MQTT feed message."""

    topic: FeedTopic
    key: str | None
    value: Any


def topic_filters(prefix: str) -> list[str]:
    base = prefix.rstrip("/")
    return [f"{base}/{FeedTopic.CONFIG}", f"{base}/{FeedTopic.LOG}/+"]


def parse_feed_message(prefix: str, topic: str, payload: bytes) -> FeedMessage:
    """Decode an MQTT message into a :class:`FeedMessage`.

    An empty payload (cleared retained message) decodes to ``None``.

    Raises
    ------
    SolarPoolFeedError
        If the topic is not a feed topic or the payload is not JSON.
    """
    base = prefix.rstrip("/") + "/"
    if not topic.startswith(base):
        raise SolarPoolFeedError(f"Topic outside feed prefix: {topic}", topic=topic)
    parts = topic[len(base) :].split("/")

    if parts == [FeedTopic.CONFIG.value]:
        feed_topic, key = FeedTopic.CONFIG, None
    elif len(parts) == 2 and parts[0] == FeedTopic.LOG.value and parts[1]:
        feed_topic, key = FeedTopic.LOG, parts[1]
    else:
        raise SolarPoolFeedError(f"Unrecognized feed topic: {topic}", topic=topic)

    text = payload.decode("utf-8", errors="replace").strip()
    if not text:
        return FeedMessage(topic=feed_topic, key=key, value=None)
    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SolarPoolFeedError(f"Payload on {topic} is not JSON", topic=topic) from exc
    return FeedMessage(topic=feed_topic, key=key, value=value)


class MqttFeedRuntime:
    """Threaded paho-mqtt runtime that republishes messages as feed events on an asyncio loop."""

    def __init__(
        self,
        *,
        loop: asyncio.AbstractEventLoop,
        settings: MqttSettings,
        logger: logging.Logger | None = None,
    ) -> None:
        self._loop = loop
        self._settings = settings
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False
        self._seen_keys: set[str] = set()
        self.log_feed = MemoryLogFeed(source=IngestionSource.MQTT)
        self.config_feed = MemoryConfigFeed(source=IngestionSource.MQTT)

    @property
    def is_running(self) -> bool:
        """Whether the MQTT runtime is actively running."""
        return self._running

    def deliver(self, message: FeedMessage) -> None:
        """Push a decoded message into the feeds (event-loop thread only)."""
        if message.topic is FeedTopic.CONFIG:
            self.config_feed.push(message.value)
            return
        key = cast(str, message.key)
        kind = LogEventKind.CHANGED if key in self._seen_keys else LogEventKind.ADDED
        self._seen_keys.add(key)
        self.log_feed.push(key, message.value, kind=kind)

    def start(self) -> None:
        """Connect and subscribe to the feed topics."""
        self.stop()
        settings = self._settings
        # MqttSettings leaves the password out of its repr.
        self._logger.debug("MQTT runtime start requested settings=%r", settings)

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=settings.client_id,
            protocol=mqtt.MQTTv5,
        )
        client.enable_logger(self._logger)
        if settings.username:
            client.username_pw_set(settings.username, settings.password)
        if settings.tls:
            client.tls_set()

        filters = topic_filters(settings.topic_prefix)

        def on_connect(
            c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                return
            self._logger.debug("MQTT connected reason=%s", reason_code)
            for topic_filter in filters:
                c.subscribe(topic_filter, qos=1)

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            try:
                message = parse_feed_message(settings.topic_prefix, msg.topic, msg.payload)
            except SolarPoolFeedError:
                self._logger.debug("MQTT payload parse failure topic=%s", msg.topic, exc_info=True)
                return
            self._loop.call_soon_threadsafe(self.deliver, message)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._logger.debug("MQTT disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        client.connect(settings.host, settings.port, keepalive=settings.keepalive)
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def stop(self) -> None:
        """Stop and disconnect current MQTT client if running."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False

        if client is None:
            return
        try:
            if was_running:
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")
