from __future__ import annotations

import asyncio

import pytest

from solarpool._mqtt import FeedMessage, FeedTopic, MqttFeedRuntime, parse_feed_message, topic_filters
from solarpool.config import MqttSettings
from solarpool.exceptions import SolarPoolFeedError
from solarpool.state.events import ConfigUpdate, IngestionSource, LogEventKind, SampleUpdate


def test_topic_filters_cover_config_and_log() -> None:
    assert topic_filters("home/pool/") == ["home/pool/config", "home/pool/log/+"]


def test_parse_log_message() -> None:
    message = parse_feed_message("solarpool", "solarpool/log/17", b'{"time": 1, "0": 512, "1": 600}')
    assert message.topic is FeedTopic.LOG
    assert message.key == "17"
    assert message.value == {"time": 1, "0": 512, "1": 600}


def test_parse_config_message_and_empty_payload() -> None:
    message = parse_feed_message("solarpool", "solarpool/config", b'{"seriesResistor": 8170}')
    assert message.topic is FeedTopic.CONFIG
    assert message.key is None
    assert message.value == {"seriesResistor": 8170}

    cleared = parse_feed_message("solarpool", "solarpool/config", b"")
    assert cleared.value is None


@pytest.mark.parametrize(
    "topic",
    ["other/log/1", "solarpool/log", "solarpool/log/", "solarpool/log/1/extra", "solarpool/status"],
)
def test_parse_rejects_unknown_topics(topic: str) -> None:
    with pytest.raises(SolarPoolFeedError):
        parse_feed_message("solarpool", topic, b"{}")


def test_parse_rejects_invalid_json() -> None:
    with pytest.raises(SolarPoolFeedError) as excinfo:
        parse_feed_message("solarpool", "solarpool/log/1", b"{not json")
    assert excinfo.value.topic == "solarpool/log/1"


def test_runtime_delivers_messages_as_feed_events() -> None:
    loop = asyncio.new_event_loop()
    try:
        runtime = MqttFeedRuntime(loop=loop, settings=MqttSettings())
        samples: list[SampleUpdate] = []
        configs: list[ConfigUpdate] = []
        runtime.log_feed.subscribe(samples.append)
        runtime.config_feed.subscribe(configs.append)

        runtime.deliver(FeedMessage(topic=FeedTopic.CONFIG, key=None, value={"bCoefficient": 3380}))
        runtime.deliver(FeedMessage(topic=FeedTopic.LOG, key="3", value={"time": 1}))
        runtime.deliver(FeedMessage(topic=FeedTopic.LOG, key="3", value={"time": 2}))

        assert [c.value for c in configs] == [{"bCoefficient": 3380}]
        assert [(s.key, s.kind) for s in samples] == [("3", LogEventKind.ADDED), ("3", LogEventKind.CHANGED)]
        assert all(s.source is IngestionSource.MQTT for s in samples)
        assert runtime.is_running is False
    finally:
        loop.close()
