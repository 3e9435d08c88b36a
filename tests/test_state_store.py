from __future__ import annotations

import pytest
from pydantic import ValidationError

from solarpool.models import CalibrationConfig, Sample
from solarpool.state import ConfigStore, SampleStore


def _sample(key: int, time: float, a: float = 500, b: float = 400, active: bool = False) -> Sample:
    return Sample(key=key, time=time, channel_a=a, channel_b=b, active=active)


def test_upsert_is_last_write_wins_per_key() -> None:
    store = SampleStore()
    store.upsert(4, _sample(4, 100.0, a=1))
    store.upsert(1, _sample(1, 50.0))
    store.upsert(4, _sample(4, 200.0, a=2, active=True))

    assert len(store) == 2
    replaced = store.get(4)
    assert replaced is not None
    assert replaced.time == 200.0
    assert replaced.channel_a == 2
    assert replaced.active is True


def test_upsert_replaces_whole_sample_not_fields() -> None:
    store = SampleStore()
    store.upsert(0, _sample(0, 100.0, a=10, b=20, active=True))
    store.upsert(0, Sample(key=0, time=101.0))

    sample = store.get(0)
    assert sample is not None
    assert sample.active is False
    assert sample.channel_a != sample.channel_a  # NaN: not carried over


def test_sparse_keys_are_kept_without_filling_gaps() -> None:
    store = SampleStore()
    for key in (900, 3, 41):
        store.upsert(key, _sample(key, float(key)))

    assert sorted(store) == [3, 41, 900]
    assert 4 not in store
    assert {s.key for s in store.all()} == {3, 41, 900}


def test_reupserting_identical_value_is_idempotent() -> None:
    store = SampleStore()
    sample = _sample(7, 123.0)
    store.upsert(7, sample)
    before = store.all()
    for _ in range(5):
        store.upsert(7, sample)
    assert store.all() == before


def test_config_store_starts_with_default_polling() -> None:
    store = ConfigStore()
    current = store.current()
    assert current.polling_milliseconds == 5000
    assert current.series_resistor is None
    assert store.revision == 0


def test_config_replace_is_wholesale(calibration: CalibrationConfig) -> None:
    store = ConfigStore()
    store.replace(calibration)
    store.replace({"seriesResistor": 8170})

    current = store.current()
    assert current.series_resistor == 8170.0
    # Not merged with the previous config.
    assert current.b_coefficient is None
    assert current.polling_milliseconds is None
    assert store.revision == 2


def test_config_replace_never_exposes_a_mix(calibration: CalibrationConfig) -> None:
    store = ConfigStore(calibration)
    held = store.current()

    store.replace({"seriesResistor": 1, "resistanceAt0": 2, "temperatureAt0": 3, "bCoefficient": 4})

    assert held == calibration
    new = store.current()
    assert (new.series_resistor, new.resistance_at_0, new.temperature_at_0, new.b_coefficient) == (1, 2, 3, 4)
    with pytest.raises(ValidationError):
        new.series_resistor = 99.0  # type: ignore[misc]


def test_config_replace_with_none_gives_empty_config(calibration: CalibrationConfig) -> None:
    store = ConfigStore(calibration)
    store.replace(None)
    assert not store.current().is_complete
