"""Build the ordered, chart-ready series from the sparse sample log."""

from __future__ import annotations

import math

from solarpool.models.calibration import CalibrationConfig
from solarpool.models.sample import Sample
from solarpool.models.series import Series
from solarpool.state.samples import SampleStore
from solarpool.thermistor import temperature_f

#: Label for times outside the representable range (+/- 8.64e15 ms).
INVALID_LABEL = "Invalid Date"

_MAX_EPOCH_MS = 8.64e15
_MS_PER_DAY = 86_400_000


def _civil_from_days(days: int) -> tuple[int, int, int]:
    """Proleptic Gregorian (year, month, day) for days since 1970-01-01."""
    z = days + 719_468
    era = z // 146_097
    doe = z - era * 146_097
    yoe = (doe - doe // 1460 + doe // 36_524 - doe // 146_096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def format_label(timestamp: float) -> str:
    """ISO-8601 UTC timestamp truncated to 16 characters (``YYYY-MM-DDTHH:MM``).

    Years outside 0..9999 use the expanded ``+YYYYYY`` form, so the cut lands
    earlier in the string. Times beyond the representable range give
    :data:`INVALID_LABEL`; no input raises.
    """
    if not math.isfinite(timestamp):
        return INVALID_LABEL
    epoch_ms = math.trunc(timestamp * 1000)
    if abs(epoch_ms) > _MAX_EPOCH_MS:
        return INVALID_LABEL

    days, ms_of_day = divmod(epoch_ms, _MS_PER_DAY)
    year, month, day = _civil_from_days(days)
    hours, rest = divmod(ms_of_day, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)

    year_text = f"{year:04d}" if 0 <= year <= 9999 else f"{year:+07d}"
    iso = f"{year_text}-{month:02d}-{day:02d}T{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}Z"
    return iso[:16]


def order_samples(store: SampleStore) -> list[Sample]:
    """Samples ascending by time; equal times keep ascending key order."""
    by_key = sorted(store.items(), key=lambda item: item[0])
    return sorted((sample for _, sample in by_key), key=lambda sample: sample.time)


class SeriesBuilder:
    """Recomputes the whole series from the store on every call.

    There is no downsampling, interpolation or gap filling: the series has one
    entry per stored sample.
    """

    def build(self, store: SampleStore, config: CalibrationConfig) -> Series:
        ordered = order_samples(store)
        return Series(
            labels=[format_label(sample.time) for sample in ordered],
            pool_temp=[temperature_f(sample.channel_a, config) for sample in ordered],
            collector_temp=[temperature_f(sample.channel_b, config) for sample in ordered],
            collector_active=[1 if sample.active else 0 for sample in ordered],
        )


def build_series(store: SampleStore, config: CalibrationConfig) -> Series:
    return SeriesBuilder().build(store, config)
