"""Sparse, key-indexed sample log."""

from __future__ import annotations

from collections.abc import Iterator

from solarpool.models.sample import Sample


class SampleStore:
    """Mapping of remote log slot -> most recent :class:`Sample`.

    Keys may arrive with gaps and out of chronological order; ordering is
    imposed only when a series is built. There is no delete: the remote log
    only ever adds or overwrites slots.

    The store has a single writer (the feed callbacks, delivered one at a
    time on the event loop) and does no locking of its own.
    """

    def __init__(self) -> None:
        self._samples: dict[int, Sample] = {}

    def upsert(self, key: int, sample: Sample) -> None:
        """Insert or replace the sample at *key* (last write wins)."""
        self._samples[key] = sample

    def all(self) -> list[Sample]:
        """All samples, in no particular order."""
        return list(self._samples.values())

    def items(self) -> list[tuple[int, Sample]]:
        return list(self._samples.items())

    def get(self, key: int) -> Sample | None:
        return self._samples.get(key)

    def __len__(self) -> int:
        return len(self._samples)

    def __contains__(self, key: object) -> bool:
        return key in self._samples

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._samples))
