"""Normalization helpers for raw feed payloads.

Centralizes the lenient parsing done at the ingestion boundary so the stores
only ever see typed values.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import ValidationError

from solarpool.models.sample import Sample

_logger = logging.getLogger(__name__)


def parse_sample_key(key: Any) -> int | None:
    """Return the log slot for *key*, or ``None`` if it is not a non-negative integer.

    Keys arrive as ints or as decimal strings (``"17"``).
    """
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key if key >= 0 else None
    if isinstance(key, str):
        text = key.strip()
        if text.isdecimal():
            return int(text)
    return None


def parse_sample(key: int, value: Any) -> Sample | None:
    """Build a :class:`Sample` from a raw payload.

    Channel readings are coerced leniently. Payloads that are not objects or
    whose ``time`` is unusable are rejected with ``None``.
    """
    if not isinstance(value, Mapping):
        return None
    payload = {str(k): v for k, v in value.items()}
    payload["key"] = key
    try:
        return Sample.model_validate(payload)
    except ValidationError:
        _logger.debug("Sample payload rejected key=%s", key, exc_info=True)
        return None


def iter_log_entries(log: Any) -> Iterator[tuple[Any, Any]]:
    """Yield ``(key, value)`` pairs from an exported log node.

    Exports render densely keyed logs as arrays with ``null`` holes and sparse
    ones as objects; both shapes are accepted.
    """
    if isinstance(log, Mapping):
        yield from log.items()
    elif isinstance(log, list):
        for index, value in enumerate(log):
            if value is not None:
                yield index, value
