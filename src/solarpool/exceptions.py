"""Custom exception hierarchy for solarpool."""

from __future__ import annotations


class SolarPoolError(Exception):
    """Base exception for all solarpool errors."""


class SolarPoolConfigError(SolarPoolError):
    """Invalid or missing local configuration."""


class SolarPoolFeedError(SolarPoolError):
    """A feed delivered a payload that could not be decoded."""

    def __init__(self, message: str, *, topic: str = "") -> None:
        self.topic = topic
        super().__init__(message)
