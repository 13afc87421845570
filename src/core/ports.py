"""Ports (interfaces) used by the reputation controller.

Ports define the minimal contracts for fetching list sources and matching
hostnames so that the core can be reused with different transports and
matching algorithms.
"""

from __future__ import annotations

from typing import Protocol

from core.models import ClassificationConfig, DetectionResult


class FetcherPort(Protocol):
    """Fetch operations required by the refresh cycle."""

    async def fetch(self, url: str) -> bytes:
        """Return the raw response body or raise TransportError."""
        ...


class DetectorPort(Protocol):
    """Hostname matching against one prepared classification config."""

    def check(self, hostname: str) -> DetectionResult:
        ...


class DetectorFactory(Protocol):
    """Builds a detector from a freshly published config."""

    def __call__(self, config: ClassificationConfig) -> DetectorPort:
        ...
