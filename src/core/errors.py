"""Error taxonomy for the reputation core."""

from __future__ import annotations


class ReputationError(Exception):
    """Base class for all errors raised by lookout."""


class TransportError(ReputationError):
    """A list source was unreachable, timed out, or answered with a non-2xx status."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url


class ParseError(ReputationError):
    """A list source answered with a payload that is not a valid fragment."""


class DegenerateResultError(ReputationError):
    """No source produced a usable fragment during a refresh cycle."""
