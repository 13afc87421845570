"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any transport or matcher specific types. Every model is frozen:
published state is replaced, never mutated in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Tuple


@dataclass(frozen=True)
class ClassificationConfig:
    """Merged tolerance plus the three domain lists used for matching."""

    tolerance: float = 0
    fuzzylist: Tuple[str, ...] = ()
    whitelist: Tuple[str, ...] = ()
    blacklist: Tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        tolerance: float = 0,
        fuzzylist: Iterable[str] = (),
        whitelist: Iterable[str] = (),
        blacklist: Iterable[str] = (),
    ) -> "ClassificationConfig":
        """Build a config from any iterables, freezing the lists as tuples."""

        return cls(
            tolerance=tolerance,
            fuzzylist=tuple(fuzzylist),
            whitelist=tuple(whitelist),
            blacklist=tuple(blacklist),
        )

    def to_dict(self) -> dict:
        return {
            "tolerance": self.tolerance,
            "fuzzylist": list(self.fuzzylist),
            "whitelist": list(self.whitelist),
            "blacklist": list(self.blacklist),
        }


@dataclass(frozen=True)
class ReputationState:
    """Published store contents: remote config plus the runtime whitelist.

    The runtime whitelist keeps the most recently added hostname first;
    ``whitelisted`` mirrors it as a set for constant-time membership checks.
    """

    config: ClassificationConfig = field(default_factory=ClassificationConfig)
    whitelist: Tuple[str, ...] = ()
    whitelisted: FrozenSet[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "whitelisted", frozenset(self.whitelist))


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of a single hostname check and the rule that decided it."""

    result: bool
    type: str
    match: Optional[str] = None
