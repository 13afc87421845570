"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# Every four minutes.
DEFAULT_POLLING_INTERVAL = 4 * 60.0


@dataclass(frozen=True)
class RefreshConfig:
    """Refresh cycle settings consumed by the reputation controller."""

    list_urls: Tuple[str, ...]
    polling_interval: float = DEFAULT_POLLING_INTERVAL
    dedup_lists: bool = False
