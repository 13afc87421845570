"""Folding of per-source fragments into a single classification config."""

from __future__ import annotations

from typing import Iterable, List, Optional

from core.models import ClassificationConfig


def _dedup(entries: Iterable[str]) -> List[str]:
    # dict keeps first-seen order.
    return list(dict.fromkeys(entries))


def merge_fragments(
    fragments: Iterable[ClassificationConfig],
    seed: Optional[ClassificationConfig] = None,
    dedup: bool = False,
) -> ClassificationConfig:
    """Merge fragments in the given order.

    Merge rules:
    - tolerance is the maximum across the seed and all fragments.
    - fuzzylist, whitelist and blacklist are concatenated in fragment order.
    - With dedup, repeated entries keep only their first occurrence; matching
      is membership based so this only saves memory.
    """

    seed = seed or ClassificationConfig()
    tolerance = seed.tolerance
    fuzzylist = list(seed.fuzzylist)
    whitelist = list(seed.whitelist)
    blacklist = list(seed.blacklist)

    for fragment in fragments:
        tolerance = max(tolerance, fragment.tolerance)
        fuzzylist.extend(fragment.fuzzylist)
        whitelist.extend(fragment.whitelist)
        blacklist.extend(fragment.blacklist)

    if dedup:
        fuzzylist, whitelist, blacklist = _dedup(fuzzylist), _dedup(whitelist), _dedup(blacklist)

    return ClassificationConfig.build(
        tolerance=tolerance,
        fuzzylist=fuzzylist,
        whitelist=whitelist,
        blacklist=blacklist,
    )
