"""Parsing of raw list-source payloads into classification fragments."""

from __future__ import annotations

import json
import math
from typing import Any, List

from core.errors import ParseError
from core.models import ClassificationConfig

LIST_FIELDS = ("fuzzylist", "whitelist", "blacklist")
KNOWN_FIELDS = ("tolerance",) + LIST_FIELDS


def _parse_tolerance(value: Any) -> float:
    # bool is an int subclass but never a meaningful tolerance.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"tolerance must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ParseError(f"tolerance must be finite, got {value}")
    if value < 0:
        raise ParseError(f"tolerance must be non-negative, got {value}")
    return value


def _parse_domain_list(name: str, value: Any) -> List[str]:
    if not isinstance(value, list):
        raise ParseError(f"{name} must be a list, got {type(value).__name__}")
    domains: List[str] = []
    for entry in value:
        if not isinstance(entry, str):
            raise ParseError(f"{name} entries must be strings, got {type(entry).__name__}")
        entry = entry.strip()
        if entry:
            domains.append(entry)
    return domains


def fragment_from_dict(payload: Any) -> ClassificationConfig:
    """Validate a decoded payload and return it as a fragment.

    Missing lists default to empty and a missing tolerance to 0, but an object
    carrying none of the known fields is rejected so that an unrelated JSON
    document never counts as a successful source.
    """

    if not isinstance(payload, dict):
        raise ParseError(f"fragment must be a JSON object, got {type(payload).__name__}")
    if not any(key in payload for key in KNOWN_FIELDS):
        raise ParseError("fragment has none of the fields: " + ", ".join(KNOWN_FIELDS))

    tolerance = _parse_tolerance(payload.get("tolerance", 0))
    lists = {name: _parse_domain_list(name, payload.get(name, [])) for name in LIST_FIELDS}
    return ClassificationConfig.build(tolerance=tolerance, **lists)


def _reject_constant(name: str) -> Any:
    raise ParseError(f"{name} is not valid JSON")


def parse_fragment(raw: bytes) -> ClassificationConfig:
    """Decode a UTF-8 JSON response body into a fragment."""

    try:
        payload = json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError) as exc:
        raise ParseError(f"invalid JSON payload: {exc}") from exc
    return fragment_from_dict(payload)
