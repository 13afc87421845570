"""Static configuration for lookout.

All user-editable settings (list sources, refresh cadence, the bundled
phishing config, logging) live in a single JSON file for quick edits without
touching Python.
"""

import json
import os

from dotenv import load_dotenv

from core.config import DEFAULT_POLLING_INTERVAL
from core.fragments import fragment_from_dict

load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# LOOKOUT_CONFIG points at an alternative config.json (e.g. per deployment).
CONFIG_PATH = os.getenv("LOOKOUT_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")

DEFAULT_LIST_URLS = [
    "https://api.infura.io/v2/blacklist",
    "https://raw.githubusercontent.com/Smilo-platform/SmiloWallet-extension/develop/app/phishing-config.json",
]


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _normalize_sources(raw_sources: list[dict]) -> list[str]:
    """Return enabled source URLs in configured order, without repeats."""

    urls: list[str] = []
    for entry in raw_sources:
        url = entry.get("url")
        if not url:
            continue
        if not entry.get("enabled", True):
            continue
        if url not in urls:
            urls.append(url)
    return urls


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Sources are fetched and merged in this order on every refresh cycle.
if "sources" in _CONFIG:
    LIST_URLS = _normalize_sources(_CONFIG["sources"])
else:
    LIST_URLS = list(DEFAULT_LIST_URLS)

# Refresh cadence and transport settings.
# - POLLING_INTERVAL_SECONDS: time between cycle starts
# - FETCH_TIMEOUT_SECONDS: per-request timeout handed to the HTTP client
# - DEDUP_LISTS: drop repeated domains after merging (memory only)
_refresh = _CONFIG.get("refresh", {})
POLLING_INTERVAL_SECONDS = float(_refresh.get("polling_interval_seconds", DEFAULT_POLLING_INTERVAL))
FETCH_TIMEOUT_SECONDS = float(_refresh.get("fetch_timeout_seconds", 30))
DEDUP_LISTS = bool(_refresh.get("dedup_lists", False))
USER_AGENT = _refresh.get("user_agent", "lookout/1.0 PhishingList")

# Bundled config used until the first successful refresh. It goes through the
# same validation as remote fragments so a typo fails at startup.
INITIAL_PHISHING = fragment_from_dict(_CONFIG.get("phishing", {"tolerance": 0}))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
