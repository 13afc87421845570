"""Plain-text formatting for CLI output.

Keeping formatting here prevents drift between commands and keeps the core
free of presentation details.
"""

from __future__ import annotations

from core.models import ClassificationConfig, DetectionResult, ReputationState


def format_verdict(hostname: str, detection: DetectionResult) -> str:
    """Return a one-line verdict such as ``PHISHING  evil.com  (blacklist: evil.com)``."""

    label = "PHISHING" if detection.result else "ok"
    reason = detection.type
    if detection.match and detection.match != hostname:
        reason = f"{reason}: {detection.match}"
    return f"{label:<9} {hostname}  ({reason})"


def format_config_summary(config: ClassificationConfig) -> str:
    lines = [
        f"tolerance: {config.tolerance}",
        f"fuzzylist: {len(config.fuzzylist)} domains",
        f"whitelist: {len(config.whitelist)} domains",
        f"blacklist: {len(config.blacklist)} domains",
    ]
    return "\n".join(lines)


def format_state_summary(state: ReputationState) -> str:
    """Summarize the published config and the runtime whitelist."""

    summary = format_config_summary(state.config)
    if not state.whitelist:
        return f"{summary}\nruntime whitelist: empty"
    return f"{summary}\nruntime whitelist: {', '.join(state.whitelist)}"
