"""Application entry point for the lookout phishing-list watcher."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import re
from logging.handlers import RotatingFileHandler
from typing import Iterable, Optional
from urllib.parse import parse_qsl, urlsplit

from art import tprint
from dotenv import load_dotenv

import settings
from adapters.levenshtein_detector import PhishingDetector
from adapters.report_formatting import format_config_summary, format_state_summary, format_verdict
from client import build_fetcher
from core.config import RefreshConfig
from core.controller import ReputationController

NAME = "LOOKOUT"
FONT = "tarty-1"

# Query parameters that carry list-provider credentials.
DEFAULT_SECRET_QUERY_PARAMS = ("key", "apikey", "api_key", "token", "access_token", "secret")
# Infura-style project ids travel as a bare hex path segment.
_TOKEN_SEGMENT = re.compile(r"^[0-9a-fA-F]{32,}$")


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _secrets_in_url(url: str, query_params: Iterable[str]) -> list[str]:
    """Return credentials embedded in a list-source URL."""

    parts = urlsplit(url)
    names = {name.lower() for name in query_params}
    secrets = [parts.password or ""]
    secrets.extend(value for name, value in parse_qsl(parts.query) if name.lower() in names)
    secrets.extend(segment for segment in parts.path.split("/") if _TOKEN_SEGMENT.match(segment))
    return [secret for secret in secrets if secret]


def _collect_redaction_values(config: dict, list_urls: Iterable[str]) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("env_vars", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    query_params = redact_cfg.get("url_query_params", DEFAULT_SECRET_QUERY_PARAMS)
    for url in list_urls:
        values.extend(_secrets_in_url(url, query_params))
    # Longest first so a secret containing another is masked whole.
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config, settings.LIST_URLS)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/lookout.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _build_controller(fetcher, initial_whitelist: Optional[list[str]] = None) -> ReputationController:
    # Fail fast: with no sources every cycle would be degenerate.
    if not settings.LIST_URLS:
        raise RuntimeError("config.json must enable at least one phishing list source")

    refresh_config = RefreshConfig(
        list_urls=tuple(settings.LIST_URLS),
        polling_interval=settings.POLLING_INTERVAL_SECONDS,
        dedup_lists=settings.DEDUP_LISTS,
    )
    return ReputationController(
        refresh_config=refresh_config,
        fetcher=fetcher,
        detector_factory=PhishingDetector,
        initial_config=settings.INITIAL_PHISHING,
        initial_whitelist=initial_whitelist or [],
    )


async def _watch() -> None:
    logger = logging.getLogger(__name__)
    fetcher = build_fetcher()
    controller = _build_controller(fetcher)
    logger.info("%s phishing list sources are configured", len(settings.LIST_URLS))

    controller.schedule_updates()
    try:
        # The schedule has no natural end; run until the process is interrupted.
        await asyncio.Event().wait()
    finally:
        await controller.stop()
        await fetcher.aclose()


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting lookout")
    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        logger.info("Stopped lookout")


async def _update_once() -> str:
    fetcher = build_fetcher()
    try:
        controller = _build_controller(fetcher)
        config = await controller.update_phishing_list()
    finally:
        await fetcher.aclose()
    return format_config_summary(config)


def _update() -> None:
    _configure_logging()
    print(asyncio.run(_update_once()))


async def _check_hosts(hostnames: list[str], offline: bool, whitelist: list[str]) -> list[str]:
    fetcher = build_fetcher()
    try:
        controller = _build_controller(fetcher, initial_whitelist=whitelist)
        if not offline:
            await controller.update_phishing_list()
    finally:
        await fetcher.aclose()
    logging.getLogger(__name__).debug("Checking against:\n%s", format_state_summary(controller.state))
    return [format_verdict(hostname, controller.check_hostname(hostname)) for hostname in hostnames]


def _check(hostnames: list[str], offline: bool, whitelist: list[str]) -> int:
    _configure_logging()
    lines = asyncio.run(_check_hosts(hostnames, offline, whitelist))
    for line in lines:
        print(line)
    # Non-zero exit when anything was flagged, for use in shell pipelines.
    return 1 if any(line.startswith("PHISHING") for line in lines) else 0


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="lookout")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Keep the phishing list up to date")
    subparsers.add_parser("update", help="Refresh the phishing list once and print a summary")
    check_parser = subparsers.add_parser("check", help="Classify one or more hostnames")
    check_parser.add_argument("hostnames", nargs="+", metavar="HOST")
    check_parser.add_argument(
        "--offline",
        action="store_true",
        help="Use the bundled config from config.json without fetching sources",
    )
    check_parser.add_argument(
        "--whitelist",
        nargs="*",
        default=[],
        metavar="HOST",
        help="Hostnames to whitelist before checking",
    )

    args = parser.parse_args(argv)
    if args.command == "update":
        _update()
        return
    if args.command == "check":
        raise SystemExit(_check(args.hostnames, args.offline, args.whitelist))
    _run()


if __name__ == "__main__":
    main()
