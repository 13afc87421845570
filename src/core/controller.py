"""Reputation controller: periodic list refresh plus the public query API.

The refresh cycle follows a strict order:
1) Fetch every configured source concurrently
2) Parse each response into a fragment, skipping failed sources
3) Merge the fragments in source order, only after every fetch resolved
4) Rebuild the detector from the merged config
5) Publish the config to the store

A cycle in which no source succeeded keeps the last published config, so a
network outage never silently clears the blacklist.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Iterable, List, Optional, Set

from core.config import RefreshConfig
from core.errors import DegenerateResultError, ParseError, TransportError
from core.fragments import parse_fragment
from core.merger import merge_fragments
from core.models import ClassificationConfig, DetectionResult, ReputationState
from core.ports import DetectorFactory, DetectorPort, FetcherPort
from core.store import ClassificationStore

LOGGER = logging.getLogger(__name__)


def _normalize_hostname(hostname: Optional[str]) -> str:
    if not hostname:
        return ""
    return hostname.strip().lower()


class ReputationController:
    """Owns the classification store, the detector, and the refresh schedule."""

    def __init__(
        self,
        refresh_config: RefreshConfig,
        fetcher: FetcherPort,
        detector_factory: DetectorFactory,
        initial_config: Optional[ClassificationConfig] = None,
        initial_whitelist: Iterable[str] = (),
        store: Optional[ClassificationStore] = None,
    ) -> None:
        self._refresh = refresh_config
        self._fetcher = fetcher
        self._detector_factory = detector_factory
        if store is None:
            whitelist = [_normalize_hostname(h) for h in initial_whitelist if _normalize_hostname(h)]
            store = ClassificationStore(initial_config or ClassificationConfig(), whitelist)
        self._store = store
        self._detector: DetectorPort = detector_factory(store.read().config)

        self._cycle_counter = itertools.count(1)
        self._published_cycle = 0
        self._poll_task: Optional[asyncio.Task] = None
        self._refresh_tasks: Set[asyncio.Task] = set()

    @property
    def store(self) -> ClassificationStore:
        return self._store

    @property
    def state(self) -> ReputationState:
        """Latest published state, for read-only subscribers."""

        return self._store.read()

    @property
    def is_scheduled(self) -> bool:
        return self._poll_task is not None

    def check_hostname(self, hostname: Optional[str]) -> DetectionResult:
        """Classify a hostname and report which rule decided it."""

        hostname = _normalize_hostname(hostname)
        if not hostname:
            return DetectionResult(result=False, type="empty")

        # The runtime whitelist beats every remote list, including the blacklist.
        if hostname in self._store.read().whitelisted:
            return DetectionResult(result=False, type="whitelist", match=hostname)

        return self._detector.check(hostname)

    def check_for_phishing(self, hostname: Optional[str]) -> bool:
        """Return True when the hostname is on (or near) the phishing lists."""

        return self.check_hostname(hostname).result

    def whitelist_domain(self, hostname: Optional[str]) -> None:
        """Exempt a hostname from phishing checks for the rest of the session."""

        hostname = _normalize_hostname(hostname)
        if not hostname:
            return
        self._store.add_to_whitelist(hostname)
        LOGGER.info("Whitelisted %s", hostname)

    async def _fetch_fragment(self, url: str) -> Optional[ClassificationConfig]:
        try:
            raw = await self._fetcher.fetch(url)
        except TransportError as exc:
            LOGGER.error("Failed to fetch phishing list from %s: %s", url, exc)
            return None

        try:
            return parse_fragment(raw)
        except ParseError as exc:
            LOGGER.error("Failed to parse phishing list from %s: %s", url, exc)
            return None

    async def _collect_fragments(self) -> List[ClassificationConfig]:
        # gather keeps results in source order whatever the completion order.
        results = await asyncio.gather(*(self._fetch_fragment(url) for url in self._refresh.list_urls))
        fragments = [fragment for fragment in results if fragment is not None]
        if not fragments:
            raise DegenerateResultError(
                f"none of {len(self._refresh.list_urls)} phishing list sources could be used"
            )
        return fragments

    def _publish(self, cycle: int, config: ClassificationConfig) -> ClassificationConfig:
        if cycle < self._published_cycle:
            LOGGER.info(
                "Dropping result of refresh cycle %s, cycle %s already published",
                cycle,
                self._published_cycle,
            )
            return self._store.read().config

        detector = self._detector_factory(config)
        # The detector is swapped before the store so subscribers never see a
        # config the detector does not answer for.
        self._detector = detector
        self._store.replace_config(config)
        self._published_cycle = cycle
        LOGGER.info(
            "Updated phishing list: tolerance=%s, fuzzylist=%s, whitelist=%s, blacklist=%s",
            config.tolerance,
            len(config.fuzzylist),
            len(config.whitelist),
            len(config.blacklist),
        )
        return config

    async def update_phishing_list(self) -> ClassificationConfig:
        """Run one refresh cycle and return the published (or retained) config."""

        cycle = next(self._cycle_counter)
        try:
            fragments = await self._collect_fragments()
        except DegenerateResultError as exc:
            LOGGER.warning("Keeping previous phishing list: %s", exc)
            return self._store.read().config

        config = merge_fragments(fragments, dedup=self._refresh.dedup_lists)
        return self._publish(cycle, config)

    async def _run_cycle(self) -> None:
        try:
            await self.update_phishing_list()
        except Exception:
            LOGGER.exception("Scheduled phishing list update failed")

    def _start_cycle(self) -> None:
        task = asyncio.get_running_loop().create_task(self._run_cycle())
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self._refresh.polling_interval)
            # Cycle starts are spaced by the interval, not by cycle duration.
            self._start_cycle()

    def schedule_updates(self) -> None:
        """Refresh now and then every polling interval; a no-op when already scheduled.

        Must be called from within a running event loop.
        """

        if self._poll_task is not None:
            return
        self._start_cycle()
        self._poll_task = asyncio.get_running_loop().create_task(self._poll())
        LOGGER.info("Scheduled phishing list updates every %s seconds", self._refresh.polling_interval)

    async def stop(self) -> None:
        """Cancel the schedule and any in-flight refresh cycles."""

        tasks = list(self._refresh_tasks)
        if self._poll_task is not None:
            tasks.append(self._poll_task)
            self._poll_task = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
