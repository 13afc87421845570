"""Process-wide holder of the published reputation state."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, List, Optional

from core.models import ClassificationConfig, ReputationState

LOGGER = logging.getLogger(__name__)

StateListener = Callable[[ReputationState], None]


class ClassificationStore:
    """Atomic-replace store for the classification config and runtime whitelist.

    Readers never lock: ``read`` returns whatever immutable ReputationState is
    currently bound, so a reader sees either the old or the new state, never a
    mix. Writers serialize on a lock so that concurrent whitelist additions and
    config replacements cannot lose each other's update.
    """

    def __init__(
        self,
        config: Optional[ClassificationConfig] = None,
        whitelist: Iterable[str] = (),
    ) -> None:
        self._state = ReputationState(
            config=config or ClassificationConfig(),
            whitelist=tuple(dict.fromkeys(whitelist)),
        )
        self._write_lock = threading.Lock()
        self._listeners: List[StateListener] = []

    def read(self) -> ReputationState:
        return self._state

    def replace_config(self, config: ClassificationConfig) -> ReputationState:
        """Swap in a new config, keeping the runtime whitelist."""

        with self._write_lock:
            state = ReputationState(config=config, whitelist=self._state.whitelist)
            self._state = state
        self._notify(state)
        return state

    def add_to_whitelist(self, hostname: str) -> ReputationState:
        """Add a hostname to the runtime whitelist, most recent first."""

        with self._write_lock:
            current = self._state
            if current.whitelist and current.whitelist[0] == hostname:
                return current
            whitelist = (hostname,) + tuple(h for h in current.whitelist if h != hostname)
            state = ReputationState(config=current.config, whitelist=whitelist)
            self._state = state
        self._notify(state)
        return state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener for published states; returns an unsubscribe callable."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, state: ReputationState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                LOGGER.exception("State listener %r failed", listener)
