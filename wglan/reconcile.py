"""
Reconciliation loop.

State machine driven by a blocking change-notification source:

    WATCHING --(write event)--> APPLYING --> WATCHING
    WATCHING --(watch registration failure)--> FAILED
    APPLYING --(apply failure)--> FAILED

The watch is re-armed after every event, whether or not it was a write and
whether or not the apply succeeded. Failed applies are not retried; the next
write to the file is the retry.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Protocol

from .apply import apply_interface_config
from .config import RuntimeConfig
from .exceptions import ApplyError, WatchError
from .watcher import ChangeEvent

logger = logging.getLogger(__name__)


class LoopState(str, Enum):
    """Reconciliation loop states."""

    IDLE = "idle"
    WATCHING = "watching"
    APPLYING = "applying"
    FAILED = "failed"


class ChangeSource(Protocol):
    """Anything that can watch a path and hand out change events."""

    def arm(self, path: str) -> None: ...

    def next_event(self) -> ChangeEvent: ...


class ReconciliationLoop:
    """
    Re-applies the config file to the live interface on every write.

    Args:
        config: Runtime settings (the watched path is config.config_path)
        source: Change-notification source
        apply: Called with the config for every write event
    """

    def __init__(
        self,
        config: RuntimeConfig,
        source: ChangeSource,
        apply: Callable[[RuntimeConfig], None] = apply_interface_config,
    ):
        self.config = config
        self.source = source
        self.apply = apply
        self.state = LoopState.IDLE
        self.events_seen = 0
        self.applies = 0

    def _arm(self) -> None:
        try:
            self.source.arm(self.config.config_path)
        except WatchError:
            self.state = LoopState.FAILED
            raise
        self.state = LoopState.WATCHING

    def handle_event(self, event: ChangeEvent) -> None:
        """
        Process one event and re-arm the watch.

        Raises:
            ApplyError: If the event was a write and the apply failed
            WatchError: If the watch could not be re-armed
        """
        self.events_seen += 1
        apply_error: Optional[ApplyError] = None

        if event.is_write:
            self.state = LoopState.APPLYING
            logger.info("Updating the wireguard interface config.")
            self.applies += 1
            try:
                self.apply(self.config)
            except ApplyError as e:
                apply_error = e
        else:
            logger.debug(f"Ignoring {event.kind} event on {event.path}")

        self._arm()

        if apply_error is not None:
            self.state = LoopState.FAILED
            raise ApplyError(
                f"unable to update the config on the interface: {apply_error}",
                argv=apply_error.argv,
                returncode=apply_error.returncode,
                output=apply_error.output,
            ) from apply_error

    def run(self, max_events: Optional[int] = None) -> None:
        """
        Watch the config file and reconcile on every write.

        Only returns when max_events events have been handled; with the
        default of None it runs until an error is raised.
        """
        self._arm()
        logger.info(f"Watching {self.config.config_path} for changes")

        while max_events is None or self.events_seen < max_events:
            event = self.source.next_event()
            self.handle_event(event)
