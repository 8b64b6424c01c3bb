"""
File change notification for the config file.

WatchdogSource turns watchdog events for a single path into ChangeEvent
values on a blocking queue. The watch is bound to the path, not to the file
object: the parent directory is watched for the life of the source and events
are filtered by path, so editors that remove the file or rename a temporary
file over it keep being observed. Re-arming rebinds the filter to the path
without ever dropping the directory subscription, so no event is lost
between two arms.
"""

from __future__ import annotations

import logging
import os
import queue
from dataclasses import dataclass
from typing import Optional

from watchdog.events import (
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .exceptions import WatchError

logger = logging.getLogger(__name__)


# Event kinds
MODIFIED = "modified"
CREATED = "created"
MOVED = "moved"
DELETED = "deleted"
OTHER = "other"

# Open and close notifications carry no content change
IGNORED_EVENT_TYPES = ("opened", "closed", "closed_no_write")

# Only these event classes are delivered by the observer
WATCHED_EVENTS = [FileModifiedEvent, FileCreatedEvent, FileMovedEvent, FileDeletedEvent]


@dataclass(frozen=True)
class ChangeEvent:
    """A change notification for the watched path."""

    kind: str
    path: str
    dest_path: Optional[str] = None

    @property
    def is_write(self) -> bool:
        """True if the event means the file's content may have changed."""
        if self.kind in (MODIFIED, CREATED):
            return True
        if self.kind == MOVED:
            return self.dest_path is not None and self.dest_path == self.path
        return False


def _normalize(path) -> str:
    if isinstance(path, bytes):
        path = os.fsdecode(path)
    return os.path.abspath(path)


def classify_event(event: FileSystemEvent, target: str) -> Optional[ChangeEvent]:
    """
    Map a watchdog event onto a ChangeEvent for the target path.

    Returns None for events about other entries in the directory.
    """
    if event.is_directory or event.event_type in IGNORED_EVENT_TYPES:
        return None

    target = _normalize(target)
    src = _normalize(event.src_path)
    dest = getattr(event, "dest_path", "") or ""
    dest = _normalize(dest) if dest else None

    if event.event_type == MOVED:
        if dest == target:
            # Rename over the target: the new content now lives at the path
            return ChangeEvent(kind=MOVED, path=target, dest_path=dest)
        if src == target:
            return ChangeEvent(kind=DELETED, path=target)
        return None

    if src != target:
        return None

    if event.event_type in (MODIFIED, CREATED, DELETED):
        return ChangeEvent(kind=event.event_type, path=target)
    return ChangeEvent(kind=OTHER, path=target)


class _QueueHandler(FileSystemEventHandler):
    """Forwards events for the current target path onto a queue."""

    def __init__(self, events: "queue.Queue[ChangeEvent]"):
        super().__init__()
        self.events = events
        self.target: Optional[str] = None

    def on_any_event(self, event: FileSystemEvent) -> None:
        target = self.target
        if target is None:
            return
        change = classify_event(event, target)
        if change is not None:
            self.events.put(change)


class WatchdogSource:
    """
    Change-notification channel for a single file, backed by watchdog.

    The observer watches the file's parent directory (non-recursive) and
    filters events down to the file. The file itself may be missing between
    a remove and a recreate; only an unwatchable directory is an error.
    """

    def __init__(self, observer=None):
        self.events: "queue.Queue[ChangeEvent]" = queue.Queue()
        self.observer = observer if observer is not None else Observer()
        self._handler = _QueueHandler(self.events)
        self._watch = None
        self._watch_dir: Optional[str] = None
        self._started = False

    def _subscribe(self, directory: str) -> None:
        if self._watch is not None:
            self.observer.unschedule(self._watch)
            self._watch = None
        self._watch = self.observer.schedule(
            self._handler,
            directory,
            recursive=False,
            event_filter=WATCHED_EVENTS,
        )
        self._watch_dir = directory
        if not self._started:
            self.observer.start()
            self._started = True

    def arm(self, path: str) -> None:
        """
        Bind the watch to the path.

        The directory subscription is created on the first call and kept
        afterwards; later calls rebind the path filter and check that the
        subscription is still alive.

        Raises:
            WatchError: If the parent directory cannot be watched
        """
        target = os.path.abspath(path)
        directory = os.path.dirname(target)

        if not os.path.isdir(directory):
            raise WatchError(f"cannot watch {path}: directory {directory} does not exist", path=path)

        if self._started and not self.observer.is_alive():
            raise WatchError(f"cannot watch {path}: observer has stopped", path=path)

        if self._watch_dir != directory:
            try:
                self._subscribe(directory)
            except OSError as e:
                raise WatchError(f"cannot watch {path}: {e}", path=path) from e
            logger.debug(f"Watching {directory} for changes to {target}")

        self._handler.target = target

    def next_event(self, timeout: Optional[float] = None) -> ChangeEvent:
        """Block until the next change event is delivered."""
        return self.events.get(timeout=timeout)

    def close(self) -> None:
        """Stop the observer thread."""
        if self._started:
            self.observer.stop()
            self.observer.join()
            self._started = False
        self._watch = None
        self._watch_dir = None
