import os
import logging
from typing import Callable, List, Optional

from inotify_simple import Event

from .command import run_command
from .errors import WatchError
from .events import classify_event, describe_mask, is_forced_removal, is_new_directory
from .multiplexer import ReadyList
from .registry import WatchRegistry

# struct inotify_event header (wd, mask, cookie, len) followed by the name
EVENT_HEADER_SIZE = 16
NAME_MAX = 255
# Room for many records and always at least one with the longest name
EVENT_BUFFER_SIZE = 64 * (EVENT_HEADER_SIZE + NAME_MAX + 1)


class EventProcessor:
    """Handle one epoll wakeup: drain events, maintain watches, run the command."""

    def __init__(
        self,
        registry: WatchRegistry,
        command: str,
        runner: Callable[[str], int] = run_command,
        clear: Optional[Callable[[], None]] = None,
        buffer_size: int = EVENT_BUFFER_SIZE,
    ) -> None:
        self.registry = registry
        self.command = command
        self.runner = runner
        self.clear = clear
        self.buffer_size = buffer_size
        self.runs = 0
        self.error: Optional[OSError] = None

    def __call__(self, ready: ReadyList) -> bool:
        fd = self.registry.descriptor()
        if not any(ready_fd == fd for ready_fd, _ in ready):
            return True

        try:
            events = self.registry.read_events(self.buffer_size)
        except OSError as e:
            # The only source we watch is unreadable; nothing left to do
            logging.error(f"read: {e.strerror}")
            self.error = e
            return False

        if not events:
            logging.debug("read: no events")
            return True

        self._log_batch(events)
        for event in events:
            self.process_event(event)

        if self.clear is not None:
            self.clear()
        status = self.runner(self.command)
        self.runs += 1
        logging.debug(f"Run {self.runs} finished with status {status}")
        return True

    def process_event(self, event: Event) -> None:
        """Keep the registry in step with one event record."""
        logging.debug(
            f"Event {classify_event(event.mask)} ({describe_mask(event.mask)}) "
            f"wd={event.wd} name={event.name!r}"
        )

        if is_forced_removal(event.mask):
            self.registry.rearm(event.wd)

        if is_new_directory(event.mask):
            self._watch_new_directory(event)

    def _watch_new_directory(self, event: Event) -> None:
        parent = self.registry.resolve(event.wd)
        if parent is None:
            logging.warning(
                f"New directory {event.name!r} under stale watch {event.wd}; not watched"
            )
            return

        # Only the new directory itself: subdirectories created together with
        # it (mkdir -p) appear before its watch exists and are not walked
        child = os.path.join(parent, event.name)
        try:
            self.registry.add_watch(child)
        except WatchError as e:
            logging.warning(f"Failed to watch new directory: {e}")
            return
        logging.info(f"Watching new directory {child}")

    def _log_batch(self, events: List[Event]) -> None:
        first = events[0]
        path = self.registry.resolve(first.wd) or "?"
        if first.name:
            path = os.path.join(path, first.name)
        logging.info(
            f"Event: {classify_event(first.mask)} Name: {path} "
            f"({len(events)} event(s) in batch)"
        )
