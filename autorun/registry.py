import os
import logging
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Union

from inotify_simple import Event, INotify, flags, parse_events

from .errors import SetupError, WatchError

WATCH_MASK = (
    flags.CREATE | flags.DELETE | flags.MODIFY | flags.MOVED_FROM | flags.MOVED_TO
)


class WatchEntry(NamedTuple):
    path: str
    follow_symlinks: bool


class WatchRegistry:
    """Map inotify watch descriptors back to the paths they watch.

    One instance owns one inotify descriptor. Every watch added through it is
    released again by ``close()``.
    """

    def __init__(self) -> None:
        self._inotify: Optional[INotify] = None
        self._watches: Dict[int, WatchEntry] = {}

    def open(self) -> "WatchRegistry":
        if self._inotify is not None:
            return self
        try:
            self._inotify = INotify()
        except OSError as e:
            raise SetupError(f"inotify_init: {e.strerror}", e.errno) from e
        logging.debug(f"inotify descriptor {self._inotify.fileno()} opened")
        return self

    def __enter__(self) -> "WatchRegistry":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()

    @property
    def inotify(self) -> INotify:
        if self._inotify is None:
            raise RuntimeError("watch registry is not open")
        return self._inotify

    def descriptor(self) -> int:
        return self.inotify.fileno()

    def add_watch(self, path: Union[str, Path], follow_symlinks: bool = True) -> int:
        path = os.fspath(path)
        mask = WATCH_MASK if follow_symlinks else WATCH_MASK | flags.DONT_FOLLOW
        try:
            wd = self.inotify.add_watch(path, mask)
        except OSError as e:
            raise WatchError(path, e.errno) from e
        self._watches[wd] = WatchEntry(path, follow_symlinks)
        logging.debug(f"watch {wd} -> {path}")
        return wd

    def resolve(self, handle: int) -> Optional[str]:
        entry = self._watches.get(handle)
        return entry.path if entry is not None else None

    def forget(self, handle: int) -> Optional[str]:
        """Drop ``handle`` without asking the kernel; it is already gone there."""
        entry = self._watches.pop(handle, None)
        return entry.path if entry is not None else None

    def rearm(self, handle: int) -> Optional[int]:
        """Re-register the path of a watch the kernel removed on its own.

        The path is watched again the way it was first added (a link added
        without following stays a link watch). Returns the new handle, or None
        when the path is unknown or can no longer be watched. Either way the
        stale handle is no longer tracked.
        """
        entry = self._watches.get(handle)
        if entry is None:
            logging.warning(f"Cannot re-arm watch {handle}: no path recorded")
            return None

        try:
            wd = self.add_watch(entry.path, follow_symlinks=entry.follow_symlinks)
        except WatchError as e:
            self.forget(handle)
            if e.missing:
                logging.warning(f"Stopped watching {entry.path}: it no longer exists")
            else:
                logging.warning(f"Failed to re-arm watch on {entry.path}: {e}")
            return None

        if wd != handle:
            self.forget(handle)
        logging.info(f"Re-armed watch on {entry.path} ({handle} -> {wd})")
        return wd

    def read_events(self, size: int) -> List[Event]:
        """Read at most ``size`` bytes of queued events in one call."""
        data = os.read(self.descriptor(), size)
        return parse_events(data)

    def paths(self) -> List[str]:
        return [entry.path for entry in self._watches.values()]

    def __len__(self) -> int:
        return len(self._watches)

    def __contains__(self, path: object) -> bool:
        if isinstance(path, Path):
            path = os.fspath(path)
        return path in self.paths()

    def close(self) -> None:
        if self._inotify is None:
            return

        for wd, entry in list(self._watches.items()):
            try:
                self._inotify.rm_watch(wd)
            except OSError as e:
                logging.warning(f"inotify rm_watch {entry.path}: {e.strerror}")
        self._watches.clear()

        try:
            self._inotify.close()
        except OSError as e:
            logging.error(f"close: {e.strerror}")
        self._inotify = None
