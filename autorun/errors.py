import errno as errno_codes
import os
from typing import Optional


class AutorunError(Exception):
    """Base error; ``errno`` becomes the process exit code."""

    def __init__(self, message: str, errno: Optional[int] = None) -> None:
        super().__init__(message)
        self.errno = errno or 1


class SetupError(AutorunError):
    """Fatal before the event loop starts."""


class LoopError(AutorunError):
    """Fatal inside the event loop."""


class WatchError(AutorunError):
    """A watch could not be added for ``path``."""

    def __init__(self, path: str, errno: Optional[int] = None) -> None:
        reason = os.strerror(errno) if errno else "unknown error"
        super().__init__(f"inotify add_watch {path}: {reason}", errno)
        self.path = path

    @property
    def missing(self) -> bool:
        return self.errno == errno_codes.ENOENT
