"""autorun: run a command whenever watched files or directories change.

Exports:
- app, main: Typer CLI entrypoints (from autorun.cli)
- WatchRegistry: inotify watch descriptor bookkeeping (from autorun.registry)
- watch_tree, watch_files: initial watch registration (from autorun.tree)
- EventMultiplexer: epoll wait loop (from autorun.multiplexer)
- EventProcessor: per-wakeup event handling (from autorun.handlers)
- classify_event: diagnostic event labels (from autorun.events)
- run_command: shell command runner (from autorun.command)
"""

__version__ = "0.1.0"

from .cli import app, main  # noqa: F401,E402
from .command import build_command, run_command  # noqa: F401,E402
from .errors import AutorunError, LoopError, SetupError, WatchError  # noqa: F401,E402
from .events import classify_event  # noqa: F401,E402
from .handlers import EventProcessor  # noqa: F401,E402
from .multiplexer import EventMultiplexer  # noqa: F401,E402
from .registry import WatchRegistry  # noqa: F401,E402
from .tree import watch_files, watch_tree  # noqa: F401,E402
from .utils import PathKind, classify_path  # noqa: F401,E402

__all__ = [
    "app",
    "main",
    "build_command",
    "run_command",
    "AutorunError",
    "LoopError",
    "SetupError",
    "WatchError",
    "classify_event",
    "EventProcessor",
    "EventMultiplexer",
    "WatchRegistry",
    "watch_files",
    "watch_tree",
    "PathKind",
    "classify_path",
]
