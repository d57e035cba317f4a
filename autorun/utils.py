import os
import stat
import sys
from enum import Enum
from pathlib import Path
from typing import Union

import typer


class PathKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


def classify_path(path: Union[str, Path]) -> PathKind:
    """Return whether ``path`` is a regular file, a directory, or neither.

    Symlinks are followed. ``OSError`` from ``stat`` propagates so callers can
    report the underlying errno.
    """
    mode = os.stat(path).st_mode
    if stat.S_ISREG(mode):
        return PathKind.FILE
    if stat.S_ISDIR(mode):
        return PathKind.DIRECTORY
    return PathKind.OTHER


# Erase the display and move the cursor home
CLEAR_SEQUENCE = "\033[2J\033[1;1H"


def clear_screen() -> None:
    # Only meaningful on a terminal; keep piped output clean
    if sys.stdout.isatty():
        typer.echo(CLEAR_SEQUENCE, nl=False, color=True)
