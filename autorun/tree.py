import os
import logging
from pathlib import Path
from typing import Iterable, List, Union

from .registry import WatchRegistry

PathLike = Union[str, Path]


def watch_tree(registry: WatchRegistry, roots: Iterable[PathLike]) -> List[OSError]:
    """Recursively add a watch for every entry below each of ``roots``.

    Roots are taken as given (a symlinked root is followed), but the walk
    below them never follows symlinks; links inside the tree are watched as
    links. The first failing ``add_watch`` aborts the whole walk by raising
    ``WatchError``. Errors reading directories do not abort it: they are
    logged once at the end and returned.
    """
    walk_errors: List[OSError] = []

    for root in roots:
        root = os.fspath(root)
        registry.add_watch(root)
        if not os.path.isdir(root):
            continue

        for dirpath, dirnames, filenames in os.walk(
            root, onerror=walk_errors.append, followlinks=False
        ):
            for name in dirnames + filenames:
                registry.add_watch(os.path.join(dirpath, name), follow_symlinks=False)

    if walk_errors:
        last = walk_errors[-1]
        logging.error(
            f"walk: {len(walk_errors)} path(s) could not be read, "
            f"last: {last.filename}: {last.strerror}"
        )
    return walk_errors


def watch_files(registry: WatchRegistry, files: Iterable[PathLike]) -> None:
    for path in files:
        registry.add_watch(path)
