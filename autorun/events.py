"""inotify event classification.

The kernel may set several bits in one mask. ``EVENT_LABELS`` fixes the order
in which they are tested; the first match names the event in diagnostics.
"""

from typing import Tuple

from inotify_simple import flags

EVENT_LABELS: Tuple[Tuple[flags, str], ...] = (
    (flags.ACCESS, "IN_ACCESS"),
    (flags.ATTRIB, "IN_ATTRIB"),
    (flags.CLOSE_WRITE, "IN_CLOSE_WRITE"),
    (flags.CLOSE_NOWRITE, "IN_CLOSE_NOWRITE"),
    (flags.CREATE, "IN_CREATE"),
    (flags.DELETE, "IN_DELETE"),
    (flags.DELETE_SELF, "IN_DELETE_SELF"),
    (flags.MODIFY, "IN_MODIFY"),
    (flags.MOVE_SELF, "IN_MOVE_SELF"),
    (flags.MOVED_FROM, "IN_MOVED_FROM"),
    (flags.MOVED_TO, "IN_MOVED_TO"),
    (flags.OPEN, "IN_OPEN"),
    (flags.IGNORED, "IN_IGNORED"),
    (flags.ONLYDIR, "IN_ONLYDIR"),
    (flags.DONT_FOLLOW, "IN_DONT_FOLLOW"),
    (flags.EXCL_UNLINK, "IN_EXCL_UNLINK"),
    (flags.MASK_ADD, "IN_MASK_ADD"),
    (flags.ONESHOT, "IN_ONESHOT"),
)

UNKNOWN = "Unknown"

# The kernel dropped the watch (or the whole queue) on its own
FORCED_REMOVAL = flags.IGNORED | flags.Q_OVERFLOW


def classify_event(mask: int) -> str:
    for flag, label in EVENT_LABELS:
        if mask & flag:
            return label
    return UNKNOWN


def describe_mask(mask: int) -> str:
    """All flags set in ``mask``, e.g. ``IN_CREATE|IN_ISDIR``."""
    names = [f"IN_{flag.name}" for flag in flags.from_mask(mask)]
    return "|".join(names) if names else UNKNOWN


def is_forced_removal(mask: int) -> bool:
    return bool(mask & FORCED_REMOVAL)


def is_new_directory(mask: int) -> bool:
    return bool(mask & flags.CREATE) and bool(mask & flags.ISDIR)
