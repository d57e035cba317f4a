import logging
import subprocess
from typing import Iterable

# Exit status of a shell that could not be started at all
SHELL_NOT_FOUND = 127


def build_command(args: Iterable[str]) -> str:
    return " ".join(args)


def run_command(command: str) -> int:
    """Run ``command`` through the shell and wait for it.

    Standard streams are inherited. The exit status is returned for logging
    only; callers do not act on it.
    """
    try:
        completed = subprocess.run(command, shell=True, check=False)
    except OSError as e:
        logging.error(f"Failed to run '{command}': {e}")
        return SHELL_NOT_FOUND
    logging.debug(f"'{command}' exited with status {completed.returncode}")
    return completed.returncode
