import logging
from pathlib import Path
from typing import List, Optional, Sequence

import typer
from typer.core import TyperCommand

from . import __version__
from .command import build_command, run_command
from .errors import AutorunError, LoopError, SetupError
from .handlers import EventProcessor
from .multiplexer import EventMultiplexer
from .registry import WatchRegistry
from .tree import watch_files, watch_tree
from .utils import PathKind, classify_path, clear_screen


TARGET_OPTIONS = {"-f": "-f", "--file": "-f", "-d": "-d", "--dir": "-d"}
VALUE_OPTIONS = {"--loglevel"}


def expand_target_lists(args: Sequence[str]) -> List[str]:
    """Repeat the last -f/-d before every bare path given ahead of '--'.

    '-f a.c b.c -d src lib -- make' becomes
    '-f a.c -f b.c -d src -d lib -- make'. Bare paths before any -f/-d are
    files. Without '--' the arguments are left alone and the first bare
    argument starts the command.
    """
    args = list(args)
    if "--" not in args:
        return args

    split = args.index("--")
    expanded: List[str] = []
    current = "-f"
    tokens = iter(args[:split])
    for token in tokens:
        name = token.split("=", 1)[0]
        if name in TARGET_OPTIONS or name in VALUE_OPTIONS:
            current = TARGET_OPTIONS.get(name, current)
            expanded.append(token)
            if "=" not in token:
                value = next(tokens, None)
                if value is not None:
                    expanded.append(value)
        elif token[:2] in ("-f", "-d") and len(token) > 2:
            # Attached value, e.g. -fa.c
            current = token[:2]
            expanded.append(token)
        elif token.startswith("-"):
            expanded.append(token)
        else:
            expanded.extend([current, token])
    return expanded + args[split:]


class TargetListCommand(TyperCommand):
    def parse_args(self, ctx, args):
        return super().parse_args(ctx, expand_target_lists(args))


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    context_settings={
        "help_option_names": ["-h", "--help"],
        # Without '--', everything after the first positional is the command
        "allow_interspersed_args": False,
    },
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"autorun version {__version__}")
        raise typer.Exit()


def check_target(path: Path, expected: PathKind) -> None:
    try:
        kind = classify_path(path)
    except OSError as e:
        raise SetupError(f"{path}: {e.strerror}", e.errno) from e
    if kind is not expected:
        raise SetupError(f"{path} is not a {expected.value}.")


def watch(
    files: List[Path],
    dirs: List[Path],
    command: str,
    clear: bool = False,
) -> None:
    """Register every target, then run ``command`` after each batch of events.

    Returns on Ctrl-C. Fatal setup and loop failures raise ``AutorunError``.
    """
    with WatchRegistry() as registry, EventMultiplexer() as multiplexer:
        if dirs:
            watch_tree(registry, dirs)
        if files:
            watch_files(registry, files)
        logging.info(f"Watching {len(registry)} path(s)")

        multiplexer.register(registry.descriptor())

        reset = clear_screen if clear else None
        processor = EventProcessor(registry, command, runner=run_command, clear=reset)
        if reset is not None:
            reset()

        try:
            multiplexer.run(processor)
        except KeyboardInterrupt:
            logging.info("Stopping watcher...")
            return

        if processor.error is not None:
            e = processor.error
            raise LoopError(f"read: {e.strerror}", e.errno)


@app.command(cls=TargetListCommand)
def main(
    command: List[str] = typer.Argument(
        ...,
        metavar="COMMAND...",
        help="The command that will be run when an event is detected",
    ),
    files: Optional[List[Path]] = typer.Option(
        None,
        "--file",
        "-f",
        help="File whose events will trigger COMMAND (repeatable)",
        envvar="AUTORUN_FILES",
    ),
    dirs: Optional[List[Path]] = typer.Option(
        None,
        "--dir",
        "-d",
        help="Directory whose files and subdirectories will trigger COMMAND "
        "(repeatable; '.' when no --file or --dir is given)",
        envvar="AUTORUN_DIRS",
    ),
    loglevel: str = typer.Option(
        "WARNING",
        "--loglevel",
        help="Logging level: DEBUG, INFO, WARNING, ERROR",
        envvar="AUTORUN_LOGLEVEL",
    ),
    clear: Optional[bool] = typer.Option(
        None,
        "--clear/--no-clear",
        help="Clear the terminal before each run (auto: off with DEBUG logging)",
        envvar="AUTORUN_CLEAR",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show the current version and exit",
    ),
):
    """Run COMMAND every time a watched file or directory changes.

    Directories are watched recursively; directories created later are picked
    up as they appear. Several paths may follow one -f or -d when COMMAND
    is separated by '--', e.g. autorun -f a.c b.c -d src lib -- make.
    """
    level = getattr(logging, loglevel.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    if clear is None:
        clear = level > logging.DEBUG

    files = list(files or [])
    dirs = list(dirs or [])
    if not files and not dirs:
        dirs = [Path(".")]

    try:
        for path in dirs:
            check_target(path, PathKind.DIRECTORY)
        for path in files:
            check_target(path, PathKind.FILE)
        watch(files, dirs, build_command(command), clear=clear)
    except AutorunError as e:
        logging.error(f"autorun: {e}")
        raise typer.Exit(code=e.errno)


if __name__ == "__main__":
    app()
