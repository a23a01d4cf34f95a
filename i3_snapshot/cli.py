"""
i3 Snapshot CLI

Save and restore window containment in i3-wm.

Usage:
    i3-snapshot > snapshot.txt      Generate a snapshot
    i3-snapshot < snapshot.txt      Replay a snapshot
    i3-snapshot --tree tree.json    Snapshot a saved `i3-msg -t get_tree` dump
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

import click
from rich.console import Console

from . import __version__
from .codec import RecordCodec
from .commander import RestoreCommander
from .connection import I3Connection
from .driver import RunMode, load_tree_file, run_capture, run_restore, select_mode
from .errors import CommandFailure, InvalidTreeState, MalformedRecord, SnapshotError
from .models import SnapshotOptions

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: Enable verbose (DEBUG) logging
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s [%(name)s] %(message)s",
    )


def _fail(console: Console, error: SnapshotError, message: str) -> int:
    logger.debug(f"Error details: {error.to_dict()}")
    _print_error(console, message, error.suggestion)
    return 1


def _print_error(console: Console, message: str, suggestion: Optional[str] = None) -> None:
    # markup=False: i3 criteria such as [con_id=1] look like rich tags
    console.print(message, style="red", markup=False, highlight=False, soft_wrap=True)
    if suggestion:
        console.print(suggestion, style="dim", markup=False, highlight=False, soft_wrap=True)


def _command_echo(stdout: TextIO):
    def echo(command: str) -> None:
        click.echo(f"i3-msg {command}", file=stdout)
    return echo


def execute(
    options: SnapshotOptions,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    """
    Run one capture or restore and return the process exit code.

    This is the only place errors are turned into exit codes.

    Args:
        options: Run options
        stdin: Snapshot input (default: sys.stdin); its binary buffer is read when present
        stdout: Snapshot / debug output (default: sys.stdout)

    Returns:
        0 on success, 1 on any failure
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    console = Console(stderr=True)

    codec = RecordCodec(options.encoding)
    # A tree file is only ever captured from
    mode = select_mode(stdin.isatty(), options.force_capture or options.tree_file is not None)
    logger.debug(f"Running in {mode.value} mode with {options.encoding.value} encoding")

    try:
        if mode == RunMode.CAPTURE:
            if options.tree_file:
                root = load_tree_file(options.tree_file)
            else:
                root = I3Connection.connect().get_tree()
            run_capture(root, codec, stdout)
            return 0

        connection = I3Connection.connect()
        echo = _command_echo(stdout) if options.debug else None
        commander = RestoreCommander(connection, options.addressing, echo=echo)
        # Bytes, so an undecodable line is a record failure like any other
        lines = getattr(stdin, "buffer", stdin)
        summary = run_restore(lines, codec, commander, options.failure_policy)

    except InvalidTreeState as e:
        return _fail(console, e, f"{e.message}, aborting.")
    except (MalformedRecord, CommandFailure) as e:
        return _fail(console, e, f"{e.message}.  Aborting.")
    except SnapshotError as e:
        return _fail(console, e, f"Error: {e.message}")

    if not summary.ok:
        total = summary.applied + summary.failed
        _print_error(console, f"{summary.failed} of {total} windows could not be restored")
        return 1

    return 0


@click.command(
    context_settings=CONTEXT_SETTINGS,
    epilog=(
        "\b\n"
        "Generate a snapshot: i3-snapshot > snapshot.txt\n"
        "Replay a snapshot: i3-snapshot < snapshot.txt"
    ),
)
@click.version_option(__version__, "-v", "--version", prog_name="i3-snapshot", message="%(prog)s version %(version)s")
@click.option("-d", "--debug", is_flag=True, envvar="I3_SNAPSHOT_DEBUG",
              help="Print every i3 command before sending it")
@click.option("-c", "--continue-on-error", is_flag=True, envvar="I3_SNAPSHOT_CONTINUE_ON_ERROR",
              help="Keep restoring after a window fails (exit code still reports the failure)")
@click.option("-r", "--raw-strings", is_flag=True, envvar="I3_SNAPSHOT_RAW_STRINGS",
              help="Write names verbatim with spaces as '_' instead of base64 (lossy)")
@click.option("-t", "--match-by-title", is_flag=True, envvar="I3_SNAPSHOT_MATCH_BY_TITLE",
              help="Select workspaces by name and windows by title instead of by id")
@click.option("-o", "--force-output-mode", is_flag=True, envvar="I3_SNAPSHOT_FORCE_OUTPUT_MODE",
              help="Generate a snapshot even when stdin is not a terminal")
@click.option("--tree", "tree_file", type=click.Path(dir_okay=False, path_type=Path),
              envvar="I3_SNAPSHOT_TREE",
              help="Capture from an `i3-msg -t get_tree` JSON dump instead of the running i3")
@click.pass_context
def cli(
    ctx: click.Context,
    debug: bool,
    continue_on_error: bool,
    raw_strings: bool,
    match_by_title: bool,
    force_output_mode: bool,
    tree_file: Optional[Path],
):
    """Save and restore window containment in i3-wm.

    With a terminal on stdin the current layout is written to stdout.
    With a snapshot piped to stdin the layout is restored.
    """
    options = SnapshotOptions.from_flags(
        debug=debug,
        continue_on_error=continue_on_error,
        raw_strings=raw_strings,
        match_by_title=match_by_title,
        force_output_mode=force_output_mode,
        tree_file=tree_file,
    )
    setup_logging(options.debug)
    ctx.exit(execute(options))


def main(argv: Optional[List[str]] = None) -> None:
    """Console script entry point.

    Usage errors such as unknown flags exit with status 1.
    """
    try:
        code = cli.main(args=argv, prog_name="i3-snapshot", standalone_mode=False)
    except click.ClickException as e:
        e.show()
        code = 1
    except click.Abort:
        click.echo("Aborted!", err=True)
        code = 1

    sys.exit(code or 0)
