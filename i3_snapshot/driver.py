"""
Capture and restore runs

Mode selection and the two run loops. Errors propagate as SnapshotError
subclasses; turning them into exit codes is left to the CLI.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, TextIO, Union

from pydantic import ValidationError

from .codec import RecordCodec
from .commander import RestoreCommander
from .errors import CommandFailure, ErrorCode, MalformedRecord, SnapshotError
from .models import CaptureRecord, Container, FailurePolicy
from .tree_walker import capture

logger = logging.getLogger(__name__)


class RunMode(str, Enum):
    """Which way data flows for this invocation"""
    CAPTURE = "capture"
    RESTORE = "restore"


def select_mode(stdin_is_tty: bool, force_capture: bool = False) -> RunMode:
    """
    Pick the run mode.

    A terminal on stdin means nothing is being piped in, so the current
    layout is captured. Piped or redirected input is a snapshot to restore.

    Args:
        stdin_is_tty: Whether standard input is a terminal
        force_capture: Capture even when stdin is not a terminal

    Returns:
        RunMode for this invocation
    """
    if force_capture or stdin_is_tty:
        return RunMode.CAPTURE
    return RunMode.RESTORE


def load_tree_file(path: Path) -> Container:
    """
    Load a container tree saved with ``i3-msg -t get_tree``.

    Args:
        path: JSON file path

    Returns:
        Root container

    Raises:
        SnapshotError: If the file cannot be read, is not valid JSON or is
            not a container tree
    """
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise _unreadable_tree(path, e) from e

    try:
        return Container.from_tree_dict(data)
    except (AttributeError, TypeError, ValidationError) as e:
        raise _unreadable_tree(path, f"not a GET_TREE document ({e})") from e


def _unreadable_tree(path: Path, reason) -> SnapshotError:
    return SnapshotError(
        code=ErrorCode.TREE_FILE_UNREADABLE,
        message=f"Cannot read tree file {path}: {reason}",
        context={"path": str(path)}
    )


def run_capture(root: Container, codec: RecordCodec, out: TextIO) -> List[CaptureRecord]:
    """
    Write one snapshot line per window under root.

    Args:
        root: Root of the container tree
        codec: Codec selecting the text encoding
        out: Stream receiving the snapshot

    Returns:
        The records written

    Raises:
        InvalidTreeState: Before any line is written, if the tree is malformed
    """
    records = capture(root)
    for line in codec.encode_all(records):
        out.write(line + "\n")
    out.flush()
    return records


@dataclass
class RestoreSummary:
    """Outcome of a restore run"""
    applied: int = 0
    failed: int = 0
    skipped_blank: int = 0

    @property
    def ok(self) -> bool:
        return self.failed == 0


def run_restore(
    lines: Iterable[Union[str, bytes]],
    codec: RecordCodec,
    commander: RestoreCommander,
    policy: FailurePolicy = FailurePolicy.FAIL_FAST,
) -> RestoreSummary:
    """
    Replay snapshot lines through the commander.

    Blank lines are ignored. A line that does not decode and a record whose
    commands fail are both record failures: fail-fast re-raises the first
    one, continue logs it and moves on to the next line.

    Args:
        lines: Snapshot lines, text or bytes (e.g. sys.stdin.buffer)
        codec: Codec matching the one used at capture time
        commander: Commander bound to the i3 connection
        policy: Failure policy

    Returns:
        RestoreSummary with applied and failed counts

    Raises:
        MalformedRecord: Under fail-fast, on the first undecodable line
        CommandFailure: Under fail-fast, on the first rejected move
    """
    summary = RestoreSummary()

    for line_number, raw_line in enumerate(lines, start=1):
        try:
            line = _line_text(raw_line, line_number)
        except MalformedRecord as e:
            _record_failure(e, policy, summary)
            continue

        if not line.strip():
            summary.skipped_blank += 1
            continue

        try:
            record = codec.decode(line, line_number)
        except MalformedRecord as e:
            _record_failure(e, policy, summary)
            continue

        if commander.apply(record):
            summary.applied += 1
        else:
            _record_failure(
                CommandFailure(record.window_id, record.window_title, commander.last_command),
                policy,
                summary,
            )

    logger.info(f"Restore finished: {summary.applied} applied, {summary.failed} failed")
    return summary


def _line_text(raw_line: Union[str, bytes], line_number: int) -> str:
    # Snapshots are read as bytes so one bad line cannot abort the stream
    if isinstance(raw_line, str):
        return raw_line
    try:
        return raw_line.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedRecord(
            f"line is not UTF-8: {e}", raw_line.decode("utf-8", errors="replace"), line_number
        ) from e


def _record_failure(error: SnapshotError, policy: FailurePolicy, summary: RestoreSummary) -> None:
    summary.failed += 1
    if policy == FailurePolicy.FAIL_FAST:
        raise error
    logger.error(f"{error.message}. Continuing.")
