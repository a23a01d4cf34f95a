"""Restore command synthesis.

Each capture record becomes two i3 commands, sent in order:

    [con_id=<workspace_id>] move workspace to output "<output>"
    [con_id=<window_id>] move container to workspace "<workspace>"

The window is moved only after its workspace has landed on the right output.
With title addressing the criteria become [workspace="..."] and [title="..."]
regexes built from the recorded names.
"""

import logging
import re
from typing import Callable, Optional, Protocol

from .models import AddressingMode, CaptureRecord

logger = logging.getLogger(__name__)


class CommandSender(Protocol):
    """Anything that can run an i3 command and report success."""

    def send_command(self, command: str) -> bool:
        ...


def quote(value: str) -> str:
    """Quote a string argument for the i3 command parser."""
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def exact_match(value: str) -> str:
    """Anchored regex matching exactly value (i3 criteria are PCRE)."""
    return quote("^" + re.escape(value) + "$")


def build_workspace_command(record: CaptureRecord, addressing: AddressingMode) -> str:
    """Command moving the record's workspace to its output."""
    if addressing == AddressingMode.TITLE:
        criteria = f"[workspace={exact_match(record.workspace_name)}]"
    else:
        criteria = f"[con_id={record.workspace_id}]"
    return f"{criteria} move workspace to output {quote(record.output_name)}"


def build_window_command(record: CaptureRecord, addressing: AddressingMode) -> str:
    """Command moving the record's window into its workspace."""
    if addressing == AddressingMode.TITLE:
        criteria = f"[title={exact_match(record.window_title)}]"
    else:
        criteria = f"[con_id={record.window_id}]"
    return f"{criteria} move container to workspace {quote(record.workspace_name)}"


class RestoreCommander:
    """Reapplies capture records through an i3 connection."""

    def __init__(
        self,
        connection: CommandSender,
        addressing: AddressingMode = AddressingMode.ID,
        echo: Optional[Callable[[str], None]] = None,
    ) -> None:
        """Initialize commander.

        Args:
            connection: Object providing send_command(str) -> bool
            addressing: Select workspaces/windows by id or by name/title
            echo: Called with every command before it is sent (debug mode)
        """
        self.connection = connection
        self.addressing = addressing
        self.echo = echo
        self.last_command: Optional[str] = None

    def apply(self, record: CaptureRecord) -> bool:
        """Move the record's workspace to its output, then its window into the workspace.

        Args:
            record: Placement to restore

        Returns:
            True if both commands succeeded. The window command is not sent
            when the workspace command fails.
        """
        ws_cmd = build_workspace_command(record, self.addressing)
        if not self._send(ws_cmd):
            logger.debug(f"Workspace move failed for window {record.window_id}, skipping window move")
            return False

        window_cmd = build_window_command(record, self.addressing)
        if not self._send(window_cmd):
            return False

        logger.debug(
            f"Restored window {record.window_id} to workspace {record.workspace_name} "
            f"on {record.output_name}"
        )
        return True

    def _send(self, command: str) -> bool:
        self.last_command = command
        if self.echo:
            self.echo(command)
        return self.connection.send_command(command)
