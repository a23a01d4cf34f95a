"""
Error handling for i3 Snapshot.

Every failure the tool can report carries a structured code so the CLI can
render it consistently and decide the exit status in one place.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for i3 Snapshot.

    Code ranges:
    - 1400-1499: i3 IPC errors
    - 1500-1599: Tree state errors
    - 1600-1699: Snapshot format errors
    """

    # i3 IPC errors (1400-1499)
    I3_NOT_RUNNING = 1400
    I3_IPC_FAILED = 1401
    COMMAND_FAILED = 1402

    # Tree state errors (1500-1599)
    INVALID_TREE_STATE = 1500
    TREE_FILE_UNREADABLE = 1501

    # Snapshot format errors (1600-1699)
    MALFORMED_RECORD = 1600


class SnapshotError(Exception):
    """Base exception for capture and restore errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize snapshot error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class IpcConnectionError(SnapshotError, ConnectionError):
    """The i3 IPC socket could not be reached or stopped answering."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.I3_NOT_RUNNING):
        super().__init__(
            code=code,
            message=message,
            suggestion="Check that i3 is running and I3SOCK points at its IPC socket"
        )


class InvalidTreeState(SnapshotError):
    """A window was found before any enclosing output or workspace."""

    def __init__(
        self,
        window_id: int,
        window_title: str,
        output_name: Optional[str] = None,
        workspace_name: Optional[str] = None,
    ):
        """
        Initialize invalid tree state error.

        Args:
            window_id: Container id of the offending window
            window_title: Title of the offending window
            output_name: Output seen so far on the path (None if unset)
            workspace_name: Workspace seen so far on the path (None if unset)
        """
        super().__init__(
            code=ErrorCode.INVALID_TREE_STATE,
            message=(
                f"Invalid tree state: window {window_id} ({window_title}) "
                f"has no enclosing output and workspace"
            ),
            context={
                "window_id": window_id,
                "window_title": window_title,
                "output_name": output_name,
                "workspace_name": workspace_name,
            }
        )
        self.window_id = window_id
        self.window_title = window_title


class MalformedRecord(SnapshotError):
    """A snapshot line could not be decoded into a capture record."""

    def __init__(
        self,
        reason: str,
        line: str,
        line_number: Optional[int] = None
    ):
        """
        Initialize malformed record error.

        Args:
            reason: What was wrong with the line
            line: The raw line as read
            line_number: 1-based position in the input stream
        """
        location = f"line {line_number}: " if line_number is not None else ""
        context = {"line": line}
        if line_number is not None:
            context["line_number"] = line_number

        super().__init__(
            code=ErrorCode.MALFORMED_RECORD,
            message=f"Malformed record ({location}{reason})",
            suggestion="Snapshot lines must be produced by the same encoding mode (see --raw-strings)",
            context=context
        )
        self.reason = reason
        self.line = line
        self.line_number = line_number


class CommandFailure(SnapshotError):
    """i3 rejected or failed to run a move command for a window."""

    def __init__(self, window_id: int, window_title: str, command: Optional[str] = None):
        """
        Initialize command failure error.

        Args:
            window_id: Container id of the window being restored
            window_title: Title of the window being restored
            command: The command i3 rejected, when known
        """
        context = {"window_id": window_id, "window_title": window_title}
        if command:
            context["command"] = command

        super().__init__(
            code=ErrorCode.COMMAND_FAILED,
            message=f"Failed to move {window_id} ({window_title})",
            context=context
        )
        self.window_id = window_id
        self.window_title = window_title
        self.command = command
