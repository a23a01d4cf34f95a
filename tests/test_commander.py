"""
Restore commander tests.

Tests cover:
- Command strings for id and title addressing
- Ordering: the window move is only sent after a successful workspace move
- Debug echo of every command
"""

import re
from unittest.mock import MagicMock, call

import pytest

from i3_snapshot.commander import (
    RestoreCommander,
    build_window_command,
    build_workspace_command,
    exact_match,
    quote,
)
from i3_snapshot.models import AddressingMode, CaptureRecord


@pytest.fixture
def record():
    return CaptureRecord(output_name="eDP-1", workspace_name="1: web", workspace_id=20,
                         window_id=100, window_title="Mozilla Firefox")


class TestCommandStrings:
    """Test i3 command synthesis."""

    def test_workspace_command_by_id(self, record):
        assert build_workspace_command(record, AddressingMode.ID) == \
            '[con_id=20] move workspace to output "eDP-1"'

    def test_window_command_by_id(self, record):
        assert build_window_command(record, AddressingMode.ID) == \
            '[con_id=100] move container to workspace "1: web"'

    def test_workspace_command_by_name(self, record):
        assert build_workspace_command(record, AddressingMode.TITLE) == \
            '[workspace="^1:\\\\ web$"] move workspace to output "eDP-1"'

    def test_window_command_by_title(self, record):
        assert build_window_command(record, AddressingMode.TITLE) == \
            '[title="^Mozilla\\\\ Firefox$"] move container to workspace "1: web"'

    def test_quote_escapes_double_quotes(self):
        assert quote('say "hi"') == '"say \\"hi\\""'

    def test_quote_escapes_backslashes(self):
        assert quote("C:\\tmp") == '"C:\\\\tmp"'
        assert quote('\\"') == '"\\\\\\""'

    def test_exact_match_escapes_regex_metacharacters(self):
        pattern = exact_match("a.b (1) [x]")

        # Undo i3 quoting, then the pattern must match only the literal title
        regex = re.sub(r'\\(["\\])', r'\1', pattern[1:-1])
        assert re.fullmatch(regex, "a.b (1) [x]")
        assert not re.fullmatch(regex, "axb (1) [x]")


class TestApply:
    """Test command ordering and results."""

    def test_both_commands_in_order(self, record, mock_i3_connection):
        commander = RestoreCommander(mock_i3_connection)

        assert commander.apply(record) is True
        assert mock_i3_connection.send_command.call_args_list == [
            call('[con_id=20] move workspace to output "eDP-1"'),
            call('[con_id=100] move container to workspace "1: web"'),
        ]

    def test_window_move_skipped_when_workspace_move_fails(self, record, mock_i3_connection):
        mock_i3_connection.send_command.return_value = False
        commander = RestoreCommander(mock_i3_connection)

        assert commander.apply(record) is False
        mock_i3_connection.send_command.assert_called_once_with(
            '[con_id=20] move workspace to output "eDP-1"'
        )
        assert commander.last_command == '[con_id=20] move workspace to output "eDP-1"'

    def test_window_move_failure(self, record, mock_i3_connection):
        mock_i3_connection.send_command.side_effect = [True, False]
        commander = RestoreCommander(mock_i3_connection)

        assert commander.apply(record) is False
        assert mock_i3_connection.send_command.call_count == 2
        assert commander.last_command == '[con_id=100] move container to workspace "1: web"'

    def test_title_addressing(self, record, mock_i3_connection):
        commander = RestoreCommander(mock_i3_connection, AddressingMode.TITLE)

        commander.apply(record)

        sent = [c.args[0] for c in mock_i3_connection.send_command.call_args_list]
        assert sent[0].startswith("[workspace=")
        assert sent[1].startswith("[title=")


class TestDebugEcho:
    """Test echo of synthesized commands."""

    def test_echo_before_each_send(self, record, mock_i3_connection):
        events = []
        mock_i3_connection.send_command.side_effect = lambda cmd: events.append(("send", cmd)) or True
        commander = RestoreCommander(mock_i3_connection, echo=lambda cmd: events.append(("echo", cmd)))

        commander.apply(record)

        assert [kind for kind, _ in events] == ["echo", "send", "echo", "send"]
        assert events[0][1] == events[1][1]

    def test_echo_even_when_command_fails(self, record, mock_i3_connection):
        mock_i3_connection.send_command.return_value = False
        echo = MagicMock()
        commander = RestoreCommander(mock_i3_connection, echo=echo)

        commander.apply(record)

        echo.assert_called_once_with('[con_id=20] move workspace to output "eDP-1"')
