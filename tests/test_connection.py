"""
i3 IPC adapter tests with a mocked i3ipc.Connection.
"""

from unittest.mock import MagicMock, patch

import pytest

from i3_snapshot.connection import I3Connection, container_from_con
from i3_snapshot.errors import ErrorCode, IpcConnectionError
from i3_snapshot.models import ContainerKind


def _con(con_id, con_type, name=None, window=None, nodes=None, floating_nodes=None):
    con = MagicMock()
    con.id = con_id
    con.type = con_type
    con.name = name
    con.window = window
    con.nodes = nodes or []
    con.floating_nodes = floating_nodes or []
    return con


def _reply(success, error=None):
    reply = MagicMock()
    reply.success = success
    reply.error = error
    return reply


class TestContainerFromCon:
    """Test i3ipc Con conversion."""

    def test_converts_subtree(self):
        window = _con(100, "con", "term", window=4194307)
        floating = _con(101, "floating_con", floating_nodes=[])
        workspace = _con(10, "workspace", "1", nodes=[window], floating_nodes=[floating])
        output = _con(2, "output", "eDP-1", nodes=[workspace])

        root = container_from_con(output)

        assert root.kind is ContainerKind.OUTPUT
        ws = root.children[0]
        assert ws.kind is ContainerKind.WORKSPACE
        assert [child.id for child in ws.children] == [100, 101]
        assert ws.children[0].is_window
        assert ws.children[0].native_window_id == 4194307

    def test_missing_window_and_name(self):
        container = container_from_con(_con(5, "con"))

        assert container.name == ""
        assert container.native_window_id == 0


class TestI3Connection:
    """Test connection setup, tree query and command replies."""

    def test_connect_failure_raises_ipc_error(self):
        with patch("i3_snapshot.connection.i3ipc.Connection",
                   side_effect=Exception("Failed to retrieve the i3 or sway IPC socket path")):
            with pytest.raises(IpcConnectionError) as exc_info:
                I3Connection.connect()

        assert exc_info.value.code is ErrorCode.I3_NOT_RUNNING
        assert isinstance(exc_info.value, ConnectionError)

    def test_connect_success(self):
        with patch("i3_snapshot.connection.i3ipc.Connection") as mock_cls:
            conn = I3Connection.connect(socket_path="/run/user/1000/i3/ipc-socket.1")

        mock_cls.assert_called_once_with(socket_path="/run/user/1000/i3/ipc-socket.1")
        assert conn.conn is mock_cls.return_value

    def test_get_tree(self):
        i3 = MagicMock()
        i3.get_tree.return_value = _con(1, "root", "root")

        root = I3Connection(i3).get_tree()

        assert root.kind is ContainerKind.ROOT

    def test_get_tree_failure(self):
        i3 = MagicMock()
        i3.get_tree.side_effect = BrokenPipeError("socket closed")

        with pytest.raises(IpcConnectionError) as exc_info:
            I3Connection(i3).get_tree()

        assert exc_info.value.code is ErrorCode.I3_IPC_FAILED

    def test_send_command_success(self):
        i3 = MagicMock()
        i3.command.return_value = [_reply(True)]

        assert I3Connection(i3).send_command("[con_id=1] focus") is True
        i3.command.assert_called_once_with("[con_id=1] focus")

    def test_send_command_rejected(self):
        i3 = MagicMock()
        i3.command.return_value = [_reply(False, "No output matched")]

        assert I3Connection(i3).send_command('[con_id=1] move workspace to output "X"') is False

    def test_send_command_any_failed_reply(self):
        i3 = MagicMock()
        i3.command.return_value = [_reply(True), _reply(False, "nope")]

        assert I3Connection(i3).send_command("a; b") is False

    def test_send_command_empty_reply(self):
        i3 = MagicMock()
        i3.command.return_value = []

        assert I3Connection(i3).send_command("nop") is False

    def test_send_command_transport_error(self):
        i3 = MagicMock()
        i3.command.side_effect = OSError("socket closed")

        assert I3Connection(i3).send_command("nop") is False
