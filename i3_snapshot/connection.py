"""i3 IPC connection adapter.

Wraps a synchronous i3ipc.Connection behind the two calls the rest of the
package needs: fetch the container tree and run a command.
"""

import logging
from typing import Optional

import i3ipc

from .errors import ErrorCode, IpcConnectionError
from .models import Container, ContainerKind

logger = logging.getLogger(__name__)


def container_from_con(con: i3ipc.Con) -> Container:
    """Convert an i3ipc Con (and its subtree) into a Container.

    Tiling children come first, then floating children.

    Args:
        con: i3ipc Con object from get_tree()

    Returns:
        Container mirroring the Con subtree
    """
    children = [
        container_from_con(child)
        for child in list(con.nodes or []) + list(getattr(con, 'floating_nodes', None) or [])
    ]
    return Container(
        kind=ContainerKind.parse(con.type),
        name=con.name,
        id=con.id,
        native_window_id=getattr(con, 'window', None) or 0,
        children=children,
    )


class I3Connection:
    """Single i3 IPC connection owned by the CLI for the process lifetime."""

    def __init__(self, conn: i3ipc.Connection) -> None:
        """Initialize adapter.

        Args:
            conn: Connected i3ipc.Connection
        """
        self.conn = conn

    @classmethod
    def connect(cls, socket_path: Optional[str] = None) -> "I3Connection":
        """Open the i3 IPC socket.

        Args:
            socket_path: Explicit socket path (default: discovered by i3ipc)

        Returns:
            Connected adapter

        Raises:
            IpcConnectionError: If i3 cannot be reached
        """
        try:
            conn = i3ipc.Connection(socket_path=socket_path)
        except Exception as e:
            raise IpcConnectionError(f"Cannot connect to i3: {e}") from e

        logger.debug(f"Connected to i3 IPC socket {conn.socket_path}")
        return cls(conn)

    def get_tree(self) -> Container:
        """Query GET_TREE and return the root container.

        Raises:
            IpcConnectionError: If the query fails
        """
        try:
            root = self.conn.get_tree()
        except Exception as e:
            raise IpcConnectionError(f"GET_TREE failed: {e}", code=ErrorCode.I3_IPC_FAILED) from e

        return container_from_con(root)

    def send_command(self, command: str) -> bool:
        """Run an i3 command.

        Args:
            command: Command string, criteria included

        Returns:
            True only if i3 replied and every reply reports success
        """
        try:
            replies = self.conn.command(command)
        except Exception as e:
            logger.error(f"Failed to send command '{command}': {e}")
            return False

        if not replies:
            logger.warning(f"No reply for command '{command}'")
            return False

        for reply in replies:
            if not reply.success:
                logger.warning(f"i3 rejected '{command}': {reply.error or 'unknown error'}")
                return False

        return True
