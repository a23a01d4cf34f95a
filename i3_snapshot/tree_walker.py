"""
Tree Walker

Depth-first walk of the i3 container tree that pairs every window with the
output and workspace enclosing it.

The walk is pre-order and keeps a single TraversalState for the whole tree:
the last output and workspace seen win, and nothing is restored when the walk
backs out of a subtree. Outputs never nest inside other outputs in an i3 tree,
so this matches per-branch scoping in practice.
"""

import logging
from typing import Iterator, List

from .errors import InvalidTreeState
from .models import CaptureRecord, Container, ContainerKind, TraversalState

logger = logging.getLogger(__name__)


def walk(root: Container) -> Iterator[CaptureRecord]:
    """
    Yield a capture record for every window under root.

    Args:
        root: Root of the container tree (usually the i3 "root" node)

    Yields:
        CaptureRecord per window, in depth-first pre-order

    Raises:
        InvalidTreeState: A window appears before an output and workspace
    """
    state = TraversalState()
    stack: List[Container] = [root]

    while stack:
        node = stack.pop()

        if node.kind == ContainerKind.OUTPUT:
            state.output_name = node.name
        elif node.kind == ContainerKind.WORKSPACE:
            state.workspace_name = node.name
            state.workspace_id = node.id
        elif node.is_window:
            if not state.is_ready:
                raise InvalidTreeState(
                    window_id=node.id,
                    window_title=node.name,
                    output_name=state.output_name,
                    workspace_name=state.workspace_name,
                )

            yield CaptureRecord(
                output_name=state.output_name,
                workspace_name=state.workspace_name,
                workspace_id=state.workspace_id,
                window_id=node.id,
                window_title=node.name,
            )

        if node.is_valid_parent:
            # Reversed so the first child is popped first
            stack.extend(reversed(node.children))
        else:
            logger.debug(f"Skipping {node.kind.value} container {node.id} and its children")


def capture(root: Container) -> List[CaptureRecord]:
    """
    Collect every window record before anything is written.

    A malformed tree raises before the first line is emitted, so a failed
    capture never leaves a truncated snapshot behind.

    Args:
        root: Root of the container tree

    Returns:
        Records in traversal order
    """
    records = list(walk(root))
    logger.info(f"Captured {len(records)} windows")
    return records
