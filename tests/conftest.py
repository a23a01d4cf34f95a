"""Pytest configuration and fixtures for i3 Snapshot tests."""

import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add package root to Python path BEFORE test collection
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))

from i3_snapshot.models import CaptureRecord, Container  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def tree_file() -> Path:
    """Path to a GET_TREE dump with two real outputs, docks and a scratchpad."""
    return FIXTURES_DIR / "i3_tree.json"


@pytest.fixture
def i3_tree(tree_file) -> Container:
    """Container tree loaded from the GET_TREE dump."""
    with open(tree_file) as f:
        return Container.from_tree_dict(json.load(f))


@pytest.fixture
def simple_tree() -> Container:
    """Output O1 > workspace W1 (id 10) > window 100 "term"."""
    return Container.from_tree_dict({
        "id": 1, "type": "root", "name": "root",
        "nodes": [{
            "id": 2, "type": "output", "name": "O1",
            "nodes": [{
                "id": 10, "type": "workspace", "name": "W1",
                "nodes": [{"id": 100, "type": "con", "name": "term", "window": 4194307}],
            }],
        }],
    })


@pytest.fixture
def records():
    """Three capture records spread over two outputs."""
    return [
        CaptureRecord(output_name="eDP-1", workspace_name="1: web", workspace_id=20,
                      window_id=100, window_title="Mozilla Firefox"),
        CaptureRecord(output_name="eDP-1", workspace_name="2", workspace_id=30,
                      window_id=103, window_title="vim spec.md"),
        CaptureRecord(output_name="HDMI-1", workspace_name="3", workspace_id=50,
                      window_id=104, window_title="term"),
    ]


@pytest.fixture
def mock_i3_connection():
    """Mock i3 connection whose commands all succeed."""
    conn = MagicMock()
    conn.send_command = MagicMock(return_value=True)
    return conn
