"""
i3 Snapshot

Save and restore window containment in i3-wm.
Captures which workspace and output every window lives on, and replays
that placement later through i3 IPC commands.
"""

__version__ = "0.2.0"
__author__ = "NixOS Configuration Team"
