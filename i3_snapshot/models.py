"""
Data models for i3 Snapshot

Container tree nodes, capture records and run options.
All models use Pydantic v2 for data validation.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Outputs i3 creates for itself; windows under them are not placed on a display
INTERNAL_OUTPUTS = ("__i3", "xroot")


# ============================================================================
# Enums
# ============================================================================

class ContainerKind(str, Enum):
    """Container types reported by i3 GET_TREE"""
    ROOT = "root"
    OUTPUT = "output"
    WORKSPACE = "workspace"
    CON = "con"
    FLOATING_CON = "floating_con"
    DOCKAREA = "dockarea"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ContainerKind":
        """Map an i3 type string to a kind, unknown types become OTHER"""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class EncodingMode(str, Enum):
    """Text transform applied to names in snapshot lines"""
    BASE64 = "base64"
    RAW = "raw"


class FailurePolicy(str, Enum):
    """What a restore run does after a record fails"""
    FAIL_FAST = "fail_fast"
    CONTINUE = "continue"


class AddressingMode(str, Enum):
    """How restore commands select the workspace and window"""
    ID = "id"
    TITLE = "title"


# ============================================================================
# Container tree
# ============================================================================

class Container(BaseModel):
    """A node of the i3 layout tree (read-only)"""
    model_config = ConfigDict(frozen=True)

    kind: ContainerKind
    name: str = ""
    id: int = Field(ge=0)
    native_window_id: int = Field(default=0, ge=0)
    children: list["Container"] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def name_none_is_empty(cls, v: Any) -> str:
        """i3 reports null names for the root and split containers"""
        return "" if v is None else v

    @property
    def is_window(self) -> bool:
        """A real window: a plain con backed by an X11 window"""
        return self.kind == ContainerKind.CON and self.native_window_id != 0

    @property
    def is_internal_output(self) -> bool:
        """i3's hidden __i3 output holding the scratchpad workspace"""
        return self.kind == ContainerKind.OUTPUT and self.name in INTERNAL_OUTPUTS

    @property
    def is_valid_parent(self) -> bool:
        """Dock areas and internal outputs are never descended into"""
        return self.kind != ContainerKind.DOCKAREA and not self.is_internal_output

    @classmethod
    def from_tree_dict(cls, data: Dict[str, Any]) -> "Container":
        """
        Build a container tree from i3 GET_TREE JSON

        Accepts the document printed by ``i3-msg -t get_tree``. Tiling
        children come first, then floating children.

        Args:
            data: Decoded JSON node

        Returns:
            Container for the node and its whole subtree
        """
        children = [
            cls.from_tree_dict(child)
            for child in list(data.get("nodes") or []) + list(data.get("floating_nodes") or [])
        ]
        return cls(
            kind=ContainerKind.parse(data.get("type")),
            name=data.get("name"),
            id=data.get("id", 0),
            native_window_id=data.get("window") or 0,
            children=children,
        )


Container.model_rebuild()


# ============================================================================
# Capture records
# ============================================================================

class CaptureRecord(BaseModel):
    """Placement of one window at capture time"""
    model_config = ConfigDict(frozen=True)

    output_name: str
    workspace_name: str
    workspace_id: int = Field(ge=0)
    window_id: int = Field(ge=0)
    window_title: str


@dataclass
class TraversalState:
    """Nearest output and workspace seen so far during a tree walk.

    None marks a value that has not been seen yet.
    """
    output_name: Optional[str] = None
    workspace_name: Optional[str] = None
    workspace_id: Optional[int] = None

    @property
    def is_ready(self) -> bool:
        return bool(self.output_name) and bool(self.workspace_name) and self.workspace_id is not None


# ============================================================================
# Run options
# ============================================================================

class SnapshotOptions(BaseModel):
    """Options for one capture or restore run"""
    debug: bool = False
    failure_policy: FailurePolicy = FailurePolicy.FAIL_FAST
    encoding: EncodingMode = EncodingMode.BASE64
    addressing: AddressingMode = AddressingMode.ID
    force_capture: bool = False
    tree_file: Optional[Path] = None

    @classmethod
    def from_flags(
        cls,
        debug: bool = False,
        continue_on_error: bool = False,
        raw_strings: bool = False,
        match_by_title: bool = False,
        force_output_mode: bool = False,
        tree_file: Optional[Path] = None,
    ) -> "SnapshotOptions":
        """Build options from the boolean command-line flags"""
        return cls(
            debug=debug,
            failure_policy=FailurePolicy.CONTINUE if continue_on_error else FailurePolicy.FAIL_FAST,
            encoding=EncodingMode.RAW if raw_strings else EncodingMode.BASE64,
            addressing=AddressingMode.TITLE if match_by_title else AddressingMode.ID,
            force_capture=force_output_mode,
            tree_file=tree_file,
        )
