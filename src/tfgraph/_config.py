from __future__ import annotations

import dataclasses
from typing import Any, Tuple


@dataclasses.dataclass(frozen=True)
class GraphConfig:
    """Settings for a `TransformGraph`. Times are in seconds."""

    expiry_window: float = 15.0
    """Expiring edges not seen for this long are reported as invalid in the frame
    tree."""

    coalesce_window: float = 0.1
    """Minimum spacing between two "graph changed" signals."""

    default_root: str = "map"
    """Frame used as the fixed frame for `frame_info()`, and forced as the tree root
    when every known frame has a parent."""

    default_frames: Tuple[str, ...] = ("map", "odom", "base_link", "base_footprint")
    """Frame names always offered by `frame_choices()`, even before any edge has
    arrived."""

    verbose: bool = False
    """Print lifecycle messages (resets, disposal) to the terminal."""

    def __post_init__(self) -> None:
        assert self.expiry_window > 0.0, "expiry_window should be positive."
        assert self.coalesce_window >= 0.0, "coalesce_window can't be negative."
        assert self.default_root != "", "default_root can't be empty."

    def replace(self, **changes: Any) -> GraphConfig:
        """Returns a copy of this config with some fields changed."""
        return dataclasses.replace(self, **changes)
