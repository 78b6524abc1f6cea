from __future__ import annotations

import dataclasses
import enum
import math
import numbers
from typing import Optional, Sequence, Tuple

from .transforms import SE3


class EdgeClass(enum.Enum):
    """Lifetime classification of an edge."""

    DURABLE = "durable"
    """Published once or rarely (eg `/tf_static`). Never expires."""
    EXPIRING = "expiring"
    """Republished frequently (eg `/tf`). Stale once not seen for a while."""


@dataclasses.dataclass(frozen=True)
class Edge:
    """A stored rigid transform from a parent frame to a child frame.

    The transform is the pose of `child` expressed in `parent`, in the feed's axis
    convention."""

    parent: str
    child: str
    translation: Tuple[float, float, float]
    rotation: Tuple[float, float, float, float]
    """Unit quaternion, `(x, y, z, w)` order."""
    classification: EdgeClass
    source_timestamp: float
    """Stamp reported by the feed, in seconds. Falls back to `last_seen_at`."""
    last_seen_at: float
    """Wall-clock time of the most recent upsert, in seconds."""

    @property
    def is_static(self) -> bool:
        return self.classification is EdgeClass.DURABLE

    def is_valid(self, now: float, expiry_window: float) -> bool:
        """Durable edges are always valid. Expiring edges are valid while they have
        been seen within `expiry_window` seconds of `now`."""
        return self.is_static or (now - self.last_seen_at) < expiry_window

    def as_se3(self) -> SE3:
        """Edge transform as an `SE3`, still in the feed's axis convention."""
        return SE3.from_xyz_xyzw(self.translation, self.rotation)


def validate_edge_fields(
    parent: Optional[str],
    child: Optional[str],
    translation: Optional[Sequence[float]],
    rotation: Optional[Sequence[float]],
) -> Optional[str]:
    """Check raw edge fields before they are stored.

    Returns:
        A description of the first problem found, or `None` if the fields are
        well-formed.
    """
    if not isinstance(parent, str) or parent == "":
        return "empty parent frame"
    if not isinstance(child, str) or child == "":
        return "empty child frame"
    # Self-edges are rejected on top of the malformed-field checks, matching
    # tf2's TF_SELF_TRANSFORM rule.
    if parent == child:
        return f"edge from {parent!r} to itself"
    if translation is None:
        return "missing translation"
    if rotation is None:
        return "missing rotation"
    if len(translation) != 3:
        return f"translation should have 3 components, got {len(translation)}"
    if len(rotation) != 4:
        return f"rotation should have 4 components, got {len(rotation)}"
    values = (*translation, *rotation)
    if not all(isinstance(v, numbers.Real) and math.isfinite(v) for v in values):
        return "non-finite translation or rotation"
    if math.fsum(v * v for v in rotation) == 0.0:
        return "zero-length rotation quaternion"
    return None


def normalized_quaternion(
    rotation: Sequence[float],
) -> Tuple[float, float, float, float]:
    norm = math.sqrt(math.fsum(v * v for v in rotation))
    x, y, z, w = (float(v) / norm for v in rotation)
    return (x, y, z, w)
