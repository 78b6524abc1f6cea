"""Parsing for inbound transform messages.

Messages follow the `geometry_msgs/TransformStamped` layout, either alone or
batched in a `tf2_msgs/TFMessage` (`{"transforms": [...]}`). They may arrive as
already-decoded mappings (eg from a rosbridge JSON connection) or as msgpack
bytes.
"""

from __future__ import annotations

import dataclasses
import math
import numbers
import warnings
from typing import Any, List, Mapping, Optional, Tuple, Union

import msgpack


@dataclasses.dataclass(frozen=True)
class TransformStamped:
    """One edge as it came off the wire. Fields are not validated yet; a missing
    `translation` or `rotation` object is kept as `None` and rejected at
    ingestion."""

    parent: str
    child: str
    translation: Optional[Tuple[Any, Any, Any]]
    rotation: Optional[Tuple[Any, Any, Any, Any]]
    """`(x, y, z, w)` order."""
    stamp: Optional[float]
    """Header stamp in seconds, or `None` if absent or zero."""


def _stamp_seconds(stamp: Any) -> Optional[float]:
    if not isinstance(stamp, Mapping):
        return None
    # ROS 1 uses secs/nsecs, ROS 2 uses sec/nanosec.
    if "secs" in stamp:
        secs, nsecs = stamp.get("secs") or 0, stamp.get("nsecs") or 0
    else:
        secs, nsecs = stamp.get("sec") or 0, stamp.get("nanosec") or 0
    if not all(
        isinstance(v, numbers.Real) and not isinstance(v, bool) and math.isfinite(v)
        for v in (secs, nsecs)
    ):
        warnings.warn(f"[tfgraph] Ignoring malformed header stamp {stamp!r}.")
        return None
    if secs == 0 and nsecs == 0:
        # A zero stamp means "latest available" rather than a real time.
        return None
    return float(secs) + float(nsecs) * 1e-9


def _component(values: Mapping[str, Any], key: str, default: float) -> Any:
    value = values.get(key)
    return default if value is None else value


def parse_transform_stamped(mapping: Mapping[str, Any]) -> TransformStamped:
    """Read one `TransformStamped` mapping.

    Missing vector components default to zero, and a missing quaternion `w`
    defaults to one."""
    header = mapping.get("header")
    if not isinstance(header, Mapping):
        header = {}
    transform = mapping.get("transform")
    if not isinstance(transform, Mapping):
        transform = {}
    translation = transform.get("translation")
    rotation = transform.get("rotation")

    return TransformStamped(
        parent=header.get("frame_id") or "",
        child=mapping.get("child_frame_id") or "",
        translation=None
        if not isinstance(translation, Mapping)
        else (
            _component(translation, "x", 0.0),
            _component(translation, "y", 0.0),
            _component(translation, "z", 0.0),
        ),
        rotation=None
        if not isinstance(rotation, Mapping)
        else (
            _component(rotation, "x", 0.0),
            _component(rotation, "y", 0.0),
            _component(rotation, "z", 0.0),
            _component(rotation, "w", 1.0),
        ),
        stamp=_stamp_seconds(header.get("stamp")),
    )


def iter_transforms(message: Union[bytes, Mapping[str, Any]]) -> List[TransformStamped]:
    """Unpack a `TFMessage` or a single `TransformStamped`.

    Args:
        message: A decoded mapping, or msgpack bytes of one.

    Returns:
        Parsed transforms, in message order. Undecodable payloads produce a
        warning and an empty list.
    """
    if isinstance(message, (bytes, bytearray, memoryview)):
        try:
            message = msgpack.unpackb(message, raw=False)
        except ValueError as e:
            warnings.warn(f"[tfgraph] Could not decode transform message: {e}")
            return []

    if not isinstance(message, Mapping):
        warnings.warn(
            f"[tfgraph] Expected a transform message mapping, got {type(message).__name__}."
        )
        return []

    if "transforms" in message:
        items = message["transforms"] or []
        if not isinstance(items, (list, tuple)):
            warnings.warn(
                "[tfgraph] Expected a list of transforms, got"
                f" {type(items).__name__}."
            )
            return []
    else:
        items = [message]
    transforms: List[TransformStamped] = []
    for item in items:
        if not isinstance(item, Mapping):
            warnings.warn(
                f"[tfgraph] Skipping transform entry of type {type(item).__name__}."
            )
            continue
        transforms.append(parse_transform_stamped(item))
    return transforms
