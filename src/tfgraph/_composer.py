from __future__ import annotations

import warnings
from typing import Mapping, Optional, Sequence

from ._coordinates import to_target_transform
from ._edges import Edge
from ._path import find_path
from .transforms import SE3


def _mentions(merged_view: Mapping[str, Mapping[str, Edge]], frame: str) -> bool:
    return frame in merged_view or any(
        frame in children for children in merged_view.values()
    )


class TransformComposer:
    """Turns paths through the frame graph into single rigid transforms.

    `resolve(a, b)` returns the transform that expresses points given in frame
    `a` as coordinates in frame `b`, in the renderer's axis convention. Put
    differently, it is the pose of `a` in `b`; for an edge `b -> a` it is the
    converted edge itself.

    Results are computed from scratch on every call. Don't hold on to a path or a
    merged view after yielding control; the graph may have changed.

    Args:
        warn_on_failure: Emit a warning when two frames can't be related.
    """

    def __init__(self, warn_on_failure: bool = True) -> None:
        self._warn_on_failure = warn_on_failure

    def resolve(
        self,
        source: str,
        target: str,
        merged_view: Mapping[str, Mapping[str, Edge]],
    ) -> Optional[SE3]:
        """Compose the transform between two frames.

        Returns:
            The transform, or `None` if the frames are unknown or not connected.
        """
        if source == target:
            return SE3.identity()

        # Walk from the target so that composing edges in order gives T_target_source.
        path = find_path(target, source, merged_view)
        if path is None:
            if self._warn_on_failure:
                unknown = [f for f in (source, target) if not _mentions(merged_view, f)]
                if len(unknown) > 0:
                    reason = "unknown frame " + ", ".join(repr(f) for f in unknown)
                else:
                    reason = "frames are in disconnected parts of the graph"
                warnings.warn(
                    f"[tfgraph] No transform from {source!r} to {target!r}: {reason}.",
                    stacklevel=2,
                )
            return None
        return self.compose_path(path, merged_view)

    def compose_path(
        self,
        path: Sequence[str],
        merged_view: Mapping[str, Mapping[str, Edge]],
    ) -> Optional[SE3]:
        """Compose the edges along a path, nearest to `path[0]` first.

        Returns:
            The transform, or `None` if a step of the path has no edge in
            `merged_view`.
        """
        T_source_current = SE3.identity()
        for a, b in zip(path[:-1], path[1:]):
            T_a_b = self._step(a, b, merged_view)
            if T_a_b is None:
                return None
            T_source_current = T_source_current @ T_a_b
        return T_source_current

    @staticmethod
    def _step(
        a: str, b: str, merged_view: Mapping[str, Mapping[str, Edge]]
    ) -> Optional[SE3]:
        # A forward edge always wins over inverting a reverse one.
        forward = merged_view.get(a, {}).get(b)
        if forward is not None:
            return to_target_transform(forward.as_se3())
        reverse = merged_view.get(b, {}).get(a)
        if reverse is not None:
            return to_target_transform(reverse.as_se3()).inverse()
        return None
