from __future__ import annotations

import threading
import time
import warnings
from typing import Callable, Dict, List, Optional, Sequence, Set

import rich

from ._edges import Edge, EdgeClass, normalized_quaternion, validate_edge_fields
from ._notifier import UpdateNotifier
from ._tree import TreeNode, materialize_tree

EdgeView = Dict[str, Dict[str, Edge]]
"""Edges indexed as `view[parent][child]`."""


class FrameGraphStore:
    """Holds the edges of the frame graph and the registry of known frames.

    Edges live in two pools, one per `EdgeClass`. Queries go through
    `merged_view()`, where an expiring edge replaces a durable edge for the same
    `(parent, child)` pair.

    The store is written only through `upsert_edge()`. It doesn't traverse the
    graph; see `find_path()` and `TransformComposer`.

    Reads hand out copies taken under a lock, so change callbacks running on a
    timer thread can query the store while the feed keeps writing.

    Args:
        clock: Wall-clock source, in seconds. Used to stamp edges and to judge
            staleness.
        notifier: Signalled after every accepted upsert.
        expiry_window: Default staleness window for `build_tree()`, in seconds.
        default_root: Frame forced to be the tree root when every frame has a
            parent.
        verbose: Print a message on reset.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        notifier: Optional[UpdateNotifier] = None,
        expiry_window: float = 15.0,
        default_root: str = "map",
        verbose: bool = False,
    ) -> None:
        self._clock = clock
        self._notifier = notifier
        self.expiry_window = expiry_window
        self._default_root = default_root
        self._verbose = verbose

        self._pool_from_class: Dict[EdgeClass, EdgeView] = {
            EdgeClass.DURABLE: {},
            EdgeClass.EXPIRING: {},
        }
        self._frames: Set[str] = set()
        self._lock = threading.Lock()
        """Guards the pools and the frame registry."""

    def now(self) -> float:
        return self._clock()

    def upsert_edge(
        self,
        parent: str,
        child: str,
        translation: Optional[Sequence[float]],
        rotation: Optional[Sequence[float]],
        classification: EdgeClass,
        source_timestamp: Optional[float] = None,
    ) -> bool:
        """Insert or overwrite the edge from `parent` to `child`.

        Malformed edges are dropped with a warning; nothing is raised to the
        caller.

        Args:
            parent: Parent frame name.
            child: Child frame name.
            translation: Child origin in the parent frame, `(x, y, z)`.
            rotation: Child orientation in the parent frame, `(x, y, z, w)`.
            classification: Which pool the edge belongs to.
            source_timestamp: Stamp from the feed, in seconds.

        Returns:
            True if the edge was stored.
        """
        problem = validate_edge_fields(parent, child, translation, rotation)
        if problem is not None:
            warnings.warn(
                f"[tfgraph] Rejected edge {parent!r} -> {child!r}: {problem}.",
                stacklevel=2,
            )
            return False
        assert translation is not None and rotation is not None

        now = self._clock()
        x, y, z = (float(v) for v in translation)
        edge = Edge(
            parent=parent,
            child=child,
            translation=(x, y, z),
            rotation=normalized_quaternion(rotation),
            classification=classification,
            source_timestamp=now if source_timestamp is None else source_timestamp,
            last_seen_at=now,
        )
        with self._lock:
            self._pool_from_class[classification].setdefault(parent, {})[child] = edge
            self._frames.add(parent)
            self._frames.add(child)

        if self._notifier is not None:
            self._notifier.notify_changed()
        return True

    def merged_view(self) -> EdgeView:
        """Snapshot of all edges, expiring overlaid on durable.

        Recomputed on every call. Callers making many queries at once should take
        one snapshot and reuse it, but never across a mutation."""
        with self._lock:
            return self._merged_view_locked()

    def _merged_view_locked(self) -> EdgeView:
        merged: EdgeView = {}
        for edge_class in (EdgeClass.DURABLE, EdgeClass.EXPIRING):
            for parent, children in self._pool_from_class[edge_class].items():
                merged.setdefault(parent, {}).update(children)
        return merged

    def get_edge(self, parent: str, child: str) -> Optional[Edge]:
        """Look up a single edge in the merged view."""
        with self._lock:
            for edge_class in (EdgeClass.EXPIRING, EdgeClass.DURABLE):
                edge = self._pool_from_class[edge_class].get(parent, {}).get(child)
                if edge is not None:
                    return edge
        return None

    @property
    def num_edges(self) -> int:
        """Number of `(parent, child)` pairs in the merged view."""
        return sum(len(children) for children in self.merged_view().values())

    def has_frame(self, name: str) -> bool:
        with self._lock:
            return name in self._frames

    def list_frames(self) -> List[str]:
        """Known frame names, sorted."""
        with self._lock:
            return sorted(self._frames)

    def reset(self) -> None:
        """Forget every edge and frame. Notifier callbacks are kept."""
        with self._lock:
            for pool in self._pool_from_class.values():
                pool.clear()
            self._frames.clear()
        if self._verbose:
            rich.print("[bold](tfgraph)[/bold] Cleared frame graph")

    def build_tree(self, expiry_window: Optional[float] = None) -> List[TreeNode]:
        """Materialize the frame hierarchy for display, with validity flags.

        Args:
            expiry_window: Staleness window in seconds. Defaults to the store's
                `expiry_window`.

        Returns:
            Root nodes, sorted by name.
        """
        with self._lock:
            frames = frozenset(self._frames)
            merged_view = self._merged_view_locked()
        return materialize_tree(
            frames=frames,
            merged_view=merged_view,
            now=self._clock(),
            expiry_window=self.expiry_window
            if expiry_window is None
            else expiry_window,
            default_root=self._default_root,
        )
