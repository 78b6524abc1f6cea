from __future__ import annotations

import asyncio
import dataclasses
import time
from typing import Any, Callable, List, Mapping, Optional, Sequence, Union

import rich
from typing_extensions import Literal

from ._composer import TransformComposer
from ._config import GraphConfig
from ._coordinates import to_source_transform, to_target_transform
from ._edges import EdgeClass
from ._messages import iter_transforms
from ._notifier import ChangeCallback, Scheduler, UpdateNotifier
from ._store import FrameGraphStore
from ._tree import TreeNode, format_tree
from .transforms import SE3

Convention = Literal["target", "source"]
"""Axis convention for returned transforms. "target" is the renderer's (+Y up),
"source" is the feed's (+Z up)."""


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


@dataclasses.dataclass(frozen=True)
class FrameInfo:
    """Summary of one frame, for inspection panels."""

    name: str
    fixed_frame: str
    parent: Optional[str]
    """Parent in the frame graph, or `None` for roots and unknown frames."""
    relative: Optional[SE3]
    """Pose in the parent frame."""
    pose: Optional[SE3]
    """Pose in `fixed_frame`, or `None` if the two frames aren't connected."""


class TransformGraph:
    """Frame graph fed by a stream of parent -> child transforms.

    This is the object handed to whatever owns the transport: it pushes edges in
    with `handle_tf_message()` or `upsert_edge()`, and calls `set_active(False)`
    when the connection drops. Renderers and panels query it with `resolve()`,
    `list_frames()` and `build_tree()`, and subscribe with `on_change()`.

    Example:
        ```
        graph = TransformGraph()

        @graph.on_change
        def _() -> None:
            T_map_base = graph.resolve("base_link", "map")
            if T_map_base is not None:
                handle.wxyz = T_map_base.rotation().wxyz
                handle.position = T_map_base.translation()
        ```

    Args:
        config: Settings. See `GraphConfig`.
        clock: Wall-clock source, in seconds.
        scheduler: Timer source for change coalescing. Defaults to the running
            `asyncio` event loop when the graph is created inside one, so that
            every change callback runs on the loop thread. Otherwise trailing
            signals run on a `ThreadingScheduler` timer thread.
    """

    def __init__(
        self,
        config: Optional[GraphConfig] = None,
        clock: Callable[[], float] = time.time,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.config = config if config is not None else GraphConfig()
        if scheduler is None:
            scheduler = _running_loop()
        self._notifier = UpdateNotifier(
            coalesce_window=self.config.coalesce_window, scheduler=scheduler
        )
        self._store = FrameGraphStore(
            clock=clock,
            notifier=self._notifier,
            expiry_window=self.config.expiry_window,
            default_root=self.config.default_root,
            verbose=self.config.verbose,
        )
        self._composer = TransformComposer()

    @property
    def store(self) -> FrameGraphStore:
        return self._store

    @property
    def notifier(self) -> UpdateNotifier:
        return self._notifier

    @property
    def expiry_window(self) -> float:
        """Staleness window used by `build_tree()`, in seconds."""
        return self._store.expiry_window

    @expiry_window.setter
    def expiry_window(self, expiry_window: float) -> None:
        assert expiry_window > 0.0
        self._store.expiry_window = expiry_window
        self._notifier.notify_changed()

    # Ingestion.

    def upsert_edge(
        self,
        parent: str,
        child: str,
        translation: Optional[Sequence[float]],
        rotation: Optional[Sequence[float]],
        classification: EdgeClass,
        source_timestamp: Optional[float] = None,
    ) -> bool:
        """Insert or overwrite one edge. See `FrameGraphStore.upsert_edge()`."""
        return self._store.upsert_edge(
            parent, child, translation, rotation, classification, source_timestamp
        )

    def handle_tf_message(
        self, message: Union[bytes, Mapping[str, Any]], durable: bool
    ) -> int:
        """Ingest a `TFMessage` or single `TransformStamped`.

        Args:
            message: Decoded mapping or msgpack bytes.
            durable: True for the static channel, False for the frequently
                republished one.

        Returns:
            Number of edges accepted.
        """
        classification = EdgeClass.DURABLE if durable else EdgeClass.EXPIRING
        accepted = 0
        for transform in iter_transforms(message):
            if self._store.upsert_edge(
                transform.parent,
                transform.child,
                transform.translation,
                transform.rotation,
                classification,
                transform.stamp,
            ):
                accepted += 1
        return accepted

    # Lifecycle.

    def set_active(self, active: bool) -> None:
        """Transport lifecycle hook. Going inactive clears the graph."""
        if not active:
            self.reset()

    def reset(self) -> None:
        """Forget every edge and frame. Change callbacks are kept and notified."""
        self._store.reset()
        self._notifier.notify_changed()

    def dispose(self) -> None:
        """Clear the graph and stop the notifier. The graph shouldn't be used
        afterwards."""
        self._notifier.close()
        self._store.reset()
        if self.config.verbose:
            rich.print("[bold](tfgraph)[/bold] Disposed frame graph")

    # Change signal.

    def on_change(self, callback: ChangeCallback) -> ChangeCallback:
        """Attach a callback to run when the graph changes. Bursts of updates are
        coalesced; see `GraphConfig.coalesce_window`."""
        return self._notifier.on_change(callback)

    def remove_change_callback(
        self, callback: Union[Literal["all"], ChangeCallback] = "all"
    ) -> None:
        self._notifier.remove_change_callback(callback)

    # Queries.

    def resolve(
        self, source: str, target: str, convention: Convention = "target"
    ) -> Optional[SE3]:
        """Transform that expresses points given in `source` as coordinates in
        `target`, ie the pose of `source` in `target`.

        Call this fresh every tick; results are never cached.

        Args:
            source: Frame the input coordinates are given in.
            target: Frame the result maps into.
            convention: Axis convention of the result.

        Returns:
            The transform, or `None` if the frames are unknown or disconnected.
        """
        T = self._composer.resolve(source, target, self._store.merged_view())
        if T is None or convention == "target":
            return T
        return to_source_transform(T)

    def frame_info(
        self,
        frame: str,
        fixed_frame: Optional[str] = None,
        convention: Convention = "target",
    ) -> FrameInfo:
        """Parent, relative pose, and pose in the fixed frame of one frame.

        Args:
            frame: Frame to describe.
            fixed_frame: Reference frame for `pose`. Defaults to
                `GraphConfig.default_root`.
            convention: Axis convention of the returned transforms.
        """
        if fixed_frame is None:
            fixed_frame = self.config.default_root
        merged_view = self._store.merged_view()

        parent = None
        relative = None
        for parent_name in sorted(merged_view):
            edge = merged_view[parent_name].get(frame)
            if edge is not None:
                parent = parent_name
                relative = edge.as_se3()
                if convention == "target":
                    relative = to_target_transform(relative)
                break

        if frame == fixed_frame:
            pose: Optional[SE3] = SE3.identity()
        else:
            composer = TransformComposer(warn_on_failure=False)
            pose = composer.resolve(frame, fixed_frame, merged_view)
            if pose is not None and convention == "source":
                pose = to_source_transform(pose)

        return FrameInfo(
            name=frame,
            fixed_frame=fixed_frame,
            parent=parent,
            relative=relative,
            pose=pose,
        )

    def has_frame(self, name: str) -> bool:
        return self._store.has_frame(name)

    def list_frames(self) -> List[str]:
        """Known frame names, sorted."""
        return self._store.list_frames()

    def frame_choices(self) -> List[str]:
        """Known frames plus `GraphConfig.default_frames`, sorted. Useful for
        fixed-frame dropdowns before the feed has delivered anything."""
        return sorted(set(self._store.list_frames()) | set(self.config.default_frames))

    def build_tree(self, expiry_window: Optional[float] = None) -> List[TreeNode]:
        """Frame hierarchy with validity flags, for display only."""
        return self._store.build_tree(expiry_window)

    def print_tree(self, expiry_window: Optional[float] = None) -> None:
        """Print the frame hierarchy to the terminal."""
        roots = self._store.build_tree(expiry_window)
        rich.print(format_tree(roots, now=self._store.now()))
