"""Coalesced "graph changed" signal.

High-rate feeds can upsert hundreds of edges per second; consumers only need to
hear about it a few times per second. The first change in a quiet period is
signalled right away and opens a window of `coalesce_window` seconds. Changes that
arrive while the window is open are folded into a single trailing signal, sent
when the window closes.
"""

from __future__ import annotations

import sys
import threading
import traceback
from typing import Any, Callable, List, Optional, Union

from typing_extensions import Literal, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> Any: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay.

    `asyncio` event loops satisfy this protocol directly."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...


class ThreadingScheduler:
    """Runs delayed callbacks on daemon `threading.Timer` threads."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


ChangeCallback = Callable[[], None]


class UpdateNotifier:
    """Leading-edge + trailing-flush coalescing notifier.

    Guarantees at most one signal per window, and at least one signal after the
    last change of a burst.

    Args:
        coalesce_window: Minimum spacing between signals, in seconds. Zero disables
            coalescing.
        scheduler: Source of window timers. Defaults to `ThreadingScheduler`; pass an
            `asyncio` event loop to keep everything on one thread.
    """

    def __init__(
        self,
        coalesce_window: float = 0.1,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        assert coalesce_window >= 0.0
        self._coalesce_window = coalesce_window
        self._scheduler: Scheduler = (
            scheduler if scheduler is not None else ThreadingScheduler()
        )
        self._callbacks: List[ChangeCallback] = []

        self._lock = threading.Lock()
        """Guards window state; trailing flushes may run on a timer thread."""
        self._window: Optional[TimerHandle] = None
        self._pending = False
        self._closed = False

    @property
    def has_pending(self) -> bool:
        """True if a change is waiting for the current window to close."""
        return self._pending

    def on_change(self, callback: ChangeCallback) -> ChangeCallback:
        """Attach a callback to run when the graph changes. Can be used as a
        decorator."""
        self._callbacks.append(callback)
        return callback

    def remove_change_callback(
        self, callback: Union[Literal["all"], ChangeCallback] = "all"
    ) -> None:
        """Remove change callbacks.

        Args:
            callback: Either "all" to remove all callbacks, or a specific callback
                function to remove.
        """
        if callback == "all":
            self._callbacks.clear()
        else:
            self._callbacks = [cb for cb in self._callbacks if cb != callback]

    def notify_changed(self) -> None:
        """Record a change. Signals now, or at the end of the open window."""
        with self._lock:
            if self._closed:
                return
            if self._window is not None:
                self._pending = True
                return
            self._pending = False
            self._open_window()
        self._emit()

    def flush(self) -> None:
        """Send a pending signal immediately instead of waiting for the window to
        close."""
        with self._lock:
            if not self._pending or self._closed:
                return
            self._pending = False
        self._emit()

    def close(self) -> None:
        """Cancel the open window and drop any pending signal. Later changes are
        ignored."""
        with self._lock:
            self._closed = True
            self._pending = False
            if self._window is not None:
                self._window.cancel()
                self._window = None

    def _open_window(self) -> None:
        # Caller holds the lock.
        if self._coalesce_window > 0.0:
            self._window = self._scheduler.call_later(
                self._coalesce_window, self._close_window
            )

    def _close_window(self) -> None:
        with self._lock:
            self._window = None
            if not self._pending or self._closed:
                return
            self._pending = False
            self._open_window()
        self._emit()

    def _emit(self) -> None:
        for cb in list(self._callbacks):
            try:
                cb()
            except Exception:
                print("Graph change callback failed with exception:", file=sys.stderr)
                traceback.print_exc()
