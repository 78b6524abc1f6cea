from __future__ import annotations

import dataclasses
import functools
from typing import Any, Callable, List, Type, TypeVar, Union, cast

import numpy as onp
import numpy.typing as onpt
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

import tfgraph.transforms as tft

T = TypeVar("T", bound=tft.MatrixLieGroup)

IDENTITY_XYZW = (0.0, 0.0, 0.0, 1.0)


def sample_transform(Group: Type[T], seed: int) -> T:
    """Sample a random transform from a group."""
    return cast(T, Group.sample_uniform(onp.random.default_rng(seed)))


def general_group_test(
    f: Callable[[Type[tft.MatrixLieGroup], int], None],
    max_examples: int = 10,
) -> Callable[[Type[tft.MatrixLieGroup], int], None]:
    """Decorator for defining tests that run on all group types, with a
    hypothesis-drawn seed."""

    f_wrapped = settings(deadline=None, max_examples=max_examples)(f)
    f_wrapped = given(seed=st.integers(min_value=0, max_value=2**32 - 1))(f_wrapped)
    f_wrapped = pytest.mark.parametrize("Group", [tft.SO3, tft.SE3])(f_wrapped)
    return f_wrapped


general_group_test_faster = functools.partial(general_group_test, max_examples=3)


def assert_transforms_close(a: tft.MatrixLieGroup, b: tft.MatrixLieGroup):
    """Make sure two transforms are equivalent."""
    # Check matrix representation.
    assert_arrays_close(a.as_matrix(), b.as_matrix())

    # Flip signs for quaternions.
    p1 = a.parameters().copy()
    p2 = b.parameters().copy()
    if isinstance(a, tft.SO3):
        p1 = p1 * onp.sign(onp.sum(p1, axis=-1, keepdims=True))
        p2 = p2 * onp.sign(onp.sum(p2, axis=-1, keepdims=True))
    elif isinstance(a, tft.SE3):
        p1[..., :4] *= onp.sign(onp.sum(p1[..., :4], axis=-1, keepdims=True))
        p2[..., :4] *= onp.sign(onp.sum(p2[..., :4], axis=-1, keepdims=True))

    # Make sure parameters are equal.
    assert_arrays_close(p1, p2)


def assert_arrays_close(
    *arrays: Union[onpt.NDArray[onp.float64], float, Any],
    rtol: float = 1e-3,
    atol: float = 1e-4,
):
    """Make sure two arrays are close. (and not NaN)"""
    for array1, array2 in zip(arrays[:-1], arrays[1:]):
        onp.testing.assert_allclose(array1, array2, rtol=rtol, atol=atol)
        assert not onp.any(onp.isnan(array1))
        assert not onp.any(onp.isnan(array2))


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@dataclasses.dataclass
class FakeTimer:
    due: float
    callback: Callable[[], Any]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Scheduler whose timers only fire when `advance()` is called."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.timers: List[FakeTimer] = []

    def call_later(self, delay: float, callback: Callable[[], Any]) -> FakeTimer:
        timer = FakeTimer(due=self.clock.now + delay, callback=callback)
        self.timers.append(timer)
        return timer

    @property
    def num_active(self) -> int:
        return sum(1 for t in self.timers if not t.cancelled)

    def advance(self, dt: float) -> None:
        """Move the clock forward, firing due timers in order."""
        end = self.clock.now + dt
        while True:
            due = [t for t in self.timers if not t.cancelled and t.due <= end]
            if len(due) == 0:
                break
            timer = min(due, key=lambda t: t.due)
            self.timers.remove(timer)
            self.clock.now = timer.due
            timer.callback()
        self.clock.now = end
