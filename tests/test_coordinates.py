"""Tests for the feed <=> renderer axis remap."""

import numpy as np
from hypothesis import given, settings
from hypothesis import strategies as st

import tfgraph
import tfgraph.transforms as tft

from .utils import assert_arrays_close, assert_transforms_close, sample_transform

seeds = st.integers(min_value=0, max_value=2**32 - 1)


def test_vector_remap():
    assert_arrays_close(tfgraph.to_target_vector((1.0, 2.0, 3.0)), np.array([1.0, 3.0, -2.0]))
    assert_arrays_close(tfgraph.to_source_vector((1.0, 3.0, -2.0)), np.array([1.0, 2.0, 3.0]))


def test_feed_up_is_renderer_up():
    # +Z up in the feed, +Y up in the renderer.
    assert_arrays_close(tfgraph.to_target_vector((0.0, 0.0, 1.0)), np.array([0.0, 1.0, 0.0]))
    # Feed's +Y (left) points towards the renderer's -Z.
    assert_arrays_close(tfgraph.to_target_vector((0.0, 1.0, 0.0)), np.array([0.0, 0.0, -1.0]))


def test_rotation_remap_keeps_scalar_part():
    q = (0.1, 0.2, 0.3, 0.9)
    assert_arrays_close(tfgraph.to_target_rotation(q), np.array([0.1, 0.3, -0.2, 0.9]))
    assert_arrays_close(
        tfgraph.to_source_rotation(tfgraph.to_target_rotation(q)), np.array(q)
    )


def test_remap_rotation_matches_component_rules():
    for v in np.eye(3):
        assert_arrays_close(tfgraph.R_TARGET_SOURCE @ v, tfgraph.to_target_vector(v))


@settings(deadline=None, max_examples=20)
@given(seed=seeds)
def test_rotation_remap_is_conjugation(seed: int):
    rotation = sample_transform(tft.SO3, seed)
    R = tfgraph.R_TARGET_SOURCE
    expected = R @ rotation @ R.inverse()
    converted = tft.SO3.from_quaternion_xyzw(
        tfgraph.to_target_rotation(rotation.as_quaternion_xyzw())
    )
    assert_transforms_close(converted, expected)


@settings(deadline=None, max_examples=20)
@given(seed=seeds)
def test_converted_transform_moves_converted_points(seed: int):
    T = sample_transform(tft.SE3, seed)
    point = np.random.default_rng(seed).uniform(-1.0, 1.0, size=(3,))
    assert_arrays_close(
        tfgraph.to_target_transform(T) @ tfgraph.to_target_vector(point),
        tfgraph.to_target_vector(T @ point),
    )


@settings(deadline=None, max_examples=20)
@given(seed=seeds)
def test_conversion_commutes_with_composition(seed: int):
    T_a = sample_transform(tft.SE3, seed)
    T_b = sample_transform(tft.SE3, seed + 1)
    assert_transforms_close(
        tfgraph.to_target_transform(T_a @ T_b),
        tfgraph.to_target_transform(T_a) @ tfgraph.to_target_transform(T_b),
    )
    assert_transforms_close(
        tfgraph.to_source_transform(tfgraph.to_target_transform(T_a)), T_a
    )
