"""Tests for group axioms.

https://proofwiki.org/wiki/Definition:Group_Axioms
"""

from typing import Type

import numpy as np

import tfgraph.transforms as tft

from .utils import (
    assert_arrays_close,
    assert_transforms_close,
    general_group_test,
    sample_transform,
)


@general_group_test
def test_closure(Group: Type[tft.MatrixLieGroup], seed: int):
    """Check closure property."""
    transform_a = sample_transform(Group, seed)
    transform_b = sample_transform(Group, seed + 1)

    composed = transform_a @ transform_b
    assert_transforms_close(composed, composed.normalize())
    composed = transform_b @ transform_a
    assert_transforms_close(composed, composed.normalize())


@general_group_test
def test_identity(Group: Type[tft.MatrixLieGroup], seed: int):
    """Check identity property."""
    transform = sample_transform(Group, seed)
    identity = Group.identity()
    assert_transforms_close(transform, identity @ transform)
    assert_transforms_close(transform, transform @ identity)
    assert_arrays_close(
        transform.as_matrix(), identity.as_matrix() @ transform.as_matrix()
    )


@general_group_test
def test_inverse(Group: Type[tft.MatrixLieGroup], seed: int):
    """Check inverse property."""
    transform = sample_transform(Group, seed)
    identity = Group.identity()
    assert_transforms_close(identity, transform @ transform.inverse())
    assert_transforms_close(identity, transform.inverse() @ transform)
    assert_arrays_close(
        np.eye(Group.matrix_dim),
        transform.as_matrix() @ transform.inverse().as_matrix(),
    )


@general_group_test
def test_associative(Group: Type[tft.MatrixLieGroup], seed: int):
    """Check associative property."""
    transform_a = sample_transform(Group, seed)
    transform_b = sample_transform(Group, seed + 1)
    transform_c = sample_transform(Group, seed + 2)
    assert_transforms_close(
        (transform_a @ transform_b) @ transform_c,
        transform_a @ (transform_b @ transform_c),
    )
