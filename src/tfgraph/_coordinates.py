"""Conversions between the transform feed's axis convention and the renderer's.

The feed is right-handed and +Z up (ROS, Blender). The renderer is right-handed
and +Y up (three.js, OpenGL). Mapping between them is a fixed rotation of -90
degrees about X:

    feed (x, y, z)  ->  renderer (x, z, -y)

Every edge is converted exactly once, when it is traversed. All composition then
happens in the renderer convention.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from .transforms import SE3, SO3, hints

R_TARGET_SOURCE = SO3.from_x_radians(-np.pi / 2.0)
"""The remap as a rotation. Conjugating a feed transform by this rotation gives the
same result as the component-wise rules below."""


def to_target_vector(v: hints.Vector3) -> npt.NDArray[np.float64]:
    """Convert an `(x, y, z)` vector from feed to renderer axes."""
    x, y, z = np.asarray(v, dtype=np.float64)
    return np.array([x, z, -y])


def to_target_rotation(q: hints.QuaternionXyzw) -> npt.NDArray[np.float64]:
    """Convert an `(x, y, z, w)` quaternion from feed to renderer axes. The scalar
    part is unchanged; the vector part follows `to_target_vector()`."""
    x, y, z, w = np.asarray(q, dtype=np.float64)
    return np.array([x, z, -y, w])


def to_source_vector(v: hints.Vector3) -> npt.NDArray[np.float64]:
    """Convert an `(x, y, z)` vector from renderer back to feed axes."""
    x, y, z = np.asarray(v, dtype=np.float64)
    return np.array([x, -z, y])


def to_source_rotation(q: hints.QuaternionXyzw) -> npt.NDArray[np.float64]:
    """Convert an `(x, y, z, w)` quaternion from renderer back to feed axes."""
    x, y, z, w = np.asarray(q, dtype=np.float64)
    return np.array([x, -z, y, w])


def to_target_transform(T_source: SE3) -> SE3:
    """Convert a rigid transform expressed in feed axes to renderer axes."""
    return SE3.from_xyz_xyzw(
        to_target_vector(T_source.translation()),
        to_target_rotation(T_source.rotation().as_quaternion_xyzw()),
    )


def to_source_transform(T_target: SE3) -> SE3:
    """Convert a rigid transform expressed in renderer axes back to feed axes."""
    return SE3.from_xyz_xyzw(
        to_source_vector(T_target.translation()),
        to_source_rotation(T_target.rotation().as_quaternion_xyzw()),
    )
