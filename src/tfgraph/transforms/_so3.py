from __future__ import annotations

import dataclasses

import numpy as np
import numpy.typing as npt
from typing_extensions import override

from . import _base, hints
from .utils import get_epsilon


@dataclasses.dataclass(frozen=True)
class SO3(
    _base.SOBase,
    matrix_dim=3,
    parameters_dim=4,
    space_dim=3,
):
    """Special orthogonal group for 3D rotations.

    Internal parameterization is `(qw, qx, qy, qz)`. Transform feeds usually send
    `(qx, qy, qz, qw)`; use `from_quaternion_xyzw()` and `as_quaternion_xyzw()`
    at those boundaries.
    """

    wxyz: npt.NDArray[np.floating]
    """Internal parameters. `(w, x, y, z)` quaternion. Shape should be `(4,)`."""

    @override
    def __repr__(self) -> str:
        wxyz = np.round(self.wxyz, 5)
        return f"{self.__class__.__name__}(wxyz={wxyz})"

    @staticmethod
    def from_x_radians(theta: hints.Scalar) -> SO3:
        """Generates a x-axis rotation."""
        return SO3.exp(np.array([theta, 0.0, 0.0]))

    @staticmethod
    def from_y_radians(theta: hints.Scalar) -> SO3:
        """Generates a y-axis rotation."""
        return SO3.exp(np.array([0.0, theta, 0.0]))

    @staticmethod
    def from_z_radians(theta: hints.Scalar) -> SO3:
        """Generates a z-axis rotation."""
        return SO3.exp(np.array([0.0, 0.0, theta]))

    @staticmethod
    def from_rpy_radians(
        roll: hints.Scalar,
        pitch: hints.Scalar,
        yaw: hints.Scalar,
    ) -> SO3:
        """Generates a transform from a set of Euler angles. Uses the ZYX mobile robot
        convention.

        Args:
            roll: X rotation, in radians. Applied first.
            pitch: Y rotation, in radians. Applied second.
            yaw: Z rotation, in radians. Applied last.

        Returns:
            Output.
        """
        return (
            SO3.from_z_radians(yaw)
            @ SO3.from_y_radians(pitch)
            @ SO3.from_x_radians(roll)
        )

    @staticmethod
    def from_quaternion_xyzw(xyzw: hints.QuaternionXyzw) -> SO3:
        """Construct a rotation from an `xyzw` quaternion.

        Note that `wxyz` quaternions can be constructed using the default dataclass
        constructor.

        Args:
            xyzw: xyzw quaternion. Shape should be (4,).

        Returns:
            Output.
        """
        xyzw = np.asarray(xyzw, dtype=np.float64)
        assert xyzw.shape == (4,)
        return SO3(wxyz=np.roll(xyzw, shift=1))

    def as_quaternion_xyzw(self) -> npt.NDArray[np.floating]:
        """Grab parameters as xyzw quaternion."""
        return np.roll(self.wxyz, shift=-1)

    # Factory.

    @classmethod
    @override
    def identity(cls) -> SO3:
        return SO3(wxyz=np.array([1.0, 0.0, 0.0, 0.0]))

    @classmethod
    @override
    def from_matrix(cls, matrix: npt.NDArray[np.floating]) -> SO3:
        assert matrix.shape == (3, 3)
        m = matrix

        # Branches follow "Converting a Rotation Matrix to a Quaternion" from Mike
        # Day, which picks the numerically safest diagonal term.
        # > https://d3cw3dd2w32x2b.cloudfront.net/wp-content/uploads/2015/01/matrix-to-quat.pdf
        if m[2, 2] < 0:
            if m[0, 0] > m[1, 1]:
                t = 1 + m[0, 0] - m[1, 1] - m[2, 2]
                q = [m[2, 1] - m[1, 2], t, m[1, 0] + m[0, 1], m[0, 2] + m[2, 0]]
            else:
                t = 1 - m[0, 0] + m[1, 1] - m[2, 2]
                q = [m[0, 2] - m[2, 0], m[1, 0] + m[0, 1], t, m[2, 1] + m[1, 2]]
        else:
            if m[0, 0] < -m[1, 1]:
                t = 1 - m[0, 0] - m[1, 1] + m[2, 2]
                q = [m[1, 0] - m[0, 1], m[0, 2] + m[2, 0], m[2, 1] + m[1, 2], t]
            else:
                t = 1 + m[0, 0] + m[1, 1] + m[2, 2]
                q = [t, m[2, 1] - m[1, 2], m[0, 2] - m[2, 0], m[1, 0] - m[0, 1]]

        return SO3(wxyz=np.asarray(q, dtype=np.float64) * 0.5 / np.sqrt(t))

    @classmethod
    @override
    def sample_uniform(cls, rng: np.random.Generator) -> SO3:
        # Uniformly sample over S^3.
        # > Reference: http://planning.cs.uiuc.edu/node198.html
        u1, u2, u3 = rng.uniform(
            low=np.zeros(3), high=np.array([1.0, 2.0 * np.pi, 2.0 * np.pi])
        )
        a = np.sqrt(1.0 - u1)
        b = np.sqrt(u1)
        return SO3(
            wxyz=np.array(
                [
                    a * np.sin(u2),
                    a * np.cos(u2),
                    b * np.sin(u3),
                    b * np.cos(u3),
                ]
            )
        )

    # Accessors.

    @override
    def as_matrix(self) -> npt.NDArray[np.floating]:
        norm = self.wxyz @ self.wxyz
        q = self.wxyz * np.sqrt(2.0 / norm)
        q = np.outer(q, q)
        return np.array(
            [
                [1.0 - q[2, 2] - q[3, 3], q[1, 2] - q[3, 0], q[1, 3] + q[2, 0]],
                [q[1, 2] + q[3, 0], 1.0 - q[1, 1] - q[3, 3], q[2, 3] - q[1, 0]],
                [q[1, 3] - q[2, 0], q[2, 3] + q[1, 0], 1.0 - q[1, 1] - q[2, 2]],
            ]
        )

    @override
    def parameters(self) -> npt.NDArray[np.floating]:
        return self.wxyz

    # Operations.

    @override
    def apply(self, target: npt.NDArray[np.floating]) -> npt.NDArray[np.floating]:
        assert target.shape == (3,)
        return self.as_matrix() @ target

    @override
    def multiply(self, other: SO3) -> SO3:
        w0, x0, y0, z0 = self.wxyz
        w1, x1, y1, z1 = other.wxyz
        return SO3(
            wxyz=np.array(
                [
                    w0 * w1 - x0 * x1 - y0 * y1 - z0 * z1,
                    w0 * x1 + x0 * w1 + y0 * z1 - z0 * y1,
                    w0 * y1 - x0 * z1 + y0 * w1 + z0 * x1,
                    w0 * z1 + x0 * y1 - y0 * x1 + z0 * w1,
                ]
            )
        )

    @staticmethod
    def exp(tangent: npt.NDArray[np.floating]) -> SO3:
        """Computes `expm(wedge(tangent))`, for an axis-angle vector."""
        # Reference:
        # > https://github.com/strasdat/Sophus/blob/a0fe89a323e20c42d3cecb590937eb7a06b8343a/sophus/so3.hpp#L583
        tangent = np.asarray(tangent, dtype=np.float64)
        assert tangent.shape == (3,)

        theta_squared = tangent @ tangent
        if theta_squared < get_epsilon(tangent.dtype):
            theta_pow_4 = theta_squared * theta_squared
            real_factor = 1.0 - theta_squared / 8.0 + theta_pow_4 / 384.0
            imaginary_factor = 0.5 - theta_squared / 48.0 + theta_pow_4 / 3840.0
        else:
            theta = np.sqrt(theta_squared)
            real_factor = np.cos(0.5 * theta)
            imaginary_factor = np.sin(0.5 * theta) / theta

        return SO3(wxyz=np.concatenate([[real_factor], imaginary_factor * tangent]))

    @override
    def inverse(self) -> SO3:
        # Negate complex terms.
        return SO3(wxyz=self.wxyz * np.array([1, -1, -1, -1]))

    @override
    def normalize(self) -> SO3:
        return SO3(wxyz=self.wxyz / np.linalg.norm(self.wxyz))
