from __future__ import annotations

import dataclasses

import numpy as np
import numpy.typing as npt
from typing_extensions import override

from . import _base, hints
from ._so3 import SO3


@dataclasses.dataclass(frozen=True)
class SE3(
    _base.SEBase[SO3],
    matrix_dim=4,
    parameters_dim=7,
    space_dim=3,
):
    """Special Euclidean group for proper rigid transforms in 3D.

    Internal parameterization is `(qw, qx, qy, qz, x, y, z)`.
    """

    wxyz_xyz: npt.NDArray[np.floating]
    """Internal parameters. wxyz quaternion followed by xyz translation. Shape should be `(7,)`."""

    @override
    def __repr__(self) -> str:
        quat = np.round(self.wxyz_xyz[:4], 5)
        trans = np.round(self.wxyz_xyz[4:], 5)
        return f"{self.__class__.__name__}(wxyz={quat}, xyz={trans})"

    @staticmethod
    def from_xyz_xyzw(
        translation: hints.Vector3, rotation_xyzw: hints.QuaternionXyzw
    ) -> SE3:
        """Construct a transform from the `(x, y, z)` translation and `(x, y, z, w)`
        quaternion layout used by transform messages."""
        return SE3.from_rotation_and_translation(
            rotation=SO3.from_quaternion_xyzw(rotation_xyzw),
            translation=np.asarray(translation, dtype=np.float64),
        )

    # SE-specific.

    @classmethod
    @override
    def from_rotation_and_translation(
        cls,
        rotation: SO3,
        translation: npt.NDArray[np.floating],
    ) -> SE3:
        assert translation.shape == (3,)
        return SE3(wxyz_xyz=np.concatenate([rotation.wxyz, translation]))

    @classmethod
    def from_rotation(cls, rotation: SO3) -> SE3:
        return cls.from_rotation_and_translation(rotation, np.zeros(3))

    @classmethod
    def from_translation(cls, translation: npt.NDArray[np.floating]) -> SE3:
        return cls.from_rotation_and_translation(SO3.identity(), translation)

    @override
    def rotation(self) -> SO3:
        return SO3(wxyz=self.wxyz_xyz[:4])

    @override
    def translation(self) -> npt.NDArray[np.floating]:
        return self.wxyz_xyz[4:]

    # Factory.

    @classmethod
    @override
    def identity(cls) -> SE3:
        return SE3(wxyz_xyz=np.array([1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0]))

    @classmethod
    @override
    def from_matrix(cls, matrix: npt.NDArray[np.floating]) -> SE3:
        assert matrix.shape == (4, 4) or matrix.shape == (3, 4)
        # Currently assumes bottom row is [0, 0, 0, 1].
        return SE3.from_rotation_and_translation(
            rotation=SO3.from_matrix(matrix[:3, :3]),
            translation=matrix[:3, 3],
        )

    @classmethod
    @override
    def sample_uniform(cls, rng: np.random.Generator) -> SE3:
        return SE3.from_rotation_and_translation(
            rotation=SO3.sample_uniform(rng),
            translation=rng.uniform(low=-1.0, high=1.0, size=(3,)),
        )

    # Accessors.

    @override
    def as_matrix(self) -> npt.NDArray[np.floating]:
        out = np.eye(4)
        out[:3, :3] = self.rotation().as_matrix()
        out[:3, 3] = self.translation()
        return out

    @override
    def parameters(self) -> npt.NDArray[np.floating]:
        return self.wxyz_xyz
