import abc
from typing import ClassVar, Generic, TypeVar, Union, overload

import numpy as np
import numpy.typing as npt
from typing_extensions import Never, Self, final, override


class MatrixLieGroup(abc.ABC):
    """Interface shared by the rotation and rigid transform groups."""

    matrix_dim: ClassVar[int]
    """Dimension of square matrix output from `.as_matrix()`."""

    parameters_dim: ClassVar[int]
    """Dimension of underlying parameters, `.parameters()`."""

    space_dim: ClassVar[int]
    """Dimension of coordinates that can be transformed."""

    def __init_subclass__(
        cls,
        matrix_dim: int = 0,
        parameters_dim: int = 0,
        space_dim: int = 0,
    ) -> None:
        cls.matrix_dim = matrix_dim
        cls.parameters_dim = parameters_dim
        cls.space_dim = space_dim

    @overload
    def __matmul__(self, other: Self) -> Self: ...

    @overload
    def __matmul__(
        self, other: npt.NDArray[np.floating]
    ) -> npt.NDArray[np.floating]: ...

    def __matmul__(
        self, other: Union[Self, npt.NDArray[np.floating]]
    ) -> Union[Self, npt.NDArray[np.floating]]:
        """Overload for the `@` operator.

        Applies the transform to a point when `other` is an array, and composes
        transforms otherwise.
        """
        if isinstance(other, np.ndarray):
            return self.apply(target=other)
        elif isinstance(other, MatrixLieGroup):
            assert self.space_dim == other.space_dim
            return self.multiply(other=other)  # type: ignore
        else:
            assert False, f"Invalid argument type for `@` operator: {type(other)}"

    # Factory.

    @classmethod
    @abc.abstractmethod
    def identity(cls) -> Self:
        """Returns identity element."""

    @classmethod
    @abc.abstractmethod
    def from_matrix(cls, matrix: npt.NDArray[np.floating]) -> Self:
        """Get group member from matrix representation."""

    @classmethod
    @abc.abstractmethod
    def sample_uniform(cls, rng: np.random.Generator) -> Self:
        """Draw a uniform sample from the group. Translations (if applicable) are in
        the range [-1, 1]."""

    # Accessors.

    @abc.abstractmethod
    def as_matrix(self) -> npt.NDArray[np.floating]:
        """Get transformation as a matrix. Homogeneous for SE groups."""

    @abc.abstractmethod
    def parameters(self) -> npt.NDArray[np.floating]:
        """Get underlying representation."""

    # Operations.

    @abc.abstractmethod
    def apply(self, target: npt.NDArray[np.floating]) -> npt.NDArray[np.floating]:
        """Applies group action to a point.

        Args:
            target: Point to transform. Shape should be `(space_dim,)`.

        Returns:
            Transformed point.
        """

    # Multiplying two arbitrary group members is never type-safe; subclasses
    # broaden `Never` to their own type.
    @abc.abstractmethod
    def multiply(self, other: Never) -> Self:
        """Composes this transformation with another.

        Returns:
            self @ other
        """

    @abc.abstractmethod
    def inverse(self) -> Self:
        """Computes the inverse of our transform."""

    @abc.abstractmethod
    def normalize(self) -> Self:
        """Normalize/projects values and returns."""


class SOBase(MatrixLieGroup):
    """Base class for special orthogonal groups."""


ContainedSOType = TypeVar("ContainedSOType", bound=SOBase)


class SEBase(Generic[ContainedSOType], MatrixLieGroup):
    """Base class for special Euclidean groups.

    Each SE(N) group member contains an SO(N) rotation, as well as an N-dimensional
    translation vector.
    """

    @classmethod
    @abc.abstractmethod
    def from_rotation_and_translation(
        cls,
        rotation: ContainedSOType,
        translation: npt.NDArray[np.floating],
    ) -> Self:
        """Construct a rigid transform from a rotation and a translation."""

    @abc.abstractmethod
    def rotation(self) -> ContainedSOType:
        """Returns a transform's rotation term."""

    @abc.abstractmethod
    def translation(self) -> npt.NDArray[np.floating]:
        """Returns a transform's translation term."""

    # Rotation-then-translation semantics are shared by every SE group.

    @final
    @override
    def apply(self, target: npt.NDArray[np.floating]) -> npt.NDArray[np.floating]:
        return self.rotation() @ target + self.translation()  # type: ignore

    @final
    @override
    def multiply(self, other: Self) -> Self:
        return type(self).from_rotation_and_translation(
            rotation=self.rotation() @ other.rotation(),
            translation=(self.rotation() @ other.translation()) + self.translation(),
        )

    @final
    @override
    def inverse(self) -> Self:
        R_inv = self.rotation().inverse()
        return type(self).from_rotation_and_translation(
            rotation=R_inv,
            translation=-(R_inv @ self.translation()),
        )

    @final
    @override
    def normalize(self) -> Self:
        return type(self).from_rotation_and_translation(
            rotation=self.rotation().normalize(),
            translation=self.translation(),
        )
