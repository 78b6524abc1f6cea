from typing import Tuple, Union

import numpy as np
import numpy.typing as npt

# Type aliases for function inputs.

Scalar = Union[float, npt.NDArray[np.floating]]
"""Type alias for `Union[float, Array]`."""

Vector3 = Union[Tuple[float, float, float], npt.NDArray[np.floating]]
"""Anything that can be read as an `(x, y, z)` vector."""

QuaternionXyzw = Union[Tuple[float, float, float, float], npt.NDArray[np.floating]]
"""Anything that can be read as an `(x, y, z, w)` quaternion."""


__all__ = [
    "Scalar",
    "Vector3",
    "QuaternionXyzw",
]
