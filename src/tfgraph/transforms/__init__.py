"""Rigid transform math used by the frame graph, following a numpy Lie group
interface.

Implements SO(3) and SE(3). Rotations are parameterized via unit quaternions in
`wxyz` order.
"""

from ._base import MatrixLieGroup as MatrixLieGroup
from ._base import SEBase as SEBase
from ._base import SOBase as SOBase
from ._se3 import SE3 as SE3
from ._so3 import SO3 as SO3
