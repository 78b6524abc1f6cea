""":mod:`tfgraph` resolves rigid transforms between named coordinate frames.

Edges arrive from a transform feed as parent -> child rigid transforms, either
durable (`/tf_static`-style) or expiring (`/tf`-style). Any two connected frames
can then be related with `TransformGraph.resolve()`, with results expressed in a
+Y-up renderer convention.
"""

from . import transforms as transforms
from ._composer import TransformComposer as TransformComposer
from ._config import GraphConfig as GraphConfig
from ._coordinates import R_TARGET_SOURCE as R_TARGET_SOURCE
from ._coordinates import to_source_rotation as to_source_rotation
from ._coordinates import to_source_transform as to_source_transform
from ._coordinates import to_source_vector as to_source_vector
from ._coordinates import to_target_rotation as to_target_rotation
from ._coordinates import to_target_transform as to_target_transform
from ._coordinates import to_target_vector as to_target_vector
from ._edges import Edge as Edge
from ._edges import EdgeClass as EdgeClass
from ._graph import FrameInfo as FrameInfo
from ._graph import TransformGraph as TransformGraph
from ._messages import TransformStamped as TransformStamped
from ._messages import iter_transforms as iter_transforms
from ._messages import parse_transform_stamped as parse_transform_stamped
from ._notifier import Scheduler as Scheduler
from ._notifier import ThreadingScheduler as ThreadingScheduler
from ._notifier import UpdateNotifier as UpdateNotifier
from ._path import find_path as find_path
from ._store import FrameGraphStore as FrameGraphStore
from ._tree import TreeNode as TreeNode
from ._tree import format_tree as format_tree

__version__ = "0.1.0"
