from __future__ import annotations

import collections
from typing import Dict, List, Mapping, Optional, Set

from ._edges import Edge


def _undirected_neighbors(
    merged_view: Mapping[str, Mapping[str, Edge]],
) -> Dict[str, Set[str]]:
    neighbors: Dict[str, Set[str]] = {}
    for parent, children in merged_view.items():
        for child in children:
            neighbors.setdefault(parent, set()).add(child)
            neighbors.setdefault(child, set()).add(parent)
    return neighbors


def find_path(
    source: str,
    target: str,
    merged_view: Mapping[str, Mapping[str, Edge]],
) -> Optional[List[str]]:
    """Breadth-first search for a chain of frames linking `source` to `target`.

    Edges are stored parent -> child, but can be walked either way: reaching an
    ancestor means walking edges backwards. The visited set keeps the search
    finite if the feed introduced a cycle.

    Args:
        source: First frame of the path.
        target: Last frame of the path.
        merged_view: Edge snapshot from `FrameGraphStore.merged_view()`.

    Returns:
        Frame names from `source` to `target`, both inclusive, or `None` if the
        frames aren't connected.
    """
    if source == target:
        return [source]

    neighbors = _undirected_neighbors(merged_view)
    if source not in neighbors or target not in neighbors:
        return None

    # Maps each visited frame to the frame it was reached from.
    came_from: Dict[str, Optional[str]] = {source: None}
    queue = collections.deque([source])
    while queue:
        current = queue.popleft()
        for neighbor in sorted(neighbors[current]):
            if neighbor in came_from:
                continue
            came_from[neighbor] = current
            if neighbor == target:
                return _unwind(came_from, target)
            queue.append(neighbor)
    return None


def _unwind(came_from: Mapping[str, Optional[str]], target: str) -> List[str]:
    path = [target]
    previous = came_from[target]
    while previous is not None:
        path.append(previous)
        previous = came_from[previous]
    path.reverse()
    return path
