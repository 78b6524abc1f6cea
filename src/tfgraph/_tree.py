from __future__ import annotations

import dataclasses
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Set

from rich.tree import Tree

from ._edges import Edge


@dataclasses.dataclass
class TreeNode:
    """Presentation node for one frame. Rebuilt on every `build_tree()` call and
    never used for transform math."""

    name: str
    parent: Optional[str] = None
    """Parent frame name. `None` for roots."""
    children: List[TreeNode] = dataclasses.field(default_factory=list)
    last_seen_at: Optional[float] = None
    """When the edge into this frame was last seen. `None` for roots."""
    is_valid: bool = True
    is_static: bool = False
    """True if the edge into this frame is durable."""

    def walk(self) -> Iterator[TreeNode]:
        """Depth-first iteration over this node and its descendants. Each node is
        yielded once, even if malformed input introduced a cycle."""
        visited: Set[str] = set()
        stack = [self]
        while stack:
            node = stack.pop()
            if node.name in visited:
                continue
            visited.add(node.name)
            yield node
            stack.extend(reversed(node.children))


def materialize_tree(
    frames: Iterable[str],
    merged_view: Mapping[str, Mapping[str, Edge]],
    now: float,
    expiry_window: float,
    default_root: Optional[str] = None,
) -> List[TreeNode]:
    """Build the frame hierarchy from a merged edge view.

    Roots are frames without an incoming edge. If every frame has a parent and
    `default_root` is known, it is used as the only root.
    """
    node_from_name: Dict[str, TreeNode] = {name: TreeNode(name) for name in frames}

    for parent_name in sorted(merged_view):
        children = merged_view[parent_name]
        parent_node = node_from_name.setdefault(parent_name, TreeNode(parent_name))
        for child_name in sorted(children):
            edge = children[child_name]
            child_node = node_from_name.setdefault(child_name, TreeNode(child_name))
            child_node.parent = parent_name
            child_node.last_seen_at = edge.last_seen_at
            child_node.is_valid = edge.is_valid(now, expiry_window)
            child_node.is_static = edge.is_static
            parent_node.children.append(child_node)

    roots = sorted(
        (node for node in node_from_name.values() if node.parent is None),
        key=lambda node: node.name,
    )
    if len(roots) == 0 and default_root in node_from_name:
        roots = [node_from_name[default_root]]
    return roots


def format_tree(
    roots: List[TreeNode], now: float, label: str = "[bold]frames[/bold]"
) -> Tree:
    """Render a materialized tree as a `rich` tree with validity badges."""
    out = Tree(label)
    visited: Set[str] = set()

    def badge(node: TreeNode) -> str:
        if node.last_seen_at is None:
            return ""
        if node.is_static:
            return " [blue]static[/blue]"
        age = now - node.last_seen_at
        if node.is_valid:
            return f" [green]ok[/green] [dim]{age:.1f}s ago[/dim]"
        return f" [red]stale[/red] [dim]{age:.1f}s ago[/dim]"

    def add(branch: Tree, node: TreeNode) -> None:
        if node.name in visited:
            branch.add(f"[yellow]{node.name}[/yellow] [dim](cycle)[/dim]")
            return
        visited.add(node.name)
        sub = branch.add(f"{node.name}{badge(node)}")
        for child in node.children:
            add(sub, child)

    for root in roots:
        add(out, root)
    return out
