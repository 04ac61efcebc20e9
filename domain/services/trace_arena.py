from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Tuple

from domain.models import TraceNode


@dataclass(frozen=True)
class TraceArena:
    """Breadth-first numbering of a trace tree.

    Node ids are assigned in discovery order, so the root is 0 and every child
    id is larger than its parent's. Walking ids backwards therefore visits
    children before parents, and walking forwards visits parents first.
    """

    nodes: List[TraceNode]
    parents: List[int]
    children: List[List[int]]
    depths: List[int]
    levels: List[List[int]]

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def max_depth(self) -> int:
        return len(self.levels) - 1


def build_trace_arena(root: TraceNode) -> TraceArena:
    nodes: List[TraceNode] = [root]
    parents: List[int] = [-1]
    children: List[List[int]] = [[]]
    depths: List[int] = [0]
    levels: List[List[int]] = [[0]]

    queue: Deque[Tuple[int, TraceNode]] = deque([(0, root)])
    while queue:
        node_id, node = queue.popleft()
        depth = depths[node_id] + 1
        for child in node.children:
            child_id = len(nodes)
            nodes.append(child)
            parents.append(node_id)
            children.append([])
            depths.append(depth)
            children[node_id].append(child_id)
            if depth == len(levels):
                levels.append([])
            levels[depth].append(child_id)
            queue.append((child_id, child))

    return TraceArena(
        nodes=nodes,
        parents=parents,
        children=children,
        depths=depths,
        levels=levels,
    )
