"""Sector adjacency graph and spanning-tree edge selection.

Nodes are sector indices. Candidate edges join grid neighbours (left/right
or up/down, never diagonal). A randomized Kruskal pass over an array-based
union-find selects a spanning tree, then every remaining edge is kept with
the configured extra-connectivity probability to add loops.
"""
from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Sequence, Set, Tuple

from .config import GenerationConfig

HORIZONTAL = "horizontal"
VERTICAL = "vertical"


@dataclass
class Edge:
    a: int
    b: int
    axis: str
    selected: bool = False
    in_tree: bool = False
    absorbed: bool = False

    @property
    def key(self) -> Tuple[int, int]:
        return (self.a, self.b)

    def to_dict(self):
        return {
            "a": self.a,
            "b": self.b,
            "axis": self.axis,
            "selected": self.selected,
            "in_tree": self.in_tree,
            "absorbed": self.absorbed,
        }


class UnionFind:
    __slots__ = ("parent", "size")

    def __init__(self, n: int):
        self.parent = list(range(n))
        self.size = [1] * n

    def find(self, a: int) -> int:
        parent = self.parent
        while parent[a] != a:
            parent[a] = parent[parent[a]]
            a = parent[a]
        return a

    def union(self, a: int, b: int) -> bool:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        if self.size[ra] < self.size[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        self.size[ra] += self.size[rb]
        return True


class ConnectivityGraph:
    def __init__(self, node_count: int, edges: List[Edge]):
        self.node_count = node_count
        self.edges = edges

    def selected_edges(self) -> List[Edge]:
        return [e for e in self.edges if e.selected]

    def routable_edges(self) -> List[Edge]:
        """Selected edges that still need a hallway (not absorbed by a merge)."""
        return [e for e in self.edges if e.selected and not e.absorbed]

    def tree_edges(self) -> List[Edge]:
        return [e for e in self.edges if e.in_tree]

    def edge(self, a: int, b: int) -> Edge:
        a, b = min(a, b), max(a, b)
        for e in self.edges:
            if e.a == a and e.b == b:
                return e
        raise KeyError((a, b))

    def neighbours(self, selected_only: bool = True) -> Dict[int, Set[int]]:
        adj: Dict[int, Set[int]] = {i: set() for i in range(self.node_count)}
        for e in self.edges:
            if selected_only and not e.selected:
                continue
            adj[e.a].add(e.b)
            adj[e.b].add(e.a)
        return adj

    def reachable_from(self, start: int = 0) -> Set[int]:
        adj = self.neighbours()
        seen = {start}
        q = deque([start])
        while q:
            cur = q.popleft()
            for nxt in adj[cur]:
                if nxt not in seen:
                    seen.add(nxt)
                    q.append(nxt)
        return seen

    def is_connected(self) -> bool:
        if self.node_count == 0:
            return True
        return len(self.reachable_from(0)) == self.node_count


def grid_edges(columns: int, rows: int) -> List[Edge]:
    """All grid-neighbour edges, ``a < b``, in deterministic index order."""
    edges: List[Edge] = []
    for row in range(rows):
        for col in range(columns):
            idx = col + row * columns
            if col + 1 < columns:
                edges.append(Edge(idx, idx + 1, HORIZONTAL))
            if row + 1 < rows:
                edges.append(Edge(idx, idx + columns, VERTICAL))
    return edges


def select_spanning_tree(node_count: int, edges: Sequence[Edge], rng: random.Random) -> int:
    """Mark a random spanning tree on ``edges``; return the tree size."""
    order = list(range(len(edges)))
    rng.shuffle(order)
    uf = UnionFind(node_count)
    picked = 0
    for i in order:
        e = edges[i]
        if uf.union(e.a, e.b):
            e.selected = True
            e.in_tree = True
            picked += 1
            if picked == node_count - 1:
                break
    return picked


def build_graph(columns: int, rows: int, config: GenerationConfig, rng: random.Random) -> ConnectivityGraph:
    node_count = columns * rows
    edges = grid_edges(columns, rows)
    select_spanning_tree(node_count, edges, rng)
    for e in edges:
        if e.in_tree:
            continue
        if rng.random() < config.extra_connectivity_probability:
            e.selected = True
    return ConnectivityGraph(node_count, edges)


__all__ = [
    "Edge",
    "UnionFind",
    "ConnectivityGraph",
    "HORIZONTAL",
    "VERTICAL",
    "grid_edges",
    "select_spanning_tree",
    "build_graph",
]
