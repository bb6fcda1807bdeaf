"""Read-only parent/child view over a canvas snapshot.

Edges point from parent to child. Relations are derived fresh from each
snapshot; edges that reference missing nodes are ignored and cycles are
left for the callers to guard against.
"""

import logging
from typing import Dict, Any, List, Optional, Iterable

logger = logging.getLogger(__name__)


def position_key(node: Dict[str, Any]):
    """Sort key ordering nodes top to bottom, ties broken by id."""
    return (node.get('y', 0.0), str(node.get('id')))


class GraphModel:
    """Parent, child and root lookups over one nodes/edges snapshot."""

    def __init__(self, nodes: Iterable[Dict[str, Any]], edges: Iterable[Dict[str, Any]]):
        self.nodes = list(nodes)
        self.edges = list(edges)
        self.node_map: Dict[str, Dict[str, Any]] = {n['id']: n for n in self.nodes}
        dangling = [e for e in self.edges if not self._is_live(e)]
        if dangling:
            logger.debug(f"Ignoring {len(dangling)} edge(s) that reference missing nodes")

    @classmethod
    def from_canvas(cls, canvas) -> 'GraphModel':
        data = canvas.get_data()
        return cls(data.get('nodes', []), data.get('edges', []))

    def _is_live(self, edge: Dict[str, Any]) -> bool:
        return edge.get('fromNode') in self.node_map and edge.get('toNode') in self.node_map

    def get(self, node_id: str) -> Optional[Dict[str, Any]]:
        return self.node_map.get(node_id)

    def sort_by_position(self, node_ids: Iterable[str]) -> List[str]:
        """Order ids by their node's y coordinate."""
        return sorted(node_ids, key=lambda i: position_key(self.node_map[i]))

    def children_map(self) -> Dict[str, List[str]]:
        """Build the source -> targets index in edge order.

        Build this once per operation and pass it down; the per-node lookups
        below each scan every edge.
        """
        index: Dict[str, List[str]] = {}
        for edge in self.edges:
            if not self._is_live(edge):
                continue
            targets = index.setdefault(edge['fromNode'], [])
            if edge['toNode'] not in targets:
                targets.append(edge['toNode'])
        return index

    def children_unsorted(self, node_id: str) -> List[str]:
        """Children of ``node_id`` in edge order."""
        children = []
        for edge in self.edges:
            if edge.get('fromNode') == node_id and self._is_live(edge) and edge['toNode'] not in children:
                children.append(edge['toNode'])
        return children

    def children(self, node_id: str) -> List[str]:
        """Children of ``node_id`` ordered top to bottom."""
        return self.sort_by_position(self.children_unsorted(node_id))

    def parent(self, node_id: str) -> Optional[str]:
        """Return the parent of ``node_id``.

        With several incoming edges the edge with the lowest id decides.
        """
        incoming = [e for e in self.edges if e.get('toNode') == node_id and self._is_live(e)]
        if not incoming:
            return None
        return min(incoming, key=lambda e: str(e['id']))['fromNode']

    def roots(self) -> List[str]:
        """Nodes without a live incoming edge, ordered top to bottom."""
        child_ids = {e['toNode'] for e in self.edges if self._is_live(e)}
        return self.sort_by_position(n['id'] for n in self.nodes if n['id'] not in child_ids)

    def topmost_ancestor(self, node_id: str) -> str:
        """Follow parents upward until a root, or until a cycle closes."""
        seen = {node_id}
        current = node_id
        while True:
            parent = self.parent(current)
            if parent is None or parent in seen:
                return current
            seen.add(parent)
            current = parent

    def descendants(self, node_id: str) -> List[str]:
        """Return ``node_id`` and every node reachable through outgoing edges.

        Shared descendants appear once; cycles are cut at the first revisit.
        """
        children_map = self.children_map()
        collected = []
        seen = set()
        stack = [node_id]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            collected.append(current)
            stack.extend(reversed(children_map.get(current, [])))
        return collected
