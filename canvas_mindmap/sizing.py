"""Subtree height computation for the tree layout."""

import logging
from typing import Dict, Any, List, Iterable

logger = logging.getLogger(__name__)


def sorted_children_map(graph) -> Dict[str, List[str]]:
    """Build the source -> targets index once, each child list ordered by y."""
    return {
        parent_id: graph.sort_by_position(child_ids)
        for parent_id, child_ids in graph.children_map().items()
    }


def subtree_heights(node_map: Dict[str, Dict[str, Any]], children_map: Dict[str, List[str]],
                    root_ids: Iterable[str], vertical_gap: float) -> Dict[str, float]:
    """Compute the vertical space each node's subtree needs.

    A leaf needs its own height. An internal node needs the larger of its own
    height and the stacked heights of its children plus the gaps between
    them. One visited set is shared by the whole call: a node reached a second
    time (a cycle, or a descendant shared between parents) counts as 0 and is
    not descended into again, so the walk ends on any graph.

    Args:
        node_map: Node id -> node dict with at least 'height'
        children_map: Node id -> ordered child ids
        root_ids: Ids to start from
        vertical_gap: Space between stacked sibling subtrees

    Returns:
        Dict mapping each reached node id to its subtree height
    """
    heights: Dict[str, float] = {}
    visited = set()

    def calc_height(node_id: str) -> float:
        if node_id in visited:
            logger.debug(f"Node {node_id} reached twice while sizing, counting it as 0")
            return 0.0
        visited.add(node_id)

        node = node_map.get(node_id)
        if node is None:
            return 0.0

        children = [c for c in children_map.get(node_id, []) if c in node_map]
        if not children:
            heights[node_id] = node['height']
            return node['height']

        stacked = sum(calc_height(child_id) for child_id in children)
        stacked += vertical_gap * (len(children) - 1)
        height = max(node['height'], stacked)
        heights[node_id] = height
        return height

    for root_id in root_ids:
        calc_height(root_id)

    return heights


def heights_of(graph, root_ids: Iterable[str], vertical_gap: float) -> Dict[str, float]:
    """Subtree heights for ``root_ids`` over a :class:`GraphModel`."""
    return subtree_heights(graph.node_map, sorted_children_map(graph), root_ids, vertical_gap)
