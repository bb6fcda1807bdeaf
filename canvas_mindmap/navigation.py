"""
Directional navigation between canvas nodes.

Two styles are supported:
- Strict navigation follows edges only: left to the parent, right to the
  topmost child, up/down between siblings (or between roots).
- Free navigation tries strict navigation first and falls back to the
  nearest node in the requested direction by geometry.

Both have an "until end" variant that keeps stepping until nothing is left
in that direction or a node would be visited twice.
"""

import logging
from typing import Dict, Any, Optional, Callable, List

from canvas_mindmap.graph import GraphModel
from canvas_mindmap.utils import is_feature_active, focused_node_id

logger = logging.getLogger(__name__)

DIRECTION_ALIASES = {
    'arrowup': 'up',
    'arrowdown': 'down',
    'arrowleft': 'left',
    'arrowright': 'right',
}


def normalize_direction(direction: str) -> Optional[str]:
    """Map 'ArrowUp'/'up'/'UP' style names to 'up', 'down', 'left' or 'right'."""
    if not isinstance(direction, str):
        return None
    name = direction.strip().lower()
    name = DIRECTION_ALIASES.get(name, name)
    return name if name in ('up', 'down', 'left', 'right') else None


def _bounds(node: Dict[str, Any]):
    return node['x'], node['y'], node['x'] + node['width'], node['y'] + node['height']


def _interval_gap(a_min: float, a_max: float, b_min: float, b_max: float) -> float:
    """Distance between two intervals on one axis, 0 if they overlap."""
    return max(b_min - a_max, a_min - b_max, 0.0)


def rect_distance_sq(a: Dict[str, Any], b: Dict[str, Any]) -> float:
    """Squared distance between the nearest edges of two rectangles."""
    a_left, a_top, a_right, a_bottom = _bounds(a)
    b_left, b_top, b_right, b_bottom = _bounds(b)
    dx = _interval_gap(a_left, a_right, b_left, b_right)
    dy = _interval_gap(a_top, a_bottom, b_top, b_bottom)
    return dx * dx + dy * dy


def strict_target(graph: GraphModel, node_id: str, direction: str) -> Optional[str]:
    """One step of strict tree navigation, or None if there is nowhere to go."""
    direction = normalize_direction(direction)
    if direction is None or graph.get(node_id) is None:
        return None

    if direction == 'left':
        return graph.parent(node_id)

    if direction == 'right':
        children = graph.children(node_id)
        return children[0] if children else None

    parent_id = graph.parent(node_id)
    siblings = graph.children(parent_id) if parent_id is not None else graph.roots()
    if node_id not in siblings:
        return None
    index = siblings.index(node_id)
    if direction == 'up' and index > 0:
        return siblings[index - 1]
    if direction == 'down' and index < len(siblings) - 1:
        return siblings[index + 1]
    return None


def _is_past(current: Dict[str, Any], node: Dict[str, Any], direction: str) -> bool:
    cur_left, cur_top, cur_right, cur_bottom = _bounds(current)
    left, top, right, bottom = _bounds(node)
    if direction == 'up':
        return bottom < cur_top
    if direction == 'down':
        return top > cur_bottom
    if direction == 'left':
        return right < cur_left
    return left > cur_right


def _perpendicular_gap(current: Dict[str, Any], node: Dict[str, Any], direction: str) -> float:
    cur_left, cur_top, cur_right, cur_bottom = _bounds(current)
    left, top, right, bottom = _bounds(node)
    if direction in ('up', 'down'):
        return _interval_gap(cur_left, cur_right, left, right)
    return _interval_gap(cur_top, cur_bottom, top, bottom)


def _cousin_to_the_right(graph: GraphModel, node_id: str) -> Optional[str]:
    """First child of a sibling, scanning siblings in edge order."""
    parent_id = graph.parent(node_id)
    if parent_id is None:
        return None
    for sibling_id in graph.children_unsorted(parent_id):
        if sibling_id == node_id:
            continue
        children = graph.children_unsorted(sibling_id)
        if children:
            return children[0]
    return None


def free_target(graph: GraphModel, node_id: str, direction: str) -> Optional[str]:
    """One step of free navigation.

    Falls back in order: strict navigation, a cousin subtree (right only),
    the nearest node whose perpendicular span overlaps the current node,
    and finally the node with the smallest perpendicular offset.
    """
    direction = normalize_direction(direction)
    current = graph.get(node_id) if direction else None
    if current is None:
        return None

    target = strict_target(graph, node_id, direction)
    if target is not None:
        return target

    if direction == 'right':
        target = _cousin_to_the_right(graph, node_id)
        if target is not None:
            return target

    candidates = [n for n in graph.nodes if n['id'] != node_id and _is_past(current, n, direction)]
    if not candidates:
        return None

    between = [n for n in candidates if _perpendicular_gap(current, n, direction) == 0]
    if between:
        best = min(between, key=lambda n: rect_distance_sq(current, n))
    else:
        best = min(candidates, key=lambda n: _perpendicular_gap(current, n, direction))
    return best['id']


def until_end(step: Callable[[GraphModel, str, str], Optional[str]], graph: GraphModel,
              node_id: str, direction: str) -> str:
    """Repeat ``step`` until it finds nothing or would revisit a node.

    Returns:
        The last node reached, or ``node_id`` if no step succeeded
    """
    visited = {node_id}
    last = node_id
    while True:
        next_id = step(graph, last, direction)
        if next_id is None or next_id in visited:
            return last
        visited.add(next_id)
        last = next_id


def strict_until_end(graph: GraphModel, node_id: str, direction: str) -> str:
    return until_end(strict_target, graph, node_id, direction)


def free_until_end(graph: GraphModel, node_id: str, direction: str) -> str:
    return until_end(free_target, graph, node_id, direction)


class NavigationOps:
    """Keyboard navigation commands acting on the canvas selection."""

    def __init__(self, settings: Dict[str, Any]):
        self.settings = settings

    def navigate(self, canvas, direction: str, free: bool = False, to_end: bool = False) -> Optional[str]:
        """Move the selection one step (or to the end) in ``direction``.

        Returns:
            The newly selected node id, or None if the selection did not move
        """
        if canvas is None or not is_feature_active(canvas, self.settings):
            return None
        current_id = focused_node_id(canvas)
        if current_id is None:
            return None

        graph = GraphModel.from_canvas(canvas)
        if to_end:
            target = (free_until_end if free else strict_until_end)(graph, current_id, direction)
        else:
            target = (free_target if free else strict_target)(graph, current_id, direction)

        if target is None or target == current_id:
            logger.debug(f"No {'free' if free else 'strict'} target {direction} of node {current_id}")
            return None
        canvas.select_only(target)
        canvas.zoom_to_selection()
        logger.debug(f"Navigated {direction} from {current_id} to {target}")
        return target

    def available_moves(self, canvas, free: bool = False) -> Dict[str, Optional[str]]:
        """Targets of a single step in every direction from the selected node."""
        current_id = focused_node_id(canvas) if canvas is not None else None
        if current_id is None:
            return {}
        graph = GraphModel.from_canvas(canvas)
        step = free_target if free else strict_target
        return {direction: step(graph, current_id, direction) for direction in ('up', 'down', 'left', 'right')}
