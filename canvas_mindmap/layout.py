"""
Tree layout for mind map canvases.

Trees grow to the right: every child sits one horizontal gap past its
parent's right edge, siblings are stacked top to bottom in y order, and a
parent is centred vertically on the space its subtree reserves. The whole
canvas can be laid out, or just one tree or subtree in place.
"""

import logging
from typing import Dict, Any, List, Optional, Tuple

from canvas_mindmap.graph import GraphModel
from canvas_mindmap.sizing import sorted_children_map, subtree_heights

logger = logging.getLogger(__name__)


class TreeLayoutEngine:
    """Positions canvas nodes as left-to-right trees."""

    def __init__(self, settings: Dict[str, Any]):
        self.settings = settings

    @property
    def horizontal_gap(self) -> float:
        return self.settings['layout']['horizontal_gap']

    @property
    def vertical_gap(self) -> float:
        return self.settings['layout']['vertical_gap']

    def _place(self, node_map: Dict[str, Dict[str, Any]], children_map: Dict[str, List[str]],
               heights: Dict[str, float], node_id: str, x: float, y: float, visited: set) -> None:
        """Place ``node_id`` in the slot starting at ``y`` and recurse into its children."""
        if node_id in visited:
            # Cycle: keep the position it already got
            return
        visited.add(node_id)

        node = node_map.get(node_id)
        if node is None:
            return

        height = heights.get(node_id, node['height'])
        node['x'] = x
        if height > node['height']:
            node['y'] = y + (height - node['height']) / 2
        else:
            node['y'] = y

        # Children already placed under an earlier parent were sized as 0 here and get no slot
        children = [c for c in children_map.get(node_id, [])
                    if c in node_map and c in heights and c not in visited]
        if not children:
            return

        stacked = sum(heights[c] for c in children) + self.vertical_gap * (len(children) - 1)
        current_y = y
        if stacked < node['height']:
            current_y = y + (node['height'] - stacked) / 2

        child_x = x + node['width'] + self.horizontal_gap
        for child_id in children:
            self._place(node_map, children_map, heights, child_id, child_x, current_y, visited)
            current_y += heights[child_id] + self.vertical_gap

    def _write_back(self, canvas, graph: GraphModel) -> None:
        canvas.import_data(graph.nodes, graph.edges)
        canvas.request_frame()
        canvas.request_save()

    def layout_canvas(self, canvas, anchor_x: float = 0.0, anchor_y: float = 0.0) -> Dict[str, Tuple[float, float]]:
        """Lay out every tree on the canvas, stacked downward from the anchor.

        Returns:
            Dict mapping each placed node id to its new (x, y)
        """
        graph = GraphModel.from_canvas(canvas)
        root_ids = graph.roots()
        children_map = sorted_children_map(graph)
        heights = subtree_heights(graph.node_map, children_map, root_ids, self.vertical_gap)

        visited = set()
        current_y = anchor_y
        for root_id in root_ids:
            self._place(graph.node_map, children_map, heights, root_id, anchor_x, current_y, visited)
            current_y += heights.get(root_id, graph.node_map[root_id]['height']) + self.vertical_gap

        self._write_back(canvas, graph)
        logger.info(f"Laid out {len(root_ids)} tree(s), {len(visited)} node(s) on canvas {canvas.canvas_id}")
        return {i: (graph.node_map[i]['x'], graph.node_map[i]['y']) for i in visited if i in graph.node_map}

    def layout_subtree(self, canvas, node_id: str, whole_tree: bool = True,
                       anchor_x: Optional[float] = None, anchor_y: Optional[float] = None
                       ) -> Dict[str, Tuple[float, float]]:
        """Lay out one tree (or one subtree) where it currently stands.

        With ``whole_tree`` the layout starts from the topmost ancestor of
        ``node_id``, otherwise from ``node_id`` itself. Without an explicit
        anchor the layout root keeps its x and the top of its current slot,
        so nodes outside the laid out tree do not move and running the layout
        twice gives the same coordinates.

        Returns:
            Dict mapping each placed node id to its new (x, y)
        """
        graph = GraphModel.from_canvas(canvas)
        if graph.get(node_id) is None:
            logger.debug(f"Skipping subtree layout: node {node_id} not found")
            return {}

        root_id = graph.topmost_ancestor(node_id) if whole_tree else node_id
        children_map = sorted_children_map(graph)
        heights = subtree_heights(graph.node_map, children_map, [root_id], self.vertical_gap)

        root = graph.node_map[root_id]
        if anchor_x is None:
            anchor_x = root['x']
        if anchor_y is None:
            anchor_y = root['y'] - max(0.0, (heights[root_id] - root['height']) / 2)

        visited = set()
        self._place(graph.node_map, children_map, heights, root_id, anchor_x, anchor_y, visited)

        self._write_back(canvas, graph)
        logger.info(f"Laid out subtree of {root_id} ({len(visited)} node(s)) on canvas {canvas.canvas_id}")
        return {i: (graph.node_map[i]['x'], graph.node_map[i]['y']) for i in visited if i in graph.node_map}

    def relayout(self, canvas, node_id: Optional[str], granularity: str) -> Dict[str, Tuple[float, float]]:
        """Run the layout that ``granularity`` asks for around ``node_id``."""
        if granularity == 'none':
            return {}
        if granularity == 'canvas':
            return self.layout_canvas(canvas)
        if node_id is None:
            logger.debug(f"No node to lay out at granularity '{granularity}'")
            return {}
        return self.layout_subtree(canvas, node_id, whole_tree=(granularity == 'tree'))
