"""
Structural edits for mind map canvases.

This module contains the keyboard-driven mutations:
- Creating root, child and sibling nodes
- Deleting a node with its whole subtree
- Entering edit mode or picking a node to select
- Resizing and relaying out a node after its text was edited

Every operation checks its guards first (file-name gate, exactly one
selected node, node not being edited) and quietly does nothing when they
fail. Layout after a mutation goes through the canvas's LayoutScheduler.
"""

import logging
from typing import Dict, Any, List, Optional

from canvas_mindmap.graph import GraphModel
from canvas_mindmap.layout import TreeLayoutEngine
from canvas_mindmap.measure import TextMeasurer, EstimatingMeasurer, fit_node_to_text
from canvas_mindmap.scheduler import LayoutScheduler, SessionRegistry
from canvas_mindmap.settings import layout_granularity_for
from canvas_mindmap.utils import is_feature_active, focused_node_id, find_closest_node

logger = logging.getLogger(__name__)


class MutationOps:
    """Create and delete nodes, then lay the affected tree out again."""

    def __init__(self, settings: Dict[str, Any], layout_engine: Optional[TreeLayoutEngine] = None,
                 scheduler: Optional[LayoutScheduler] = None, sessions: Optional[SessionRegistry] = None,
                 measurer: Optional[TextMeasurer] = None):
        self.settings = settings
        self.layout_engine = layout_engine if layout_engine is not None else TreeLayoutEngine(settings)
        self.scheduler = scheduler if scheduler is not None else LayoutScheduler()
        self.sessions = sessions if sessions is not None else SessionRegistry()
        self.measurer = measurer if measurer is not None else EstimatingMeasurer()

    @property
    def node_width(self) -> float:
        return self.settings['create_node']['width']

    @property
    def node_height(self) -> float:
        return self.settings['create_node']['height']

    @property
    def vertical_gap(self) -> float:
        return self.settings['layout']['vertical_gap']

    @property
    def horizontal_gap(self) -> float:
        return self.settings['layout']['horizontal_gap']

    def trigger_layout(self, canvas, node_id: Optional[str]) -> Optional[str]:
        """Relayout around ``node_id`` at the granularity configured for the file.

        Returns:
            The scheduler outcome, or None when layout is disabled
        """
        granularity = layout_granularity_for(self.settings, canvas.file_name)
        if granularity == 'none':
            return None
        session = self.sessions.get(canvas.canvas_id)
        return self.scheduler.submit(
            session, lambda: self.layout_engine.relayout(canvas, node_id, granularity)
        )

    def _finish_creation(self, canvas) -> None:
        canvas.request_frame()
        canvas.request_save()

    def _select_and_edit(self, canvas, node_id: str) -> None:
        if canvas.get_node(node_id) is None:
            return
        canvas.start_editing(node_id)
        canvas.zoom_to_selection()

    def create_root(self, canvas) -> Optional[str]:
        """Create an unconnected node below and aligned with the existing content.

        Returns:
            The new node id, or None if the command did not apply
        """
        if canvas is None or not is_feature_active(canvas, self.settings):
            return None

        nodes = canvas.get_data()['nodes']
        if nodes:
            x = min(n['x'] for n in nodes)
            y = max(n['y'] + n['height'] for n in nodes) + self.vertical_gap
        else:
            x, y = 0.0, 0.0

        node_id = canvas.create_text_node(x, y, self.node_width, self.node_height)
        self._finish_creation(canvas)
        logger.info(f"Created root node {node_id} at ({x}, {y})")

        self.trigger_layout(canvas, node_id)
        self._select_and_edit(canvas, node_id)
        return node_id

    def create_child(self, canvas) -> Optional[str]:
        """Create a child of the selected node.

        Without auto layout the child is centred on its parent; otherwise it
        is appended below the parent's existing children.
        """
        if canvas is None or not is_feature_active(canvas, self.settings):
            return None
        parent_id = focused_node_id(canvas)
        if parent_id is None:
            logger.debug("Create child skipped: need exactly one selected node that is not being edited")
            return None

        graph = GraphModel.from_canvas(canvas)
        parent = graph.get(parent_id)
        x = parent['x'] + parent['width'] + self.horizontal_gap
        centred_y = parent['y'] + (parent['height'] - self.node_height) / 2

        children = [graph.get(c) for c in graph.children_unsorted(parent_id)]
        if layout_granularity_for(self.settings, canvas.file_name) == 'none' or not children:
            y = centred_y
        else:
            y = max(c['y'] + c['height'] for c in children) + self.vertical_gap

        child_id = canvas.create_text_node(x, y, self.node_width, self.node_height)
        canvas.add_edge(parent_id, child_id, 'right', 'left')
        self._finish_creation(canvas)
        logger.info(f"Created child node {child_id} under {parent_id}")

        self.trigger_layout(canvas, parent_id)
        self._select_and_edit(canvas, child_id)
        return child_id

    def create_sibling(self, canvas) -> Optional[str]:
        """Create a node below the selected one, sharing its parent.

        With nothing selected this creates a root node instead. A selected
        root gets an unconnected root as its sibling.
        """
        if canvas is None or not is_feature_active(canvas, self.settings):
            return None
        if not canvas.selection:
            return self.create_root(canvas)

        current_id = focused_node_id(canvas)
        if current_id is None:
            logger.debug("Create sibling skipped: need exactly one selected node that is not being edited")
            return None

        graph = GraphModel.from_canvas(canvas)
        current = graph.get(current_id)
        parent_id = graph.parent(current_id)

        x = current['x']
        y = current['y'] + current['height'] + self.vertical_gap
        sibling_id = canvas.create_text_node(x, y, self.node_width, self.node_height)
        if parent_id is not None:
            canvas.add_edge(parent_id, sibling_id, 'right', 'left')
        self._finish_creation(canvas)
        logger.info(f"Created sibling node {sibling_id} of {current_id}")

        self.trigger_layout(canvas, parent_id if parent_id is not None else sibling_id)
        self._select_and_edit(canvas, sibling_id)
        return sibling_id

    def delete_subtree(self, canvas) -> List[str]:
        """Delete the selected node and everything reachable below it.

        The former parent is laid out again and selected.

        Returns:
            Ids of the removed nodes (empty if the command did not apply)
        """
        if canvas is None or not is_feature_active(canvas, self.settings):
            return []
        focused_id = focused_node_id(canvas)
        if focused_id is None:
            logger.debug("Delete skipped: need exactly one selected node that is not being edited")
            return []

        graph = GraphModel.from_canvas(canvas)
        parent_id = graph.parent(focused_id)
        to_remove = graph.descendants(focused_id)

        removed = [node_id for node_id in to_remove if canvas.remove_node(node_id)]
        canvas.request_frame()
        canvas.request_save()
        logger.info(f"Deleted node {focused_id} and {len(removed) - 1} descendant(s)")

        if parent_id is not None and canvas.get_node(parent_id) is not None:
            self.trigger_layout(canvas, parent_id)
            canvas.select_only(parent_id)
            canvas.zoom_to_selection()
        return removed

    def start_editing_node(self, canvas) -> Optional[str]:
        """Edit the selected node, or select the node nearest the viewport centre.

        Returns:
            The node that was selected or put into edit mode
        """
        if canvas is None or not is_feature_active(canvas, self.settings):
            return None

        selection = canvas.selection
        if not selection:
            nodes = canvas.viewport_nodes() or canvas.get_data()['nodes']
            if not nodes:
                return None
            bbox = canvas.viewport_bbox()
            center_x = (bbox['minX'] + bbox['maxX']) / 2
            center_y = (bbox['minY'] + bbox['maxY']) / 2
            closest, _ = find_closest_node(nodes, center_x, center_y)
            canvas.select_only(closest['id'])
            canvas.zoom_to_selection()
            return closest['id']

        if len(selection) != 1:
            return None
        node = canvas.get_node(selection[0])
        # Only plain text nodes can be edited in place
        if node is None or node.get('type', 'text') != 'text':
            return None
        if canvas.is_editing(node['id']):
            return None
        canvas.start_editing(node['id'])
        canvas.zoom_to_selection()
        return node['id']

    def handle_edit_finished(self, canvas, node_id: str) -> bool:
        """Resize a node to its new text and relayout its tree.

        Returns:
            True if anything was done
        """
        if canvas is None or not is_feature_active(canvas, self.settings):
            return False
        node = canvas.get_node(node_id)
        if node is None or not node.get('text', '').strip():
            return False

        if self.settings['node_auto_resize'].get('enabled', True):
            fit_node_to_text(canvas, node_id, self.measurer, self.settings)
        self.trigger_layout(canvas, node_id)
        return True
