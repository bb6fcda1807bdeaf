"""
In-memory canvas host for the mind map commands.

This module provides the node/edge surface the mind map operates on:
- Node and edge storage with host-assigned identifiers
- Snapshot reads and atomic bulk replacement
- Selection, editing state and viewport
- Render/save signals and cooperative frame waits
- Hotkey registration and edit-finished notifications

Nodes and edges use the JSON canvas shape so that documents can be saved
and loaded without conversion.
"""

import logging
import uuid
from copy import deepcopy
from typing import Dict, Any, List, Optional, Callable, Tuple

logger = logging.getLogger(__name__)


def generate_id() -> str:
    """Generate a short random identifier for a node or edge."""
    return uuid.uuid4().hex[:16]


class Canvas:
    """A single open canvas document."""

    def __init__(self, file_name: str = "Untitled mindmap.canvas", canvas_id: Optional[str] = None,
                 on_save: Optional[Callable[['Canvas'], None]] = None,
                 viewport: Tuple[float, float, float, float] = (0.0, 0.0, 1600.0, 900.0)):
        self.canvas_id = canvas_id or generate_id()
        self.file_name = file_name
        self.nodes: Dict[str, Dict[str, Any]] = {}
        self.edges: Dict[str, Dict[str, Any]] = {}
        self._selection: List[str] = []
        self._editing = set()
        # Nodes whose text changed since the last rendered frame
        self._unrendered = set()
        self._viewport = list(viewport)
        self._on_save = on_save
        self._hotkeys: Dict[Tuple[Tuple[str, ...], str], Callable[[], Any]] = {}
        self._edit_finished_callbacks: List[Callable[['Canvas', str], Any]] = []
        self.frames_requested = 0
        self.frames_rendered = 0
        self.save_count = 0

    # Node store

    def get_node(self, node_id: str) -> Optional[Dict[str, Any]]:
        """Return a copy of the node with ``node_id``, or None."""
        node = self.nodes.get(node_id)
        return deepcopy(node) if node is not None else None

    def create_text_node(self, x: float, y: float, width: float, height: float, text: str = '') -> str:
        """Create a text node and return its host-assigned id."""
        node_id = generate_id()
        while node_id in self.nodes:
            node_id = generate_id()
        self.nodes[node_id] = {
            'id': node_id,
            'type': 'text',
            'text': text,
            'x': float(x),
            'y': float(y),
            'width': float(width),
            'height': float(height),
        }
        self._unrendered.add(node_id)
        logger.debug(f"Created node {node_id} at ({x}, {y})")
        return node_id

    def remove_node(self, node_id: str) -> bool:
        """Remove a node together with every edge attached to it."""
        if node_id not in self.nodes:
            return False
        del self.nodes[node_id]
        for edge in self.edges_for_node(node_id):
            del self.edges[edge['id']]
        if node_id in self._selection:
            self._selection.remove(node_id)
        self._editing.discard(node_id)
        self._unrendered.discard(node_id)
        logger.debug(f"Removed node {node_id}")
        return True

    def set_position(self, node_id: str, x: float, y: float) -> None:
        node = self.nodes.get(node_id)
        if node is not None:
            node['x'] = float(x)
            node['y'] = float(y)

    def resize_node(self, node_id: str, width: float, height: float) -> None:
        node = self.nodes.get(node_id)
        if node is not None:
            node['width'] = float(width)
            node['height'] = float(height)

    def set_text(self, node_id: str, text: str) -> None:
        node = self.nodes.get(node_id)
        if node is not None and node.get('text') != text:
            node['text'] = text
            self._unrendered.add(node_id)

    # Edge store

    def add_edge(self, from_node: str, to_node: str, from_side: str = 'right', to_side: str = 'left') -> str:
        """Connect ``from_node`` to ``to_node`` and return the new edge id."""
        edge_id = generate_id()
        while edge_id in self.edges:
            edge_id = generate_id()
        self.edges[edge_id] = {
            'id': edge_id,
            'fromNode': from_node,
            'toNode': to_node,
            'fromSide': from_side,
            'toSide': to_side,
        }
        return edge_id

    def edges_for_node(self, node_id: str) -> List[Dict[str, Any]]:
        return [e for e in self.edges.values() if node_id in (e.get('fromNode'), e.get('toNode'))]

    # Snapshots

    def get_data(self) -> Dict[str, List[Dict[str, Any]]]:
        """Return a snapshot of all nodes and edges."""
        return {
            'nodes': [deepcopy(n) for n in self.nodes.values()],
            'edges': [deepcopy(e) for e in self.edges.values()],
        }

    def import_data(self, nodes: List[Dict[str, Any]], edges: List[Dict[str, Any]]) -> None:
        """Replace every node and edge in one step.

        Selection and editing state survive for ids that are still present.
        """
        new_nodes = {}
        for node in nodes:
            copied = deepcopy(node)
            old = self.nodes.get(copied['id'])
            if old is None or old.get('text') != copied.get('text'):
                self._unrendered.add(copied['id'])
            new_nodes[copied['id']] = copied
        self.nodes = new_nodes
        self.edges = {e['id']: deepcopy(e) for e in edges}
        self._selection = [i for i in self._selection if i in self.nodes]
        self._editing = {i for i in self._editing if i in self.nodes}
        self._unrendered = {i for i in self._unrendered if i in self.nodes}

    # Selection and editing

    @property
    def selection(self) -> List[str]:
        return list(self._selection)

    def select_only(self, node_id: str) -> None:
        if node_id in self.nodes:
            self._selection = [node_id]

    def deselect_all(self) -> None:
        self._selection = []

    def is_editing(self, node_id: str) -> bool:
        return node_id in self._editing

    def start_editing(self, node_id: str) -> None:
        if node_id not in self.nodes:
            return
        self.select_only(node_id)
        self._editing.add(node_id)

    def stop_editing(self, node_id: str) -> None:
        """Leave edit mode and notify edit-finished subscribers."""
        if node_id not in self._editing:
            return
        self._editing.discard(node_id)
        for callback in list(self._edit_finished_callbacks):
            callback(self, node_id)

    def on_edit_finished(self, callback: Callable[['Canvas', str], Any]) -> None:
        self._edit_finished_callbacks.append(callback)

    def remove_edit_finished(self, callback: Callable[['Canvas', str], Any]) -> None:
        if callback in self._edit_finished_callbacks:
            self._edit_finished_callbacks.remove(callback)

    # Viewport

    def viewport_bbox(self) -> Dict[str, float]:
        x, y, width, height = self._viewport
        return {'minX': x, 'minY': y, 'maxX': x + width, 'maxY': y + height}

    def viewport_nodes(self) -> List[Dict[str, Any]]:
        """Return copies of the nodes that intersect the viewport."""
        bbox = self.viewport_bbox()
        return [
            deepcopy(n) for n in self.nodes.values()
            if n['x'] <= bbox['maxX'] and n['x'] + n['width'] >= bbox['minX']
            and n['y'] <= bbox['maxY'] and n['y'] + n['height'] >= bbox['minY']
        ]

    def zoom_to_selection(self) -> None:
        """Centre the viewport on the selected node."""
        if not self._selection:
            return
        node = self.nodes[self._selection[0]]
        width, height = self._viewport[2], self._viewport[3]
        self._viewport[0] = node['x'] + node['width'] / 2 - width / 2
        self._viewport[1] = node['y'] + node['height'] / 2 - height / 2

    # Rendering and persistence signals

    def request_frame(self) -> None:
        self.frames_requested += 1

    def wait_for_frame(self) -> None:
        """Yield until the next frame has been rendered."""
        self.frames_rendered += 1
        self._unrendered.clear()

    def rendered_text(self, node_id: str) -> Optional[str]:
        """Return the node's text as rendered, or None if it is not rendered yet."""
        if node_id not in self.nodes or node_id in self._unrendered:
            return None
        return self.nodes[node_id].get('text', '')

    def request_save(self) -> None:
        self.save_count += 1
        if self._on_save is not None:
            self._on_save(self)

    # Command registration

    def register_hotkey(self, modifiers: List[str], key: str, callback: Callable[[], Any]) -> None:
        combo = (tuple(sorted(m for m in modifiers if m)), key)
        self._hotkeys[combo] = callback
        logger.debug(f"Registered hotkey {'+'.join(combo[0] + (key,))}")

    def trigger_hotkey(self, modifiers: List[str], key: str) -> bool:
        """Invoke the callback bound to a key combination, if any."""
        callback = self._hotkeys.get((tuple(sorted(m for m in modifiers if m)), key))
        if callback is None:
            return False
        callback()
        return True

    # Serialization

    def to_dict(self) -> Dict[str, Any]:
        data = self.get_data()
        return {'nodes': data['nodes'], 'edges': data['edges']}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], file_name: str = "Untitled mindmap.canvas", **kwargs) -> 'Canvas':
        canvas = cls(file_name=file_name, **kwargs)
        nodes = [n for n in data.get('nodes', []) if isinstance(n, dict) and 'id' in n]
        for node in nodes:
            node.setdefault('type', 'text')
            node.setdefault('text', '')
            for field in ('x', 'y', 'width', 'height'):
                node[field] = float(node.get(field, 0) or 0)
        edges = [e for e in data.get('edges', []) if isinstance(e, dict) and 'id' in e]
        canvas.import_data(nodes, edges)
        return canvas
