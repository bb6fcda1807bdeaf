"""
Network visualization for the canvas mind map demo.

Renders the canvas with PyVis: physics is disabled and every node is pinned
at its layout coordinates, so what is shown is exactly what the tree layout
produced.
"""

import logging
from typing import Dict, Any

import streamlit.components.v1 as components
from pyvis.network import Network

from canvas_mindmap.canvas import Canvas
from canvas_mindmap.graph import GraphModel

logger = logging.getLogger(__name__)

SELECTED_COLOR = {'background': '#FFE0B2', 'border': '#FF5722'}
EDITING_COLOR = {'background': '#C8E6C9', 'border': '#2E7D32'}
DEFAULT_COLOR = {'background': '#E3F2FD', 'border': '#1976D2'}


def node_style(canvas: Canvas, node: Dict[str, Any]) -> Dict[str, Any]:
    """PyVis keyword arguments for one canvas node."""
    if canvas.is_editing(node['id']):
        color = EDITING_COLOR
    elif node['id'] in canvas.selection:
        color = SELECTED_COLOR
    else:
        color = DEFAULT_COLOR

    label = node.get('text') or ' '
    return {
        'label': label,
        'title': f"{node['id']} ({node['x']:.0f}, {node['y']:.0f})",
        'shape': 'box',
        'color': color,
        'borderWidth': 3 if node['id'] in canvas.selection else 1,
        'widthConstraint': {'minimum': node['width'], 'maximum': node['width']},
        'heightConstraint': {'minimum': node['height']},
        # vis.js positions nodes by their centre
        'x': node['x'] + node['width'] / 2,
        'y': node['y'] + node['height'] / 2,
        'physics': False,
    }


def build_network(canvas: Canvas, canvas_height: str) -> Network:
    net = Network(height=canvas_height, width="100%", directed=True, cdn_resources='remote')
    net.toggle_physics(False)

    graph = GraphModel.from_canvas(canvas)
    for node in graph.nodes:
        net.add_node(node['id'], **node_style(canvas, node))
    for parent_id, child_ids in graph.children_map().items():
        for child_id in child_ids:
            net.add_edge(parent_id, child_id)
    return net


def render_network_visualization(canvas: Canvas, canvas_height: str) -> None:
    """Render the canvas as a pinned PyVis network."""
    net = build_network(canvas, canvas_height)
    logger.debug(f"Rendering canvas {canvas.canvas_id} with {len(canvas.nodes)} node(s)")
    components.html(net.generate_html(), height=int(canvas_height.replace("px", "")), scrolling=False)
