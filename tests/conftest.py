"""Shared fixtures for the canvas mind map tests."""

import pytest

from canvas_mindmap.canvas import Canvas
from canvas_mindmap.controller import MindMapController
from canvas_mindmap.scheduler import LayoutScheduler
from canvas_mindmap.settings import default_settings


def make_node(node_id, x=0.0, y=0.0, width=100.0, height=50.0, text=''):
    return {'id': node_id, 'type': 'text', 'text': text,
            'x': float(x), 'y': float(y), 'width': float(width), 'height': float(height)}


def make_edge(edge_id, from_node, to_node):
    return {'id': edge_id, 'fromNode': from_node, 'toNode': to_node, 'fromSide': 'right', 'toSide': 'left'}


@pytest.fixture
def node():
    """Factory for node dicts."""
    return make_node


@pytest.fixture
def edge():
    """Factory for edge dicts."""
    return make_edge


@pytest.fixture
def settings():
    """Default settings with small, easy to follow gaps."""
    values = default_settings()
    values['layout']['horizontal_gap'] = 50
    values['layout']['vertical_gap'] = 10
    values['create_node']['width'] = 100
    values['create_node']['height'] = 50
    return values


@pytest.fixture
def make_canvas():
    """Factory building a gated-in canvas from node and edge dicts."""
    def _make(nodes=(), edges=(), file_name='test mindmap.canvas'):
        canvas = Canvas(file_name=file_name, canvas_id='canvas-1')
        canvas.import_data(list(nodes), list(edges))
        return canvas
    return _make


@pytest.fixture
def controller(settings):
    """Controller whose layout scheduler never throttles."""
    return MindMapController(settings, scheduler=LayoutScheduler(interval_ms=0))
