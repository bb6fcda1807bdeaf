"""Mind map editing on top of a freeform node/edge canvas."""

from canvas_mindmap.canvas import Canvas
from canvas_mindmap.controller import MindMapController, register_commands
from canvas_mindmap.graph import GraphModel
from canvas_mindmap.layout import TreeLayoutEngine
from canvas_mindmap.sizing import subtree_heights, heights_of

__version__ = "0.1.0"
