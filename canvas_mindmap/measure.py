"""Text measurement and auto-resize of canvas nodes."""

import math
import logging
from typing import Dict, Any, Optional, Tuple

from canvas_mindmap.config import MAX_FRAME_WAITS

logger = logging.getLogger(__name__)

# Horizontal plus vertical padding inside a text node, in pixels
NODE_PADDING = 24


class TextMeasurer:
    """Measures the pixel size rendered text needs.

    Subclasses return ``(width, height)`` or None when the text cannot be
    measured yet.
    """

    def measure(self, text: str, font: Dict[str, Any], max_width: Optional[float] = None
                ) -> Optional[Tuple[float, float]]:
        raise NotImplementedError


class EstimatingMeasurer(TextMeasurer):
    """Approximates text size from character counts and the font size."""

    def __init__(self, char_width_ratio: float = 0.6):
        self.char_width_ratio = char_width_ratio

    def measure(self, text, font, max_width=None):
        font_size = font.get('font_size', 16)
        line_height = font.get('line_height', font_size * 1.5)
        char_width = font_size * self.char_width_ratio

        lines = text.split('\n') if text else ['']
        natural_width = max(len(line) for line in lines) * char_width + NODE_PADDING
        if max_width is None:
            return natural_width, len(lines) * line_height + NODE_PADDING

        chars_per_line = max(1, int((max_width - NODE_PADDING) // char_width))
        wrapped = sum(max(1, math.ceil(len(line) / chars_per_line)) for line in lines)
        return min(natural_width, max_width), wrapped * line_height + NODE_PADDING


def font_for(settings: Dict[str, Any]) -> Dict[str, Any]:
    resize = settings['node_auto_resize']
    return {
        'font_family': resize['font_family'],
        'font_size': resize['font_size'],
        'line_height': resize['line_height'],
    }


def fit_node_to_text(canvas, node_id: str, measurer: TextMeasurer, settings: Dict[str, Any],
                     max_frame_waits: int = MAX_FRAME_WAITS) -> bool:
    """Resize a node's height to fit its text.

    The text can only be measured once the host has rendered it, so this
    waits for up to ``max_frame_waits`` frames. If the text is still not
    measurable the node keeps its current size.

    Args:
        canvas: Host canvas
        node_id: Node to resize
        measurer: Measurement implementation
        settings: Settings dictionary (reads 'node_auto_resize')
        max_frame_waits: Frames to wait before giving up

    Returns:
        True if the node was resized
    """
    font = font_for(settings)
    size = None
    for attempt in range(max_frame_waits + 1):
        node = canvas.get_node(node_id)
        if node is None:
            logger.debug(f"Node {node_id} disappeared before it could be measured")
            return False
        text = canvas.rendered_text(node_id)
        if text is not None:
            size = measurer.measure(text, font, max_width=node['width'])
            if size is not None:
                break
        if attempt == max_frame_waits:
            logger.debug(f"Gave up measuring node {node_id} after {max_frame_waits} frame(s)")
            return False
        canvas.wait_for_frame()

    height = size[1]
    max_line = settings['node_auto_resize'].get('max_line', -1)
    if max_line is not None and max_line >= 0:
        height = min(height, font['line_height'] * max_line)
    height = max(height, font['line_height'])

    if height == node['height']:
        return False
    canvas.resize_node(node_id, node['width'], height)
    canvas.request_frame()
    canvas.request_save()
    logger.debug(f"Resized node {node_id} height {node['height']} -> {height}")
    return True
