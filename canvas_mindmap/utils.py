# Utility functions for the canvas mind map
import logging
import traceback
from typing import List, Dict, Any, Optional, Tuple

from canvas_mindmap.settings import is_mindmap_file


def handle_error(e: Exception, logger: Optional[logging.Logger] = None,
                 message: Optional[str] = None, log_traceback: bool = True) -> str:
    """Standardized error handling utility.

    Args:
        e: The exception to handle
        logger: Optional logger instance. If not provided, uses this module's logger.
        message: Optional custom message prefix. If not provided, uses a default.
        log_traceback: Whether to log the full traceback. Default is True.

    Returns:
        Error message string suitable for user-facing error messages.
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if message:
        error_msg = f"{message}: {str(e)}"
    else:
        error_msg = f"An error occurred: {str(e)}"

    logger.error(error_msg)
    logger.error(f"Error type: {type(e).__name__}")
    if log_traceback:
        logger.error(f"Traceback: {traceback.format_exc()}")

    return error_msg


def is_feature_active(canvas, settings: Dict[str, Any]) -> bool:
    """Check the file-name gate for the canvas being edited."""
    active = is_mindmap_file(settings, getattr(canvas, 'file_name', None))
    if not active:
        logging.getLogger(__name__).debug(f"Mind map disabled for file {getattr(canvas, 'file_name', None)!r}")
    return active


def focused_node_id(canvas) -> Optional[str]:
    """Return the single selected node id, if it exists and is not being edited."""
    selection = canvas.selection
    if len(selection) != 1:
        return None
    node_id = selection[0]
    if canvas.get_node(node_id) is None or canvas.is_editing(node_id):
        return None
    return node_id


def node_center(node: Dict[str, Any]) -> Tuple[float, float]:
    return node['x'] + node['width'] / 2, node['y'] + node['height'] / 2


def find_closest_node(nodes: List[Dict[str, Any]], point_x: float, point_y: float
                      ) -> Tuple[Optional[Dict[str, Any]], float]:
    """Find the node whose centre is closest to the given point.

    Args:
        nodes: Candidate nodes
        point_x: X coordinate in canvas space
        point_y: Y coordinate in canvas space

    Returns:
        Tuple of (closest_node, squared_distance); closest_node is None if
        ``nodes`` is empty
    """
    closest_node = None
    min_distance = float('inf')
    for node in nodes:
        center_x, center_y = node_center(node)
        distance = (center_x - point_x) ** 2 + (center_y - point_y) ** 2
        if distance < min_distance:
            min_distance = distance
            closest_node = node
    return closest_node, min_distance
