"""
Message handlers for the canvas mind map.

This module maps every command action to a handler:
- Node creation and deletion
- Edit mode and text changes
- Strict and free navigation
- Manual relayout

Handlers never raise. A command whose guards fail completes with
``changed: False``; an unexpected exception is logged and turned into a
failed response.
"""

import logging
from functools import partial
from typing import Dict, Any, Callable, Optional

from canvas_mindmap.message_format import Message, create_response_message
from canvas_mindmap.config import LAYOUT_GRANULARITIES
from canvas_mindmap.utils import handle_error

logger = logging.getLogger(__name__)

# Handler registry
_handlers: Dict[str, Callable] = {}


def register_handler(action: str, handler_func: Callable) -> None:
    """Register a handler function for a specific action."""
    _handlers[action] = handler_func


def get_handler(action: str) -> Optional[Callable]:
    """Get the registered handler for an action."""
    return _handlers.get(action)


def is_registered_action(action: str) -> bool:
    """Check if an action has a registered handler."""
    return action in _handlers


def standard_response(message: Message, success: bool, error_message: Optional[str] = None,
                      data: Optional[Dict[str, Any]] = None) -> Message:
    """Create a standardized response message."""
    status = 'completed' if success else 'failed'
    if not success:
        return create_response_message(message, status, error_message, data)
    return create_response_message(message, status, None, data or {})


def _changed(message: Message, changed: bool, **data) -> Message:
    return standard_response(message, True, data={'changed': changed, **data})


# Node handlers

def handle_create_root(message: Message, controller, canvas) -> Message:
    node_id = controller.mutations.create_root(canvas)
    return _changed(message, node_id is not None, node_id=node_id)


def handle_create_sibling(message: Message, controller, canvas) -> Message:
    node_id = controller.mutations.create_sibling(canvas)
    return _changed(message, node_id is not None, node_id=node_id)


def handle_create_child(message: Message, controller, canvas) -> Message:
    node_id = controller.mutations.create_child(canvas)
    return _changed(message, node_id is not None, node_id=node_id)


def handle_delete_node(message: Message, controller, canvas) -> Message:
    removed = controller.mutations.delete_subtree(canvas)
    return _changed(message, bool(removed), removed=removed)


def handle_edit_or_select(message: Message, controller, canvas) -> Message:
    node_id = controller.mutations.start_editing_node(canvas)
    return _changed(message, node_id is not None, node_id=node_id)


def handle_set_text(message: Message, controller, canvas) -> Message:
    node_id = message.payload.get('id')
    text = message.payload.get('text')
    if canvas.get_node(node_id) is None or not isinstance(text, str):
        return _changed(message, False)
    canvas.set_text(node_id, text)
    canvas.request_save()
    return _changed(message, True, node_id=node_id)


def handle_finish_editing(message: Message, controller, canvas) -> Message:
    node_id = message.payload.get('id')
    if node_id is None:
        editing = [i for i in canvas.selection if canvas.is_editing(i)]
        node_id = editing[0] if editing else None
    if node_id is None or not canvas.is_editing(node_id):
        return _changed(message, False)
    # Leaving edit mode notifies the edit-finished subscribers (resize + relayout)
    canvas.stop_editing(node_id)
    return _changed(message, True, node_id=node_id)


def handle_select_node(message: Message, controller, canvas) -> Message:
    node_id = message.payload.get('id')
    if node_id is None:
        canvas.deselect_all()
        return _changed(message, True, node_id=None)
    if canvas.get_node(node_id) is None:
        logger.warning(f"Select request for nonexistent node: {node_id}")
        return _changed(message, False)
    canvas.select_only(node_id)
    return _changed(message, True, node_id=node_id)


def handle_relayout(message: Message, controller, canvas) -> Message:
    granularity = message.payload.get('granularity', 'canvas')
    if granularity not in LAYOUT_GRANULARITIES:
        return standard_response(message, False, f"Unknown layout granularity: {granularity}")
    node_id = message.payload.get('id')
    if node_id is None and canvas.selection:
        node_id = canvas.selection[0]
    outcome = controller.relayout(canvas, node_id, granularity)
    return _changed(message, outcome == 'executed', outcome=outcome)


def handle_navigate(message: Message, controller, canvas, direction: str, free: bool, to_end: bool) -> Message:
    target = controller.navigation.navigate(canvas, direction, free=free, to_end=to_end)
    return _changed(message, target is not None, node_id=target)


register_handler('create_root', handle_create_root)
register_handler('create_sibling_or_root', handle_create_sibling)
register_handler('create_child', handle_create_child)
register_handler('delete_node', handle_delete_node)
register_handler('edit_or_select', handle_edit_or_select)
register_handler('set_text', handle_set_text)
register_handler('finish_editing', handle_finish_editing)
register_handler('select_node', handle_select_node)
register_handler('relayout', handle_relayout)

for _prefix, _free in (('', False), ('free_', True)):
    for _direction in ('up', 'down', 'left', 'right'):
        for _suffix, _to_end in (('', False), ('_until_end', True)):
            register_handler(
                f"{_prefix}navigate_{_direction}{_suffix}",
                partial(handle_navigate, direction=_direction, free=_free, to_end=_to_end)
            )


def handle_message(message: Message, controller) -> Message:
    """Dispatch a command message to its handler.

    Args:
        message: Incoming command; payload carries 'canvas_id'
        controller: MindMapController that owns the open canvases

    Returns:
        Response message
    """
    handler = get_handler(message.action)
    if handler is None:
        logger.warning(f"No handler registered for action: {message.action}")
        return standard_response(message, False, f"Unknown action: {message.action}")

    canvas = controller.canvases.get(message.canvas_id)
    if canvas is None:
        # The view was closed before the command arrived
        logger.debug(f"Canvas {message.canvas_id} is not open, ignoring {message.action}")
        return _changed(message, False)

    try:
        logger.debug(f"Handling {message.action} from {message.source} on canvas {canvas.canvas_id}")
        return handler(message, controller, canvas)
    except Exception as e:
        error_msg = handle_error(e, logger, f"Error processing {message.action}")
        return standard_response(message, False, error_msg)
