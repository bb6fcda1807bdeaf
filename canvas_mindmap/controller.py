"""Wires the mind map commands to open canvases."""

import logging
from typing import Dict, Any, Optional

from canvas_mindmap.handlers import handle_message, is_registered_action
from canvas_mindmap.layout import TreeLayoutEngine
from canvas_mindmap.measure import TextMeasurer
from canvas_mindmap.message_format import Message
from canvas_mindmap.mutations import MutationOps
from canvas_mindmap.navigation import NavigationOps
from canvas_mindmap.scheduler import LayoutScheduler, SessionRegistry
from canvas_mindmap.settings import default_settings

logger = logging.getLogger(__name__)


class MindMapController:
    """Holds the settings, layout sessions and command objects for all open canvases."""

    def __init__(self, settings: Optional[Dict[str, Any]] = None, scheduler: Optional[LayoutScheduler] = None,
                 measurer: Optional[TextMeasurer] = None):
        self.settings = settings if settings is not None else default_settings()
        self.sessions = SessionRegistry()
        self.scheduler = scheduler if scheduler is not None else LayoutScheduler()
        self.layout_engine = TreeLayoutEngine(self.settings)
        self.mutations = MutationOps(self.settings, self.layout_engine, self.scheduler, self.sessions, measurer)
        self.navigation = NavigationOps(self.settings)
        self.canvases = {}

    def attach(self, canvas) -> None:
        """Start serving commands for ``canvas``. Attaching it again is a no-op."""
        if self.canvases.get(canvas.canvas_id) is canvas:
            logger.debug(f"Canvas {canvas.canvas_id} is already attached")
            return
        self.canvases[canvas.canvas_id] = canvas
        self.sessions.get(canvas.canvas_id)
        register_commands(canvas, self)
        canvas.on_edit_finished(self.handle_edit_finished)
        logger.info(f"Attached canvas {canvas.canvas_id} ({canvas.file_name})")

    def detach(self, canvas_id: str) -> None:
        canvas = self.canvases.pop(canvas_id, None)
        if canvas is not None:
            canvas.remove_edit_finished(self.handle_edit_finished)
        self.sessions.close(canvas_id)
        logger.info(f"Detached canvas {canvas_id}")

    def handle_edit_finished(self, canvas, node_id: str) -> bool:
        """Edit-finished subscriber; ignores canvases that are no longer attached."""
        if self.canvases.get(canvas.canvas_id) is not canvas:
            logger.debug(f"Edit finished on detached canvas {canvas.canvas_id}, ignoring node {node_id}")
            return False
        return self.mutations.handle_edit_finished(canvas, node_id)

    def dispatch(self, action: str, canvas_id: str, source: str = 'frontend', **payload) -> Message:
        """Build a command message and handle it."""
        message = Message.create(source, action, {'canvas_id': canvas_id, **payload})
        return handle_message(message, self)

    def relayout(self, canvas, node_id: Optional[str], granularity: str) -> Optional[str]:
        """Relayout through the canvas's scheduler at an explicit granularity."""
        session = self.sessions.get(canvas.canvas_id)
        return self.scheduler.submit(
            session, lambda: self.layout_engine.relayout(canvas, node_id, granularity)
        )


def register_commands(canvas, controller: MindMapController) -> int:
    """Bind every enabled hotkey to its command through the host.

    Returns:
        Number of hotkeys registered
    """
    count = 0
    for action, hotkey in controller.settings.get('hotkey', {}).items():
        if not hotkey.get('enabled') or not hotkey.get('key'):
            continue
        if not is_registered_action(action):
            logger.warning(f"Hotkey configured for unknown command: {action}")
            continue
        modifiers = [m for m in hotkey.get('modifiers', '').split('+') if m]
        canvas.register_hotkey(
            modifiers, hotkey['key'],
            lambda action=action: controller.dispatch(action, canvas.canvas_id, source='hotkey')
        )
        count += 1
    logger.debug(f"Registered {count} hotkey(s) for canvas {canvas.canvas_id}")
    return count
