"""Command toolbar for the canvas mind map demo.

Buttons stand in for the hotkeys: each one dispatches the same command
message a key press would.
"""

import logging
import streamlit as st

from canvas_mindmap.canvas import Canvas
from canvas_mindmap.state import get_controller

logger = logging.getLogger(__name__)

EDIT_COMMANDS = [
    ("➕ Sibling / root", 'create_sibling_or_root'),
    ("↳ Child", 'create_child'),
    ("✏️ Edit / select", 'edit_or_select'),
    ("🗑️ Delete subtree", 'delete_node'),
    ("🌳 Relayout canvas", 'relayout'),
]

ARROWS = {'up': "⬆️", 'down': "⬇️", 'left': "⬅️", 'right': "➡️"}


def _run(canvas: Canvas, action: str) -> None:
    response = get_controller().dispatch(action, canvas.canvas_id)
    if response.status == 'failed':
        st.error(response.error)
    elif response.payload.get('changed'):
        st.rerun()
    else:
        logger.debug(f"{action} did not change the canvas")


def render_toolbar(canvas: Canvas) -> None:
    """Render the edit and navigation buttons."""
    columns = st.columns(len(EDIT_COMMANDS))
    for column, (label, action) in zip(columns, EDIT_COMMANDS):
        if column.button(label, key=f"cmd_{action}"):
            _run(canvas, action)

    moves = get_controller().navigation.available_moves(canvas)
    for prefix, title in (('', "Tree"), ('free_', "Free")):
        st.caption(f"{title} navigation")
        columns = st.columns(8)
        index = 0
        for direction, arrow in ARROWS.items():
            for suffix, extra in (('', ''), ('_until_end', '⏭')):
                action = f"{prefix}navigate_{direction}{suffix}"
                disabled = prefix == '' and suffix == '' and moves.get(direction) is None
                if columns[index].button(f"{arrow}{extra}", key=f"cmd_{action}", disabled=disabled):
                    _run(canvas, action)
                index += 1
