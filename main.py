"""main.py – Canvas Mind Map demo

Keyboard-style mind map editing on top of a JSON canvas document:
- Create root, sibling and child nodes
- Delete whole subtrees
- Automatic left-to-right tree layout
- Strict (edge based) and free (geometric) navigation

Run with ``streamlit run main.py``.
"""

import logging

import streamlit as st

from canvas_mindmap.config import CANVAS_DIMENSIONS, DATA_FILE
from canvas_mindmap.logging_setup import get_logger, rotate_logs
from canvas_mindmap.state import get_active_canvas, open_canvas, get_settings
from canvas_mindmap.settings import is_mindmap_file
from canvas_mindmap.ui.network_visualization import render_network_visualization
from canvas_mindmap.ui.node_edit import render_node_editor
from canvas_mindmap.ui.sidebar import render_sidebar
from canvas_mindmap.ui.toolbar import render_toolbar
from canvas_mindmap.utils import handle_error

rotate_logs()
logger = get_logger()

# ---------------- Main App ----------------
try:
    st.set_page_config(page_title="Canvas Mind Map", layout="wide")
    st.title("Canvas Mind Map")

    render_sidebar()

    canvas_file = st.sidebar.text_input("Canvas file", value=DATA_FILE)
    canvas = get_active_canvas()
    if canvas is None or canvas.file_name != canvas_file.split('/')[-1]:
        canvas = open_canvas(canvas_file)

    if not is_mindmap_file(get_settings(), canvas.file_name):
        st.warning(f"Mind map commands are disabled for “{canvas.file_name}”: "
                   f"the file name must contain “{get_settings()['condition']['file_name_include']}”.")

    render_toolbar(canvas)
    render_node_editor(canvas)

    expanded = st.sidebar.checkbox("Expand canvas", value=False)
    render_network_visualization(canvas, CANVAS_DIMENSIONS['expanded' if expanded else 'normal'])
except Exception as e:
    error_msg = handle_error(e, logging.getLogger(__name__), "Error rendering the mind map")
    st.error(error_msg)
