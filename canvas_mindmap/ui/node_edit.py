"""Text editor for the node being edited."""

import streamlit as st

from canvas_mindmap.canvas import Canvas
from canvas_mindmap.state import get_controller


def render_node_editor(canvas: Canvas) -> None:
    """Show a text box for the node in edit mode, or a node picker otherwise."""
    controller = get_controller()
    editing = [node_id for node_id in canvas.selection if canvas.is_editing(node_id)]

    if editing:
        node = canvas.get_node(editing[0])
        text = st.text_area("Node text", value=node.get('text', ''), key=f"text_{node['id']}")
        if st.button("Done editing", key="finish_editing"):
            controller.dispatch('set_text', canvas.canvas_id, id=node['id'], text=text)
            controller.dispatch('finish_editing', canvas.canvas_id, id=node['id'])
            st.rerun()
        return

    nodes = sorted(canvas.nodes.values(), key=lambda n: (n['y'], n['x']))
    if not nodes:
        st.info("Empty canvas: use “Sibling / root” to create the first node.")
        return
    options = [None] + [n['id'] for n in nodes]
    labels = {n['id']: (n.get('text') or '(empty)')[:40] for n in nodes}
    current = canvas.selection[0] if canvas.selection else None
    picked = st.selectbox("Selected node", options=options,
                          index=options.index(current) if current in options else 0,
                          format_func=lambda i: "(none)" if i is None else labels[i])
    if picked != current:
        controller.dispatch('select_node', canvas.canvas_id, id=picked)
        st.rerun()
