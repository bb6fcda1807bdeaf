"""Settings sidebar for the canvas mind map demo."""

import streamlit as st

from canvas_mindmap.config import LAYOUT_GRANULARITIES, SETTINGS_FILE
from canvas_mindmap.settings import update_setting, save_settings
from canvas_mindmap.state import get_settings


def render_sidebar():
    """
    Render the sidebar with the layout, node and file gate settings.
    """
    settings = get_settings()
    changed = False

    with st.sidebar.expander("Settings", expanded=False):
        st.markdown("### Condition")
        include = st.text_input(
            "File name include",
            value=settings['condition']['file_name_include'],
            help="Only files with names containing this string have the mind map features enabled."
        )
        if include != settings['condition']['file_name_include']:
            changed |= update_setting(settings, 'condition', 'file_name_include', include)

        st.markdown("### Create node")
        for key in ('width', 'height'):
            value = st.text_input(key.capitalize(), value=str(settings['create_node'][key]))
            if value != str(settings['create_node'][key]):
                changed |= update_setting(settings, 'create_node', key, value)

        st.markdown("### Layout")
        for key, label in (('horizontal_gap', "Horizontal gap"), ('vertical_gap', "Vertical gap")):
            value = st.text_input(label, value=str(settings['layout'][key]))
            if value != str(settings['layout'][key]):
                changed |= update_setting(settings, 'layout', key, value)

        granularity = st.selectbox(
            "Auto layout",
            options=list(LAYOUT_GRANULARITIES),
            index=LAYOUT_GRANULARITIES.index(settings['layout']['granularity']),
            help="What to lay out again after a node is created, deleted or edited"
        )
        if granularity != settings['layout']['granularity']:
            changed |= update_setting(settings, 'layout', 'granularity', granularity)

        st.markdown("### Auto resize")
        max_line = st.number_input("Max lines (-1 = unlimited)", value=settings['node_auto_resize']['max_line'],
                                   min_value=-1, step=1)
        if max_line != settings['node_auto_resize']['max_line']:
            changed |= update_setting(settings, 'node_auto_resize', 'max_line', max_line)

    if changed:
        save_settings(settings, SETTINGS_FILE)
        st.rerun()
