# State management helpers for the canvas mind map demo

import streamlit as st
import json
import os
import logging
from typing import Dict, Any, Optional

from canvas_mindmap.canvas import Canvas
from canvas_mindmap.config import DATA_FILE, SETTINGS_FILE, ERROR_MESSAGES
from canvas_mindmap.controller import MindMapController
from canvas_mindmap.settings import load_settings

logger = logging.getLogger(__name__)


def get_store() -> Dict[str, Any]:
    """Get the store from session state, creating it on first use."""
    if 'store' not in st.session_state:
        settings = load_settings(SETTINGS_FILE)
        st.session_state['store'] = {
            'controller': MindMapController(settings),
            'active_canvas': None,
        }
    return st.session_state['store']


def get_controller() -> MindMapController:
    return get_store()['controller']


def get_settings() -> Dict[str, Any]:
    return get_controller().settings


def get_active_canvas() -> Optional[Canvas]:
    """Get the canvas currently shown on the page."""
    canvas_id = get_store().get('active_canvas')
    return get_controller().canvases.get(canvas_id)


def open_canvas(path: str = DATA_FILE) -> Canvas:
    """Load (or create) the canvas stored at ``path`` and make it active."""
    controller = get_controller()
    current = get_active_canvas()
    if current is not None:
        controller.detach(current.canvas_id)

    data = load_data(path) or {'nodes': [], 'edges': []}
    canvas = Canvas.from_dict(data, file_name=os.path.basename(path),
                              on_save=lambda c: save_data(c, path))
    controller.attach(canvas)
    get_store()['active_canvas'] = canvas.canvas_id
    logger.info(f"Opened canvas {path} with {len(canvas.nodes)} node(s)")
    return canvas


def save_data(canvas: Canvas, path: str = DATA_FILE) -> bool:
    """Save a canvas to a JSON canvas file."""
    try:
        data = canvas.to_dict()
        logger.debug(f"Saving canvas with {len(data['nodes'])} nodes and {len(data['edges'])} edges")
        with open(path, 'w') as f:
            json.dump(data, f, indent=2)
        return True
    except (OSError, TypeError) as e:
        logger.error(f"Error saving canvas: {str(e)}")
        st.error(ERROR_MESSAGES['save_data'].format(error=str(e)))
        return False


def load_data(path: str = DATA_FILE) -> Optional[Dict[str, Any]]:
    """Load a canvas document from a JSON file if it exists."""
    try:
        if os.path.exists(path):
            with open(path, 'r') as f:
                return json.load(f)
        logger.info("Canvas file not found, starting with an empty canvas")
        return None
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in canvas file: {str(e)}")
        st.error(ERROR_MESSAGES['invalid_json'])
        return None
    except PermissionError as e:
        logger.error(f"Permission error accessing canvas file: {str(e)}")
        st.error(ERROR_MESSAGES['permission_error'])
        return None
    except OSError as e:
        logger.error(f"Error loading canvas: {str(e)}")
        st.error(ERROR_MESSAGES['load_data'].format(error=str(e)))
        return None
