"""Configuration settings for the Canvas Mind Map plugin."""

# File paths
DATA_FILE = "mindmap.canvas"
SETTINGS_FILE = "mindmap_settings.json"

# Layout granularity values, from least to most disruptive
LAYOUT_GRANULARITIES = ('none', 'subtree', 'tree', 'canvas')

# Directions accepted by the navigation commands
DIRECTIONS = ('up', 'down', 'left', 'right')

# Layout requests closer together than this are dropped
THROTTLE_INTERVAL_MS = 200

# Render frames to wait for a node's text before giving up on a resize
MAX_FRAME_WAITS = 10


def _hotkey(key, modifiers='', enabled=True):
    return {'modifiers': modifiers, 'key': key, 'enabled': enabled}


# Default settings
DEFAULT_SETTINGS = {
    'condition': {
        'file_name_include': 'mindmap',
    },
    'create_node': {
        'width': 300,
        'height': 100,
    },
    'layout': {
        'horizontal_gap': 200,
        'vertical_gap': 80,
        'granularity': 'tree',
        # Ordered list of {'pattern': ..., 'granularity': ...}; first match wins
        'granularity_by_pattern': [],
    },
    'node_auto_resize': {
        'enabled': True,
        'max_line': -1,
        'line_height': 24,
        'font_family': 'sans-serif',
        'font_size': 16,
    },
    'hotkey': {
        'create_sibling_or_root': _hotkey('Enter'),
        'create_child': _hotkey('Tab'),
        'edit_or_select': _hotkey('Space'),
        'delete_node': _hotkey('Backspace'),
        'navigate_up': _hotkey('ArrowUp', 'Alt'),
        'navigate_down': _hotkey('ArrowDown', 'Alt'),
        'navigate_left': _hotkey('ArrowLeft', 'Alt'),
        'navigate_right': _hotkey('ArrowRight', 'Alt'),
        'navigate_up_until_end': _hotkey('ArrowUp', 'Alt+Shift'),
        'navigate_down_until_end': _hotkey('ArrowDown', 'Alt+Shift'),
        'navigate_left_until_end': _hotkey('ArrowLeft', 'Alt+Shift'),
        'navigate_right_until_end': _hotkey('ArrowRight', 'Alt+Shift'),
        'free_navigate_up': _hotkey('ArrowUp'),
        'free_navigate_down': _hotkey('ArrowDown'),
        'free_navigate_left': _hotkey('ArrowLeft'),
        'free_navigate_right': _hotkey('ArrowRight'),
        'free_navigate_up_until_end': _hotkey('ArrowUp', 'Shift'),
        'free_navigate_down_until_end': _hotkey('ArrowDown', 'Shift'),
        'free_navigate_left_until_end': _hotkey('ArrowLeft', 'Shift'),
        'free_navigate_right_until_end': _hotkey('ArrowRight', 'Shift'),
    },
}

# Settings fields that must hold positive integers
POSITIVE_INT_FIELDS = {
    'create_node': ('width', 'height'),
    'layout': ('horizontal_gap', 'vertical_gap'),
    'node_auto_resize': ('line_height', 'font_size'),
}

# Canvas dimensions for the demo page
CANVAS_DIMENSIONS = {
    'normal': "650px",
    'expanded': "1000px"
}

# Error messages
ERROR_MESSAGES = {
    'load_data': "Error loading canvas: {error}",
    'save_data': "Error saving canvas: {error}",
    'load_settings': "Error loading settings: {error}",
    'invalid_json': "Invalid JSON format",
    'file_not_found': "Canvas file not found",
    'permission_error': "Permission denied accessing canvas file"
}
