"""Settings persistence and lookup helpers for the canvas mind map."""

import json
import os
import logging
from copy import deepcopy
from fnmatch import fnmatch
from typing import Dict, Any, Optional

from canvas_mindmap.config import (
    DEFAULT_SETTINGS, SETTINGS_FILE, LAYOUT_GRANULARITIES, POSITIVE_INT_FIELDS
)

logger = logging.getLogger(__name__)


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay ``overrides`` onto a copy of ``defaults``, dropping unknown keys."""
    merged = deepcopy(defaults)
    for key, value in overrides.items():
        if key not in defaults:
            logger.debug(f"Ignoring unknown setting '{key}'")
            continue
        if isinstance(defaults[key], dict) and isinstance(value, dict):
            merged[key] = _merge(defaults[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


def default_settings() -> Dict[str, Any]:
    """Return a fresh copy of the default settings."""
    return deepcopy(DEFAULT_SETTINGS)


def load_settings(path: str = SETTINGS_FILE) -> Dict[str, Any]:
    """Load settings from a JSON file, falling back to defaults.

    Persisted values are merged onto the defaults so that settings files
    written by older versions still produce a complete structure.

    Args:
        path: Settings file location

    Returns:
        Complete settings dictionary
    """
    if not os.path.exists(path):
        logger.info("Settings file not found, using default settings")
        return default_settings()
    try:
        with open(path, 'r') as f:
            persisted = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in settings file: {str(e)}")
        return default_settings()
    except OSError as e:
        logger.error(f"Error loading settings: {str(e)}")
        return default_settings()

    if not isinstance(persisted, dict):
        logger.warning("Settings file does not hold an object, using default settings")
        return default_settings()
    return _merge(DEFAULT_SETTINGS, persisted)


def save_settings(settings: Dict[str, Any], path: str = SETTINGS_FILE) -> bool:
    """Save settings to a JSON file."""
    try:
        with open(path, 'w') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved to {path}")
        return True
    except (OSError, TypeError) as e:
        logger.error(f"Error saving settings: {str(e)}")
        return False


def update_setting(settings: Dict[str, Any], section: str, key: str, value: Any) -> bool:
    """Validate and apply a single settings change.

    Integer fields accept ints or numeric strings and must be positive;
    anything else is ignored the same way a settings form ignores bad input.

    Args:
        settings: Settings dictionary to update in place
        section: Top-level section name (e.g. 'layout')
        key: Field name inside the section
        value: New value

    Returns:
        True if the value was applied, False if it was rejected
    """
    section_values = settings.get(section)
    if not isinstance(section_values, dict) or key not in DEFAULT_SETTINGS.get(section, {}):
        logger.warning(f"Unknown setting {section}.{key}")
        return False

    if key in POSITIVE_INT_FIELDS.get(section, ()):
        try:
            int_value = int(value)
        except (ValueError, TypeError):
            logger.debug(f"Rejected non-integer value for {section}.{key}: {value!r}")
            return False
        if int_value <= 0:
            logger.debug(f"Rejected non-positive value for {section}.{key}: {int_value}")
            return False
        value = int_value
    elif section == 'layout' and key == 'granularity':
        if value not in LAYOUT_GRANULARITIES:
            logger.debug(f"Rejected unknown layout granularity: {value!r}")
            return False
    elif section == 'node_auto_resize' and key == 'max_line':
        try:
            value = int(value)
        except (ValueError, TypeError):
            return False

    section_values[key] = value
    logger.info(f"Setting {section}.{key} updated to {value!r}")
    return True


def layout_granularity_for(settings: Dict[str, Any], file_name: Optional[str]) -> str:
    """Resolve the layout granularity for a file.

    Per-pattern entries are checked in order; the first pattern matching the
    file name wins. Otherwise the global granularity applies.
    """
    layout = settings.get('layout', {})
    for entry in layout.get('granularity_by_pattern') or []:
        pattern = entry.get('pattern')
        granularity = entry.get('granularity')
        if not pattern or granularity not in LAYOUT_GRANULARITIES:
            continue
        if file_name and fnmatch(file_name, pattern):
            return granularity
    granularity = layout.get('granularity', DEFAULT_SETTINGS['layout']['granularity'])
    if granularity not in LAYOUT_GRANULARITIES:
        logger.warning(f"Invalid layout granularity {granularity!r}, using default")
        return DEFAULT_SETTINGS['layout']['granularity']
    return granularity


def is_mindmap_file(settings: Dict[str, Any], file_name: Optional[str]) -> bool:
    """Return True if the mind map features are enabled for ``file_name``."""
    if not file_name:
        return False
    include = settings.get('condition', {}).get('file_name_include', '')
    return include in file_name
