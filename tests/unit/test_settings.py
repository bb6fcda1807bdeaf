"""Tests for settings loading, validation and lookups."""

import json

from canvas_mindmap.config import DEFAULT_SETTINGS
from canvas_mindmap.settings import (
    default_settings, load_settings, save_settings, update_setting,
    layout_granularity_for, is_mindmap_file
)


def test_default_settings_are_a_copy():
    settings = default_settings()
    settings['layout']['vertical_gap'] = 1
    assert DEFAULT_SETTINGS['layout']['vertical_gap'] == 80


def test_load_missing_file_gives_defaults(tmp_path):
    assert load_settings(str(tmp_path / 'missing.json')) == DEFAULT_SETTINGS


def test_load_merges_partial_file(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'layout': {'vertical_gap': 5}, 'obsolete': True}))
    settings = load_settings(str(path))
    assert settings['layout']['vertical_gap'] == 5
    assert settings['layout']['horizontal_gap'] == 200
    assert 'obsolete' not in settings
    assert settings['hotkey'] == DEFAULT_SETTINGS['hotkey']


def test_load_invalid_json_gives_defaults(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text('{not json')
    assert load_settings(str(path)) == DEFAULT_SETTINGS


def test_save_and_load(tmp_path):
    path = str(tmp_path / 'settings.json')
    settings = default_settings()
    settings['condition']['file_name_include'] = 'map'
    assert save_settings(settings, path) is True
    assert load_settings(path)['condition']['file_name_include'] == 'map'


def test_update_positive_int_fields():
    settings = default_settings()
    assert update_setting(settings, 'layout', 'vertical_gap', '25') is True
    assert settings['layout']['vertical_gap'] == 25

    assert update_setting(settings, 'layout', 'vertical_gap', 0) is False
    assert update_setting(settings, 'layout', 'vertical_gap', 'wide') is False
    assert update_setting(settings, 'create_node', 'width', -3) is False
    assert settings['layout']['vertical_gap'] == 25
    assert settings['create_node']['width'] == 300


def test_update_rejects_unknown_fields_and_granularities():
    settings = default_settings()
    assert update_setting(settings, 'layout', 'diagonal_gap', 5) is False
    assert update_setting(settings, 'nope', 'width', 5) is False
    assert update_setting(settings, 'layout', 'granularity', 'forest') is False
    assert update_setting(settings, 'layout', 'granularity', 'subtree') is True
    assert settings['layout']['granularity'] == 'subtree'


def test_max_line_accepts_negative():
    settings = default_settings()
    assert update_setting(settings, 'node_auto_resize', 'max_line', '3') is True
    assert settings['node_auto_resize']['max_line'] == 3
    assert update_setting(settings, 'node_auto_resize', 'max_line', -1) is True


def test_granularity_by_pattern_first_match_wins():
    settings = default_settings()
    settings['layout']['granularity_by_pattern'] = [
        {'pattern': 'drafts/*', 'granularity': 'none'},
        {'pattern': '*.canvas', 'granularity': 'subtree'},
        {'pattern': 'drafts/*', 'granularity': 'canvas'},
        {'pattern': '*', 'granularity': 'bogus'},
    ]
    assert layout_granularity_for(settings, 'drafts/ideas mindmap.canvas') == 'none'
    assert layout_granularity_for(settings, 'ideas mindmap.canvas') == 'subtree'
    assert layout_granularity_for(settings, 'ideas mindmap.json') == 'tree'
    assert layout_granularity_for(settings, None) == 'tree'


def test_invalid_global_granularity_falls_back():
    settings = default_settings()
    settings['layout']['granularity'] = 'sideways'
    assert layout_granularity_for(settings, 'a mindmap.canvas') == 'tree'


def test_is_mindmap_file():
    settings = default_settings()
    assert is_mindmap_file(settings, 'project mindmap.canvas')
    assert not is_mindmap_file(settings, 'project.canvas')
    assert not is_mindmap_file(settings, None)
    settings['condition']['file_name_include'] = ''
    assert is_mindmap_file(settings, 'anything.canvas')
