"""Tests for text measurement and node auto-resize."""

import pytest

from canvas_mindmap.measure import (
    EstimatingMeasurer, TextMeasurer, fit_node_to_text, font_for, NODE_PADDING
)


class NeverReady(TextMeasurer):
    """Measurer that cannot measure anything yet."""

    def __init__(self):
        self.calls = 0

    def measure(self, text, font, max_width=None):
        self.calls += 1
        return None


class FixedSize(TextMeasurer):

    def __init__(self, height):
        self.height = height

    def measure(self, text, font, max_width=None):
        return max_width, self.height


def test_estimating_measurer_wraps_lines(settings):
    font = font_for(settings)
    measurer = EstimatingMeasurer()
    width, height = measurer.measure('abc', font)
    assert height == 24 + NODE_PADDING
    assert width == pytest.approx(3 * 16 * 0.6 + NODE_PADDING)

    _, wrapped = measurer.measure('x' * 30, font, max_width=100)
    # 7 characters fit per line, so 30 characters need 5 lines
    assert wrapped == 5 * 24 + NODE_PADDING


def test_waits_for_render_before_measuring(settings, make_canvas, node):
    canvas = make_canvas([node('a', text='hi')])
    assert fit_node_to_text(canvas, 'a', FixedSize(30), settings) is True
    assert canvas.frames_rendered == 1
    assert canvas.nodes['a']['height'] == 30.0


def test_gives_up_after_frame_budget(settings, make_canvas, node):
    canvas = make_canvas([node('a', text='hi')])
    measurer = NeverReady()
    assert fit_node_to_text(canvas, 'a', measurer, settings, max_frame_waits=3) is False
    assert canvas.frames_rendered == 3
    assert canvas.nodes['a']['height'] == 50.0
    assert canvas.save_count == 0


def test_height_capped_by_max_line(settings, make_canvas, node):
    settings['node_auto_resize']['max_line'] = 2
    canvas = make_canvas([node('a', text='long text')])
    assert fit_node_to_text(canvas, 'a', FixedSize(500), settings) is True
    assert canvas.nodes['a']['height'] == 48.0


def test_height_never_below_one_line(settings, make_canvas, node):
    canvas = make_canvas([node('a', text='x')])
    fit_node_to_text(canvas, 'a', FixedSize(5), settings)
    assert canvas.nodes['a']['height'] == 24.0


def test_unchanged_height_is_not_saved(settings, make_canvas, node):
    canvas = make_canvas([node('a', text='x')])
    assert fit_node_to_text(canvas, 'a', FixedSize(50), settings) is False
    assert canvas.save_count == 0


def test_missing_node(settings, make_canvas):
    assert fit_node_to_text(make_canvas(), 'ghost', FixedSize(10), settings) is False
