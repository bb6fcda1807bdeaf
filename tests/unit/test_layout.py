"""Tests for the tree layout engine."""

import pytest

from canvas_mindmap.layout import TreeLayoutEngine


def positions(canvas):
    return {node_id: (n['x'], n['y']) for node_id, n in canvas.nodes.items()}


@pytest.fixture
def engine(settings):
    return TreeLayoutEngine(settings)


def test_parent_centred_on_children(engine, make_canvas, node, edge):
    canvas = make_canvas(
        [node('r', x=37, y=91), node('a', y=0), node('b', y=100)],
        [edge('e1', 'r', 'a'), edge('e2', 'r', 'b')]
    )
    engine.layout_canvas(canvas)

    # Subtree height of r is 50 + 10 + 50 = 110
    assert positions(canvas) == {
        'r': (0.0, 30.0),
        'a': (150.0, 0.0),
        'b': (150.0, 60.0),
    }
    assert canvas.save_count == 1
    assert canvas.frames_requested == 1


def test_roots_stacked_by_subtree_height(engine, make_canvas, node):
    canvas = make_canvas([node('low', y=500), node('high', y=0, height=80)])
    engine.layout_canvas(canvas, anchor_x=10, anchor_y=20)
    assert positions(canvas) == {'high': (10.0, 20.0), 'low': (10.0, 110.0)}


def test_children_centred_in_tall_parent(engine, make_canvas, node, edge):
    canvas = make_canvas([node('p', height=200), node('a', y=999)], [edge('e1', 'p', 'a')])
    engine.layout_canvas(canvas)
    assert positions(canvas) == {'p': (0.0, 0.0), 'a': (150.0, 75.0)}


def test_children_follow_y_order_not_edge_order(engine, make_canvas, node, edge):
    canvas = make_canvas(
        [node('r'), node('b', y=500), node('a', y=0)],
        [edge('e1', 'r', 'b'), edge('e2', 'r', 'a')]
    )
    engine.layout_canvas(canvas)
    assert canvas.nodes['a']['y'] < canvas.nodes['b']['y']


def test_layout_subtree_keeps_tree_in_place_and_is_idempotent(engine, make_canvas, node, edge):
    canvas = make_canvas(
        [node('r', x=400, y=300), node('a', x=0, y=0), node('b', x=0, y=40),
         node('z', x=-500, y=-500)],
        [edge('e1', 'r', 'a'), edge('e2', 'r', 'b')]
    )
    engine.layout_subtree(canvas, 'a', whole_tree=True)
    first = positions(canvas)
    assert first['r'] == (400.0, 300.0)
    assert first['a'] == (550.0, 270.0)
    assert first['b'] == (550.0, 330.0)
    assert first['z'] == (-500.0, -500.0)

    engine.layout_subtree(canvas, 'a', whole_tree=True)
    assert positions(canvas) == first


def test_single_subtree_scope_leaves_ancestors_alone(engine, make_canvas, node, edge):
    canvas = make_canvas(
        [node('r', x=0, y=0), node('a', x=300, y=300), node('a1', x=0, y=0)],
        [edge('e1', 'r', 'a'), edge('e2', 'a', 'a1')]
    )
    engine.layout_subtree(canvas, 'a', whole_tree=False)
    assert positions(canvas) == {'r': (0.0, 0.0), 'a': (300.0, 300.0), 'a1': (450.0, 300.0)}


def test_explicit_anchor(engine, make_canvas, node):
    canvas = make_canvas([node('a', x=5, y=5)])
    engine.layout_subtree(canvas, 'a', anchor_x=100, anchor_y=200)
    assert positions(canvas) == {'a': (100.0, 200.0)}


def test_cycle_below_root_terminates(engine, make_canvas, node, edge):
    canvas = make_canvas(
        [node('R'), node('A'), node('B')],
        [edge('e1', 'R', 'A'), edge('e2', 'A', 'B'), edge('e3', 'B', 'A')]
    )
    placed = engine.layout_canvas(canvas)
    assert set(placed) == {'R', 'A', 'B'}
    assert positions(canvas) == {'R': (0.0, 0.0), 'A': (150.0, 0.0), 'B': (300.0, 0.0)}


def test_rootless_cycle_is_left_untouched(engine, make_canvas, node, edge):
    canvas = make_canvas(
        [node('A', x=7, y=8), node('B', x=9, y=10)],
        [edge('e1', 'A', 'B'), edge('e2', 'B', 'A')]
    )
    assert engine.layout_canvas(canvas) == {}
    assert positions(canvas) == {'A': (7.0, 8.0), 'B': (9.0, 10.0)}


def test_dangling_edge_does_not_abort_layout(engine, make_canvas, node, edge):
    canvas = make_canvas([node('a', y=40), node('b', y=0)], [edge('e1', 'a', 'ghost')])
    engine.layout_canvas(canvas)
    assert positions(canvas) == {'b': (0.0, 0.0), 'a': (0.0, 60.0)}


def test_relayout_dispatch(engine, make_canvas, node, edge):
    canvas = make_canvas([node('r', x=10, y=10), node('a')], [edge('e1', 'r', 'a')])
    assert engine.relayout(canvas, 'a', 'none') == {}
    assert canvas.save_count == 0
    assert engine.relayout(canvas, None, 'tree') == {}
    assert set(engine.relayout(canvas, 'a', 'subtree')) == {'a'}
    assert set(engine.relayout(canvas, 'a', 'tree')) == {'r', 'a'}
    assert set(engine.relayout(canvas, None, 'canvas')) == {'r', 'a'}


def test_missing_node_is_a_no_op(engine, make_canvas, node):
    canvas = make_canvas([node('a')])
    assert engine.layout_subtree(canvas, 'ghost') == {}
    assert canvas.save_count == 0


def test_shared_descendant_keeps_first_slot(engine, make_canvas, node, edge):
    nodes = [node('r'), node('a', y=0), node('b', y=100), node('c', y=200),
             node('s', y=0, height=200), node('t', y=300)]
    nodes += [node(f"c{i}", y=400 + i * 10) for i in range(4)]
    edges = [edge('e1', 'r', 'a'), edge('e2', 'r', 'b'), edge('e3', 'r', 'c'),
             edge('e4', 'a', 's'), edge('e5', 'b', 's'), edge('e6', 'b', 't')]
    edges += [edge(f"f{i}", 'c', f"c{i}") for i in range(4)]
    canvas = make_canvas(nodes, edges)
    engine.layout_canvas(canvas)

    placed = positions(canvas)
    # s is placed under a only; under b it takes no room, so t fills b's 60px slot
    assert placed['s'] == (300.0, 0.0)
    assert placed['b'] == (150.0, 215.0)
    assert placed['t'] == (300.0, 210.0)
    assert placed['c0'] == (300.0, 280.0)
    assert placed['t'][1] + 50.0 < placed['c0'][1]
