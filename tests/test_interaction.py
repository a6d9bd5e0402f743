import pytest

from knowgraph.interaction import InteractionController
from tests.helpers import make_edges, make_nodes, place


@pytest.fixture
def clicks():
    return []


@pytest.fixture
def controller(engine, clicks):
    engine.load(make_nodes((1, "note"), (2, "link"), (3, "mystery")), make_edges((1, 2)))
    place(engine, n1=(100, 100), n2=(300, 100), n3=(200, 300))
    return InteractionController(engine, on_click=clicks.append, hit_padding=6.0, click_threshold=5.0)


def test_small_movement_is_a_click(controller, engine, clicks):
    assert controller.pointer_down(101, 99)
    controller.pointer_move(103, 100)

    assert controller.pointer_up(103, 101) == 1
    assert clicks == [1]
    assert controller.dragging is None
    assert engine.dragged_uid is None


def test_large_movement_is_a_drag(controller, engine, clicks):
    controller.pointer_down(100, 100)
    controller.pointer_move(150, 140)
    controller.pointer_move(180, 160)

    assert controller.pointer_up(180, 160) is None
    assert clicks == []
    assert (engine.nodes[1].x, engine.nodes[1].y) == (180, 160)
    assert engine.dragged_uid is None


def test_press_on_empty_space_does_nothing(controller, engine, clicks):
    assert not controller.pointer_down(20, 380)
    controller.pointer_move(22, 380)

    assert controller.pointer_up(22, 380) is None
    assert clicks == []
    assert engine.dragged_uid is None


def test_hit_radius_is_larger_than_node(controller):
    radius = controller.engine.config.node_radius
    assert controller.hit_test(100 + radius + 4, 100) == 1
    assert controller.hit_test(100 + radius + 7, 100) is None


def test_drag_suspends_physics_for_dragged_node(controller, engine):
    controller.pointer_down(300, 100)
    controller.pointer_move(250, 220)

    for _ in range(10):
        engine.tick()

    assert (engine.nodes[2].x, engine.nodes[2].y) == (250, 220)
    assert engine.nodes[2].vx == 0.0 and engine.nodes[2].vy == 0.0


def test_drag_is_clamped_to_viewport(controller, engine):
    controller.pointer_down(100, 100)
    controller.pointer_move(-30, 900)

    r = engine.config.node_radius
    assert (engine.nodes[1].x, engine.nodes[1].y) == (r, engine.height - r)


def test_hover_follows_pointer(controller):
    controller.pointer_move(299, 102)
    assert controller.hovered == 2

    controller.pointer_move(200, 200)
    assert controller.hovered is None

    controller.pointer_move(201, 299)
    assert controller.hovered == 3


def test_hover_updates_while_dragging(controller):
    controller.pointer_down(100, 100)
    controller.pointer_move(110, 100)
    assert controller.hovered == 1
    assert controller.dragging == 1


def test_leave_releases_drag_without_click(controller, engine, clicks):
    controller.pointer_down(100, 100)
    controller.pointer_move(101, 100)

    controller.pointer_leave()

    assert clicks == []
    assert controller.dragging is None
    assert controller.hovered is None
    assert engine.dragged_uid is None
    # A later release is not a click either
    assert controller.pointer_up(101, 100) is None


def test_touch_tap_selects_and_shows_labels(controller, clicks):
    controller.pointer_down(300, 100, touch=True)
    assert controller.hovered == 2

    controller.pointer_move(301, 101, touch=True)
    assert controller.pointer_up(301, 101, touch=True) == 2
    assert clicks == [2]
    assert controller.hovered is None


def test_touch_moves_do_not_track_hover(controller):
    controller.pointer_move(100, 100, touch=True)
    assert controller.hovered is None


def test_unknown_kind_is_clickable(controller, clicks):
    controller.pointer_down(200, 300)
    controller.pointer_up(200, 300)
    assert clicks == [3]


def test_only_one_click_per_gesture(controller, clicks):
    controller.pointer_down(100, 100)
    controller.pointer_up(100, 100)
    controller.pointer_up(100, 100)
    assert clicks == [1]


def test_works_without_click_callback(engine):
    engine.load(make_nodes((1, "note")), [])
    place(engine, n1=(50, 50))
    controller = InteractionController(engine)

    controller.pointer_down(50, 50)
    assert controller.pointer_up(50, 50) == 1
