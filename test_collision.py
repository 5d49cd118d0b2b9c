"""Collision helpers shared by both games."""

import pytest

import settings
from game_utils import boxes_overlap, check_policy, rect_circle_collides
from rock_flyer import out_of_bounds, rock_hit, rocket_box


def test_rect_circle_overlapping_center():
    """Circle centered inside the rocket rectangle is a hit."""
    assert rect_circle_collides(0, 0, 50, 80, 25, 40, 30)


def test_rect_circle_far_away():
    assert not rect_circle_collides(0, 0, 50, 80, 200, 40, 10)


def test_rect_circle_near_corner():
    # closest point is the corner (50, 80); distance to (56, 88) is exactly 10
    assert not rect_circle_collides(0, 0, 50, 80, 56, 88, 10)
    assert rect_circle_collides(0, 0, 50, 80, 56, 88, 10.01)


def test_rect_circle_side_touch_is_not_a_hit():
    assert not rect_circle_collides(0, 0, 50, 80, 60, 40, 10)
    assert rect_circle_collides(0, 0, 50, 80, 59, 40, 10)


def test_boxes_overlap():
    assert boxes_overlap((0, 0, 10, 10), (5, 5, 15, 15))
    # shared edge only
    assert not boxes_overlap((0, 0, 10, 10), (10, 0, 20, 10))
    assert not boxes_overlap((0, 0, 10, 10), (0, 10, 10, 20))


def _rock(x, top_h, bottom_h=None, center=False):
    if bottom_h is None:
        bottom_h = settings.ROCK_FIELD_HEIGHT - top_h - settings.ROCK_GAP
    return {"id": 1, "x": x, "top_h": top_h, "bottom_h": bottom_h, "center": center}


def test_rock_top_overlap():
    box = (100, 100, 140, 140)  # left, top, right, bottom
    assert rock_hit(box, _rock(110, 150)) == "top"


def test_rock_bottom_overlap():
    box = (100, 480, 140, 520)
    assert rock_hit(box, _rock(110, 100, bottom_h=150)) == "bottom"


def test_rock_center_only_when_flagged():
    box = rocket_box(260)
    assert rock_hit(box, _rock(110, 100, bottom_h=100, center=False)) is None
    assert rock_hit(box, _rock(110, 100, bottom_h=100, center=True)) == "center"


def test_rock_without_x_overlap_misses():
    box = (100, 100, 140, 140)
    assert rock_hit(box, _rock(140, 550)) is None
    assert rock_hit(box, _rock(50, 550)) is None
    assert rock_hit(box, _rock(51, 550)) == "top"


def test_rocket_box_geometry():
    assert rocket_box(100) == (100, 100, 140, 140)


def test_out_of_bounds_band():
    assert not out_of_bounds(0)
    assert not out_of_bounds(560)
    assert out_of_bounds(-0.1)
    assert out_of_bounds(560.5)


def test_unknown_policy_rejected():
    assert check_policy("freeze") == "freeze"
    with pytest.raises(ValueError):
        check_policy("bounce")
