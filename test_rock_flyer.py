"""Rock Flyer: gravity, rocks, timers and lifecycle."""

import pytest

import settings
from game_utils import IDLE, OVER, PLAYING
from rock_flyer import RockFlyerGame


@pytest.fixture
def game(scheduler, scripted_rng):
    g = RockFlyerGame(scheduler=scheduler, rng=scripted_rng())
    g.start()
    return g


def add_rock(game, x, top_h, center=False):
    r = {
        "id": game.next_id(),
        "x": x,
        "top_h": top_h,
        "bottom_h": game.height - top_h - settings.ROCK_GAP,
        "center": center,
    }
    game.obstacles.append(r)
    return r


def test_gravity(game):
    game.physics()
    assert game.velocity == pytest.approx(0.6)
    assert game.rocket_y == pytest.approx(250.6)
    game.physics()
    assert game.velocity == pytest.approx(1.2)
    assert game.rocket_y == pytest.approx(251.8)


def test_jump(game):
    game.key_down(settings.KEY_UP)
    assert game.velocity == settings.JUMP_VELOCITY
    game.physics()
    assert game.velocity == pytest.approx(-9.4)
    assert game.rocket_y == pytest.approx(240.6)


def test_clamped_to_floor_line(game):
    game.rocket_y = 499
    game.velocity = 5
    game.physics()
    assert game.rocket_y == settings.FLYER_MAX_Y
    assert game.running


def test_flying_off_the_top_ends_the_game(game):
    game.rocket_y = 5
    game.velocity = -10
    game.physics()
    assert game.state == OVER


def test_rocks_scroll_and_score(game):
    add_rock(game, 400, 100)
    assert game.move_rocks()
    assert game.obstacles[0]["x"] == 395
    assert game.score == 1


def test_rocks_removed_past_left_edge(game):
    add_rock(game, -54, 100)
    add_rock(game, -55, 100)
    game.move_rocks()
    assert [r["x"] for r in game.obstacles] == [-59]


def test_spawn(game, scripted_rng):
    game.rng = scripted_rng(0.0, 0.2)
    rock = game.spawn()
    assert rock["x"] == settings.ROCK_FIELD_WIDTH
    assert rock["top_h"] == 50
    assert rock["bottom_h"] == 400
    assert rock["center"] is True

    game.rng = scripted_rng(0.999, 0.5)
    rock = game.spawn()
    assert rock["top_h"] == 249
    assert rock["bottom_h"] == 201
    assert rock["center"] is False


def test_rock_hit_immediate(game):
    add_rock(game, 144, 300)
    assert not game.move_rocks()
    assert game.over
    assert game.obstacles[0]["x"] == 139
    assert game.score == 1


def test_rock_hit_freeze(scheduler, scripted_rng):
    g = RockFlyerGame(
        scheduler=scheduler, rng=scripted_rng(), collision_policy=settings.POLICY_FREEZE
    )
    g.start()
    add_rock(g, 144, 300)
    g.move_rocks()
    assert g.over
    assert g.obstacles[0]["x"] == 144
    assert g.score == 1


def test_fatal_move_still_scores(game):
    assert game.move_rocks()
    assert game.move_rocks()
    add_rock(game, 144, 300)
    assert not game.move_rocks()
    assert game.score == 3


def test_edge_contact_is_not_a_hit(game):
    add_rock(game, 145, 300)
    assert game.move_rocks()
    assert game.obstacles[0]["x"] == 140


def test_timers(game, clock, scheduler):
    assert scheduler.pending(game) == 3
    clock.advance(20)
    scheduler.pump()
    assert game.score == 1
    assert game.rocket_y == pytest.approx(250.6)

    clock.advance(settings.ROCK_SPAWN_MS - 20)
    scheduler.pump()
    assert game.score == 90
    assert len(game.obstacles) == 1
    assert game.obstacles[0]["x"] == settings.ROCK_FIELD_WIDTH

    clock.advance(20)
    scheduler.pump()
    assert game.obstacles[0]["x"] == settings.ROCK_FIELD_WIDTH - settings.ROCK_SPEED


def test_game_over_cancels_timers(game, clock, scheduler):
    add_rock(game, 144, 300)
    clock.advance(20)
    scheduler.pump()
    assert game.over
    assert scheduler.pending(game) == 0
    score = game.score
    clock.advance(5000)
    scheduler.pump()
    assert game.score == score


def test_auto_exit(scheduler, clock, scripted_rng):
    calls = []
    g = RockFlyerGame(
        scheduler=scheduler, rng=scripted_rng(), auto_exit=True, on_game_over=lambda: calls.append(1)
    )
    g.start()
    add_rock(g, 144, 300)
    g.move_rocks()
    assert scheduler.pending(g) == 1
    clock.advance(settings.ROCK_EXIT_DELAY_MS)
    scheduler.pump()
    assert calls == [1]
    assert g.state == IDLE


def test_jump_ignored_when_over(game):
    game.rocket_y = -1
    game.recompute()
    assert game.over
    v = game.velocity
    game.key_down(settings.KEY_UP)
    assert game.velocity == v


def test_retry(game, clock, scheduler):
    add_rock(game, 144, 300)
    game.key_down(settings.KEY_UP)
    game.physics()
    game.move_rocks()
    assert game.over

    game.retry()
    assert game.state == PLAYING
    assert game.score == 0
    assert game.obstacles == []
    assert game.rocket_y == settings.FLYER_START_Y
    assert game.velocity == 0
    assert scheduler.pending(game) == 3

    clock.advance(40)
    scheduler.pump()
    assert game.score == 2


def test_stop(game, clock, scheduler):
    game.stop()
    assert scheduler.pending(game) == 0
    clock.advance(5000)
    scheduler.pump()
    assert game.score == 0
    assert game.rocket_y == settings.FLYER_START_Y


def test_snapshot(game):
    add_rock(game, 300, 120, center=True)
    snap = game.snapshot()
    assert snap.player.x == settings.FLYER_X
    assert snap.player.y == settings.FLYER_START_Y
    assert snap.obstacles[0].center
    assert snap.explosion is None
    assert snap.state == PLAYING


def test_bad_field():
    with pytest.raises(ValueError):
        RockFlyerGame(width=0)
