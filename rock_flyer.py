"""
Rock Flyer: keep a falling rocket in the air and fly through gaps in the rocks.

Unlike Asteroid Dodge this game runs on three fixed-interval timers:
rocket physics and rock movement every 20 ms, and a rock spawner every
1800 ms. Collisions are recomputed synchronously after every change to the
rocket or the rocks.
"""

from collections import namedtuple

import settings
from game_utils import BaseSession, Rect, Snapshot, boxes_overlap, log

RockGroup = namedtuple("RockGroup", "id x top_h bottom_h center")

_INF = float("inf")


def rocket_box(y):
    """Return the rocket's (left, top, right, bottom) box at height `y`."""
    return (
        settings.FLYER_X,
        y,
        settings.FLYER_X + settings.FLYER_SIZE,
        y + settings.FLYER_SIZE,
    )


def rock_hit(box, rock, field_h=settings.ROCK_FIELD_HEIGHT):
    """
    Test a rocket box against one rock group.

    A group is a top rock hanging from the ceiling, a bottom rock standing on
    the floor and, when ``rock["center"]`` is set, a rock floating in the
    middle band.

    Returns:
        str or None: "top", "bottom" or "center" for the first rock hit.
    """
    left = rock["x"]
    right = left + settings.ROCK_WIDTH
    if boxes_overlap(box, (left, -_INF, right, rock["top_h"])):
        return "top"
    if boxes_overlap(box, (left, field_h - rock["bottom_h"], right, _INF)):
        return "bottom"
    if rock["center"] and boxes_overlap(
        box, (left, settings.ROCK_CENTER_TOP, right, settings.ROCK_CENTER_BOTTOM)
    ):
        return "center"
    return None


def out_of_bounds(y):
    """True when the rocket has left the safe vertical band."""
    return y > settings.FLYER_MAX_SAFE_Y or y < settings.FLYER_MIN_SAFE_Y


def _physics_tick(game, now):
    game.physics()


def _rock_tick(game, now):
    game.move_rocks()


def _spawn_tick(game, now):
    game.spawn()
    game.recompute()


def _auto_exit(game, now):
    game.quit()


class RockFlyerGame(BaseSession):
    """
    Flappy-style game: gravity pulls the rocket down, Up gives it a kick.

    Rock groups are dicts with ``id``, ``x``, ``top_h``, ``bottom_h`` and
    ``center``.
    """

    name = "ROCK FLYER"
    default_policy = settings.ROCK_POLICY

    def __init__(
        self,
        width=settings.ROCK_FIELD_WIDTH,
        height=settings.ROCK_FIELD_HEIGHT,
        auto_exit=False,
        **kwargs
    ):
        """
        Args:
            width, height (int): Play-field size; rocks spawn at x=width.
            auto_exit (bool): Call `quit()` `ROCK_EXIT_DELAY_MS` after a crash.
            **kwargs: Passed to `BaseSession`.
        """
        if width <= 0 or height <= 0:
            raise ValueError("field size must be positive, got %rx%r" % (width, height))
        self.width = width
        self.height = height
        self.auto_exit = auto_exit
        self.rocket_y = settings.FLYER_START_Y
        self.velocity = 0
        super().__init__(**kwargs)

    def reset(self):
        super().reset()
        self.rocket_y = settings.FLYER_START_Y
        self.velocity = 0

    def schedule(self):
        self.scheduler.call_every(settings.ROCK_PHYSICS_MS, _physics_tick, self)
        self.scheduler.call_every(settings.ROCK_MOVE_MS, _rock_tick, self)
        self.scheduler.call_every(settings.ROCK_SPAWN_MS, _spawn_tick, self)

    def key_down(self, key):
        """Up is edge-triggered: every press sets the jump velocity once."""
        if key == settings.KEY_UP and self.running:
            self.velocity = settings.JUMP_VELOCITY

    # ---------- Collision ----------
    def find_hit(self, rocks=None):
        """Return what the rocket hits ("bounds", "top", ...) or None."""
        if out_of_bounds(self.rocket_y):
            return "bounds"
        box = rocket_box(self.rocket_y)
        for rock in self.obstacles if rocks is None else rocks:
            part = rock_hit(box, rock, self.height)
            if part is not None:
                return part
        return None

    def recompute(self):
        """Check the current positions and end the game on a hit."""
        if not self.running:
            return None
        hit = self.find_hit()
        if hit is not None:
            log("hit", hit)
            self.end_game()
        return hit

    # ---------- Timers ----------
    def physics(self):
        """Apply gravity, move the rocket and clamp it to the floor line."""
        if not self.running:
            return
        self.velocity += settings.GRAVITY
        self.rocket_y = min(self.rocket_y + self.velocity, settings.FLYER_MAX_Y)
        self.recompute()

    def move_rocks(self):
        """
        Scroll every rock left, drop the ones past the left edge and score.

        Returns:
            bool: True if the rocket survived the move.
        """
        if not self.running:
            return False
        moved = []
        for rock in self.obstacles:
            nr = dict(rock)
            nr["x"] = rock["x"] - settings.ROCK_SPEED
            if nr["x"] > settings.ROCK_REMOVE_X:
                moved.append(nr)

        hit = self.find_hit(moved)
        if hit is None or self.collision_policy == settings.POLICY_IMMEDIATE:
            self.obstacles = moved
        self.score += 1

        if hit is not None:
            log("hit", hit)
            self.end_game()
            return False
        return True

    def spawn(self):
        """Add a rock group at the right edge with a random gap position."""
        if not self.running:
            return None
        rng = self.rng
        top_h = int(rng.random() * settings.ROCK_TOP_RANGE + settings.ROCK_MIN_TOP)
        rock = {
            "id": self.next_id(),
            "x": self.width,
            "top_h": top_h,
            "bottom_h": self.height - top_h - settings.ROCK_GAP,
            "center": rng.random() < settings.ROCK_CENTER_CHANCE,
        }
        self.obstacles.append(rock)
        return rock

    def after_game_over(self):
        if self.auto_exit:
            self.scheduler.call_later(settings.ROCK_EXIT_DELAY_MS, _auto_exit, self)

    def snapshot(self):
        return Snapshot(
            self.width,
            self.height,
            Rect(settings.FLYER_X, self.rocket_y, settings.FLYER_SIZE, settings.FLYER_SIZE),
            tuple(
                RockGroup(r["id"], r["x"], r["top_h"], r["bottom_h"], r["center"])
                for r in self.obstacles
            ),
            self.score,
            self.over,
            None,
            self.state,
        )
