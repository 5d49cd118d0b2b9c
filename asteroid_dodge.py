"""
Asteroid Dodge: steer a rocket left and right to avoid falling asteroids.

The game is driven by a frame callback that re-requests itself every frame
and only advances the simulation when at least `ASTEROID_TICK_MS` have
passed since the previous tick, which caps the update rate at ~60 Hz no
matter how fast frames arrive.
"""

from collections import namedtuple

import settings
from game_utils import (
    BaseSession,
    Explosion,
    Rect,
    Snapshot,
    log,
    rect_circle_collides,
    ticks_diff,
)

Asteroid = namedtuple("Asteroid", "id x y size speed rotation")


def _on_frame(game, now):
    """Frame driver: tick when the 16 ms gate opens, then ask for another frame."""
    if not game.running:
        return
    if game.last_tick is None or ticks_diff(now, game.last_tick) >= settings.ASTEROID_TICK_MS:
        game.last_tick = now
        game.step(now)
    if game.running:
        game.frame_timer = game.scheduler.request_frame(_on_frame, game)


def _clear_explosion(game, now):
    game.explosion = None


class AsteroidDodgeGame(BaseSession):
    """
    Rocket near the bottom of the field, asteroids falling from the top.

    Asteroids are plain dicts with ``id``, ``x``, ``y`` (top-left of the
    bounding square), ``size`` (diameter), ``speed`` and ``rotation``.
    """

    name = "ASTEROID DODGE"
    default_policy = settings.ASTEROID_POLICY

    def __init__(self, width=settings.WINDOW_WIDTH, height=settings.WINDOW_HEIGHT, **kwargs):
        """
        Args:
            width, height (int): Play-field size in pixels.
            **kwargs: Passed to `BaseSession` (scheduler, rng,
                collision_policy, on_game_over).
        """
        self._check_field(width, height)
        self.width = width
        self.height = height
        self.held = {"left": False, "right": False}
        self.explosion = None
        self.frame_timer = None
        self.last_tick = None
        super().__init__(**kwargs)

    @staticmethod
    def _check_field(width, height):
        if width <= settings.ROCKET_WIDTH or height <= settings.ROCKET_HEIGHT + settings.ROCKET_BOTTOM_MARGIN:
            raise ValueError("field %rx%r is too small for the rocket" % (width, height))

    def reset(self):
        """Center the rocket, clear asteroids, input, explosion and score."""
        super().reset()
        self.rocket_x = self.width / 2 - settings.ROCKET_WIDTH / 2
        self.rocket_y = self.height - settings.ROCKET_HEIGHT - settings.ROCKET_BOTTOM_MARGIN
        self.held = {"left": False, "right": False}
        self.explosion = None
        self.frame_timer = None
        self.last_tick = None

    def schedule(self):
        self.frame_timer = self.scheduler.request_frame(_on_frame, self)

    def resize(self, width, height):
        """Follow a window resize: move the rocket row and keep it inside."""
        self._check_field(width, height)
        self.width = width
        self.height = height
        self.rocket_y = height - settings.ROCKET_HEIGHT - settings.ROCKET_BOTTOM_MARGIN
        self.rocket_x = min(max(self.rocket_x, 0), width - settings.ROCKET_WIDTH)

    # ---------- Input ----------
    def key_down(self, key):
        if self.over:
            return
        if key == settings.KEY_LEFT:
            self.held["left"] = True
        elif key == settings.KEY_RIGHT:
            self.held["right"] = True

    def key_up(self, key):
        if self.over:
            return
        if key == settings.KEY_LEFT:
            self.held["left"] = False
        elif key == settings.KEY_RIGHT:
            self.held["right"] = False

    # ---------- Update step ----------
    def move_rocket(self):
        """Apply held keys to the rocket, clamped to the field."""
        speed = settings.ROCKET_MOVE_SPEED
        if self.held["left"]:
            self.rocket_x = max(self.rocket_x - speed, 0)
        if self.held["right"]:
            self.rocket_x = min(self.rocket_x + speed, self.width - settings.ROCKET_WIDTH)

    def collides(self, asteroid):
        """Rectangle (rocket) vs circle (asteroid) test."""
        r = asteroid["size"] / 2
        return rect_circle_collides(
            self.rocket_x,
            self.rocket_y,
            settings.ROCKET_WIDTH,
            settings.ROCKET_HEIGHT,
            asteroid["x"] + r,
            asteroid["y"] + r,
            r,
        )

    def spawn(self):
        """Append a new asteroid just above the top edge and return it."""
        rng = self.rng
        size = settings.ASTEROID_MIN_SIZE + rng.random() * settings.ASTEROID_SIZE_RANGE
        asteroid = {
            "id": self.next_id(),
            "x": rng.random() * (self.width - size),
            "y": -size,
            "size": size,
            "speed": settings.ASTEROID_MIN_SPEED + rng.random() * settings.ASTEROID_SPEED_RANGE,
            "rotation": rng.random() * 360,
        }
        self.obstacles.append(asteroid)
        return asteroid

    def step(self, now=None):
        """
        Advance the game by one tick.

        Returns:
            bool: True if the rocket survived the tick.
        """
        if not self.running:
            return False
        if now is None:
            now = self.scheduler.now()

        self.move_rocket()

        moved = []
        for a in self.obstacles:
            na = dict(a)
            na["y"] = a["y"] + a["speed"]
            if na["y"] < self.height + na["size"]:
                moved.append(na)

        hit = None
        for a in moved:
            if self.collides(a):
                hit = a
                break

        # freeze keeps last tick's positions; the spawn roll and score still happen
        if hit is None or self.collision_policy == settings.POLICY_IMMEDIATE:
            self.obstacles = moved

        if self.rng.random() < settings.ASTEROID_SPAWN_CHANCE:
            self.spawn()

        self.score += 1

        if hit is not None:
            log("hit", "asteroid=%d" % hit["id"])
            self.explode(now)
            self.end_game()
            return False
        return True

    # ---------- Explosion ----------
    def explode(self, now):
        """Put the explosion overlay on the rocket's center."""
        half = settings.EXPLOSION_SIZE / 2
        cx = self.rocket_x + settings.ROCKET_WIDTH / 2
        cy = self.rocket_y + settings.ROCKET_HEIGHT / 2
        self.explosion = Explosion(cx - half, cy - half, settings.EXPLOSION_SIZE, now)

    def stop(self):
        super().stop()
        self.explosion = None

    def after_game_over(self):
        if self.explosion is not None:
            self.scheduler.call_later(settings.EXPLOSION_MS, _clear_explosion, self)

    def snapshot(self):
        return Snapshot(
            self.width,
            self.height,
            Rect(self.rocket_x, self.rocket_y, settings.ROCKET_WIDTH, settings.ROCKET_HEIGHT),
            tuple(
                Asteroid(a["id"], a["x"], a["y"], a["size"], a["speed"], a["rotation"])
                for a in self.obstacles
            ),
            self.score,
            self.over,
            self.explosion,
            self.state,
        )
