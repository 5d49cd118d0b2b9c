"""
Shared game utilities for Rocket Arcade.

This module provides the pieces both games are built from, so that each game
module only describes its own rules.

Components:
- Scheduler: cooperative single-threaded timer wheel (frames, timeouts, intervals)
- BaseSession: lifecycle and state handling common to every game session
- Collision helpers: rectangle/circle and box overlap tests
- Snapshot types handed to the renderer
"""

import random
import time
from collections import namedtuple

import settings

# ---------- Render snapshot types ----------
Rect = namedtuple("Rect", "x y w h")
Explosion = namedtuple("Explosion", "x y size started_ms")
Snapshot = namedtuple(
    "Snapshot", "field_w field_h player obstacles score over explosion state"
)

IDLE = "IDLE"
PLAYING = "PLAYING"
OVER = "OVER"


def log(tag, *args):
    """
    Print a tagged diagnostic line when debug output is enabled.

    Args:
        tag (str): Short label for the event (e.g. "start", "over").
        *args: Extra values appended to the line.
    """
    if settings.DEBUG:
        print("ROCKET:", tag, *args)


def ticks_ms():
    """Return a monotonic timestamp in milliseconds."""
    return int(time.monotonic() * 1000)


def ticks_diff(a, b):
    """Return the difference between two tick values (a - b)."""
    return a - b


def check_policy(policy):
    """Validate a collision policy name and return it unchanged."""
    if policy not in settings.COLLISION_POLICIES:
        raise ValueError(
            "Unknown collision policy %r (expected one of %s)"
            % (policy, ", ".join(settings.COLLISION_POLICIES))
        )
    return policy


# ---------- Collision ----------
def rect_circle_collides(rx, ry, rw, rh, cx, cy, radius):
    """
    Return True if the rectangle and the circle intersect.

    The closest point of the rectangle to the circle center is found by
    clamping the center into the rectangle; the shapes touch when that point
    lies strictly inside the circle.

    Args:
        rx, ry (float): Rectangle top-left corner.
        rw, rh (float): Rectangle width and height.
        cx, cy (float): Circle center.
        radius (float): Circle radius.
    """
    closest_x = max(rx, min(cx, rx + rw))
    closest_y = max(ry, min(cy, ry + rh))
    dx = cx - closest_x
    dy = cy - closest_y
    return dx * dx + dy * dy < radius * radius


def boxes_overlap(a, b):
    """
    Return True if two (left, top, right, bottom) boxes overlap.

    Edges that only touch do not count as an overlap.
    """
    return a[0] < b[2] and a[2] > b[0] and a[1] < b[3] and a[3] > b[1]


# ---------- Scheduler ----------
class Timer:
    """A single scheduled callback owned by a session."""

    __slots__ = ("id", "owner", "callback", "due", "interval", "frame", "cancelled")

    def __init__(self, tid, owner, callback, due, interval=0, frame=False):
        self.id = tid
        self.owner = owner
        self.callback = callback
        self.due = due
        self.interval = interval
        self.frame = frame
        self.cancelled = False

    def __repr__(self):
        kind = "frame" if self.frame else ("every" if self.interval else "later")
        return "<Timer %d %s due=%s>" % (self.id, kind, self.due)


class Scheduler:
    """
    Cooperative scheduler driving every game callback from one thread.

    Three kinds of work can be scheduled, mirroring what a browser offers:

    - ``request_frame``: run once on the next ``pump()``
    - ``call_later``: run once after a delay
    - ``call_every``: run repeatedly at a fixed interval

    Callbacks are always called as ``callback(owner, now_ms)``; the owner is
    the session handle, passed explicitly instead of being captured in a
    closure. ``pump()`` checks each timer's cancelled flag right before
    firing it, so work cancelled by an earlier callback in the same pump
    never runs.
    """

    def __init__(self, clock=None):
        """
        Args:
            clock (callable): Returns the current time in ms. Defaults to
                `ticks_ms`; tests pass a fake clock.
        """
        self.clock = clock or ticks_ms
        self._timers = {}
        self._next_id = 1

    def now(self):
        """Return the current time according to the scheduler's clock."""
        return self.clock()

    def _add(self, owner, callback, due, interval=0, frame=False):
        timer = Timer(self._next_id, owner, callback, due, interval, frame)
        self._next_id += 1
        self._timers[timer.id] = timer
        return timer

    def request_frame(self, callback, owner):
        """Schedule `callback` for the next pump (like requestAnimationFrame)."""
        return self._add(owner, callback, self.now(), frame=True)

    def call_later(self, delay_ms, callback, owner):
        """Schedule `callback` once, `delay_ms` from now."""
        return self._add(owner, callback, self.now() + delay_ms)

    def call_every(self, interval_ms, callback, owner):
        """Schedule `callback` every `interval_ms`, first firing one interval from now."""
        if interval_ms <= 0:
            raise ValueError("interval must be positive, got %r" % (interval_ms,))
        return self._add(owner, callback, self.now() + interval_ms, interval=interval_ms)

    def cancel(self, timer):
        """Cancel a timer. Cancelling None or an already-fired timer is a no-op."""
        if timer is None:
            return
        timer.cancelled = True
        self._timers.pop(timer.id, None)

    def cancel_owner(self, owner):
        """Cancel every timer owned by `owner` and return how many were pending."""
        mine = [t for t in self._timers.values() if t.owner is owner]
        for t in mine:
            self.cancel(t)
        return len(mine)

    def pending(self, owner=None):
        """Return the number of live timers, optionally only those of `owner`."""
        if owner is None:
            return len(self._timers)
        return sum(1 for t in self._timers.values() if t.owner is owner)

    def pump(self, now=None):
        """
        Run everything that is due at `now` (defaults to the clock).

        Frame callbacks requested before this pump fire once, with `now`.
        Timers fire in due-time order; an interval that fell several periods
        behind fires once per missed period, each time with its own due time.

        Returns:
            int: Number of callbacks that ran.
        """
        if now is None:
            now = self.now()
        fired = 0

        frames = [t for t in self._timers.values() if t.frame]
        for t in frames:
            self._timers.pop(t.id, None)
        for t in frames:
            if t.cancelled:
                continue
            t.callback(t.owner, now)
            fired += 1

        while True:
            due = [t for t in self._timers.values() if not t.frame and t.due <= now]
            if not due:
                break
            t = min(due, key=lambda d: (d.due, d.id))
            fire_at = t.due
            if t.interval:
                t.due += t.interval
            else:
                self._timers.pop(t.id, None)
            t.callback(t.owner, fire_at)
            fired += 1
        return fired


# ---------- Sessions ----------
class BaseSession:
    """
    Base class for a single play-through of a game.

    The session owns all mutable game state and is only ever mutated from
    callbacks fired by its `Scheduler`. It implements the common lifecycle:

    - ``start()``: reset and begin scheduling ticks
    - ``end_game()``: cancel all pending work and enter the OVER state
    - ``retry()``: cancel, reset and start again
    - ``stop()``: cancel everything and go idle (unmount)
    - ``quit()``: stop and hand control back through ``on_game_over``

    Subclasses should override:
    - reset(): Initialize/reset game-specific state
    - schedule(): Register the game's timers with the scheduler
    - snapshot(): Build the renderer's read-only view
    """

    name = "GAME"
    default_policy = settings.POLICY_IMMEDIATE

    def __init__(self, scheduler=None, rng=None, collision_policy=None, on_game_over=None):
        """
        Args:
            scheduler (Scheduler): Timer source; a private one is created if omitted.
            rng (random.Random): Random source for spawning.
            collision_policy (str): "freeze" or "immediate".
            on_game_over (callable): Called with no arguments by `quit()`.
        """
        self.scheduler = scheduler or Scheduler()
        self.rng = rng or random.Random()
        self.collision_policy = check_policy(
            collision_policy if collision_policy is not None else self.default_policy
        )
        self.on_game_over = on_game_over
        self.state = IDLE
        self.score = 0
        self.obstacles = []
        self._next_obstacle_id = 1
        self.reset()

    @property
    def over(self):
        return self.state == OVER

    @property
    def running(self):
        return self.state == PLAYING

    def reset(self):
        """
        Reset game state to initial values.

        Override this in subclasses to initialize game-specific state.
        Always call super().reset() to reset base state.
        """
        self.score = 0
        self.obstacles = []

    def next_id(self):
        """Return a fresh obstacle id, unique within this session."""
        oid = self._next_obstacle_id
        self._next_obstacle_id += 1
        return oid

    def schedule(self):
        """Register this game's timers. Called by `start()` from a clean state."""
        raise NotImplementedError

    def start(self):
        """Begin a run from a clean state. Does nothing while already playing."""
        if self.state == PLAYING:
            return
        self.scheduler.cancel_owner(self)
        self.reset()
        self.state = PLAYING
        self.schedule()
        log("start", self.name)

    def stop(self):
        """Cancel every pending callback and go idle."""
        n = self.scheduler.cancel_owner(self)
        self.state = IDLE
        log("stop", self.name, "cancelled=%d" % n)

    def retry(self):
        """Cancel whatever is pending, reset and restart the game loop."""
        log("retry", self.name)
        self.stop()
        self.start()

    def quit(self):
        """Stop the session and notify the enclosing screen."""
        self.stop()
        if self.on_game_over is not None:
            self.on_game_over()

    def end_game(self):
        """
        Enter the OVER state.

        All pending timers are cancelled before `after_game_over()` runs, so
        anything scheduled there is the only work left for this session.
        """
        if self.state != PLAYING:
            return
        self.scheduler.cancel_owner(self)
        self.state = OVER
        log("over", self.name, "score=%d" % self.score)
        self.after_game_over()

    def after_game_over(self):
        """Hook for effects that outlive the run (explosions, auto exit)."""
        pass

    def key_down(self, key):
        pass

    def key_up(self, key):
        pass

    def snapshot(self):
        raise NotImplementedError
