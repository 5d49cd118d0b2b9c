"""
Tuning constants for Rocket Arcade.

All gameplay numbers live here so the game modules and the tests share one
source. Sessions accept overrides for the values tests need to pin down
(field size, policy, random source, clock).
"""

import os

# ---------- Runtime ----------
DEBUG = os.environ.get("ROCKET_ARCADE_DEBUG", "") not in ("", "0")

WINDOW_WIDTH = 800
WINDOW_HEIGHT = 600
FPS = 60
HUD_FONT_SIZE = 22

# ---------- Input keys ----------
KEY_LEFT = "LEFT"
KEY_RIGHT = "RIGHT"
KEY_UP = "UP"

# ---------- Collision policies ----------
POLICY_FREEZE = "freeze"
POLICY_IMMEDIATE = "immediate"
COLLISION_POLICIES = (POLICY_FREEZE, POLICY_IMMEDIATE)

# ---------- Asteroid Dodge ----------
ROCKET_WIDTH = 50
ROCKET_HEIGHT = 80
ROCKET_BOTTOM_MARGIN = 20  # gap between rocket and the bottom edge
ROCKET_MOVE_SPEED = 10

ASTEROID_TICK_MS = 16  # ~60 updates per second
ASTEROID_SPAWN_CHANCE = 0.03
ASTEROID_MIN_SIZE = 30
ASTEROID_SIZE_RANGE = 40  # sizes fall in [30, 70)
ASTEROID_MIN_SPEED = 4
ASTEROID_SPEED_RANGE = 3  # speeds fall in [4, 7)

EXPLOSION_SIZE = 100
EXPLOSION_MS = 1000
EXPLOSION_ANIM_MS = 500

ASTEROID_POLICY = POLICY_FREEZE

# ---------- Rock Flyer ----------
ROCK_FIELD_WIDTH = 800
ROCK_FIELD_HEIGHT = 600

FLYER_X = 100
FLYER_SIZE = 40
FLYER_START_Y = 250
FLYER_MAX_Y = 500
FLYER_MIN_SAFE_Y = 0
FLYER_MAX_SAFE_Y = 560

GRAVITY = 0.6
JUMP_VELOCITY = -10

ROCK_PHYSICS_MS = 20
ROCK_MOVE_MS = 20
ROCK_SPAWN_MS = 1800
ROCK_SPEED = 5
ROCK_WIDTH = 50
ROCK_REMOVE_X = -60  # rocks at or left of this x are dropped
ROCK_GAP = 150
ROCK_MIN_TOP = 50
ROCK_TOP_RANGE = 200  # top heights fall in [50, 250)
ROCK_CENTER_CHANCE = 0.5
ROCK_CENTER_TOP = 250
ROCK_CENTER_BOTTOM = 300
ROCK_EXIT_DELAY_MS = 1500

ROCK_POLICY = POLICY_IMMEDIATE
