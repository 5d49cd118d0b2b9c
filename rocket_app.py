"""
This file contains the application shell for Rocket Arcade: the PyGame display,
keyboard bridge, renderers, start and game-over screens, and the desktop and
browser (pygbag) entry points. Game rules live in `asteroid_dodge` and
`rock_flyer`; this module only feeds them input and draws their snapshots.
"""

import asyncio
import math
import traceback

import settings
from asteroid_dodge import AsteroidDodgeGame
from env import get_platform_name, is_browser, require_desktop
from game_utils import IDLE, log, ticks_diff, ticks_ms
from rock_flyer import RockFlyerGame

try:
    import pygame
except ImportError:  # checked again, with a helpful message, in _PyGameDisplay.start()
    pygame = None


def _boot_log(tag):
    """
    Log a boot-time message. Visible in the browser (pygbag) console and
    desktop logs; useful for startup diagnostics.
    """
    print("BOOT:", tag)


class QuitGame(Exception):
    """
    Raised by the keyboard bridge when the player closes the window or
    presses Escape. Unwinds the current screen back to the start screen.
    """

    pass


# ---------- Colors ----------
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
RED = (255, 0, 0)
GREEN = (76, 175, 80)
GREY = (111, 111, 111)
ROCK_BROWN = (120, 85, 60)
SKY = (20, 24, 48)
ASTEROID_GREY = (90, 90, 90)
ASTEROID_LIGHT = (130, 130, 130)
EXPLOSION_COLORS = ((255, 200, 0), (255, 120, 0), (255, 0, 0))

# Extra key names used by the menus only.
KEY_DOWN = "DOWN"
KEY_ENTER = "ENTER"


# ---------- Display ----------
class _PyGameDisplay:
    def __init__(self, w, h):
        """
        Initialize the PyGame-backed display.

        Args:
            w (int): Window width in pixels.
            h (int): Window height in pixels.
        """
        self.w = int(w)
        self.h = int(h)
        self._pg = None
        self._screen = None
        self._fonts = {}
        self._inited = False

    def start(self):
        """
        Initialize PyGame and open the window.

        This method is idempotent and will do nothing if initialization
        has already been performed.
        """
        if self._inited:
            return
        if pygame is None:
            raise RuntimeError("PyGame not installed. Install with: pip install pygame")
        self._pg = pygame
        pygame.init()
        # No audio in these games; in the browser the mixer can block on a
        # missing user gesture.
        if is_browser and hasattr(pygame, "mixer"):
            pygame.mixer.quit()
        pygame.display.set_caption("Rocket Arcade")
        self._screen = pygame.display.set_mode((self.w, self.h), pygame.RESIZABLE)
        self._inited = True
        self.clear()
        self.show()

    def resize(self, w, h):
        """Follow a window resize; the surface is reopened at the new size."""
        self.w = int(w)
        self.h = int(h)
        if self._inited:
            self._screen = self._pg.display.set_mode((self.w, self.h), self._pg.RESIZABLE)

    def font(self, size):
        f = self._fonts.get(size)
        if f is None:
            f = self._pg.font.Font(None, size)
            self._fonts[size] = f
        return f

    def clear(self, color=BLACK):
        if self._screen:
            self._screen.fill(color)

    def fill_rect(self, x, y, w, h, color):
        if self._screen and w > 0 and h > 0:
            self._pg.draw.rect(self._screen, color, (int(x), int(y), int(w), int(h)))

    def fill_circle(self, cx, cy, r, color):
        if self._screen and r > 0:
            self._pg.draw.circle(self._screen, color, (int(cx), int(cy)), int(r))

    def draw_text(self, x, y, text, color, size=settings.HUD_FONT_SIZE, center=False):
        """Draw `text` with its top-left (or center, if `center`) at (x, y)."""
        if not self._screen:
            return
        surf = self.font(size).render(str(text), True, color)
        rect = surf.get_rect()
        if center:
            rect.center = (int(x), int(y))
        else:
            rect.topleft = (int(x), int(y))
        self._screen.blit(surf, rect)

    def show(self):
        """Present the frame."""
        if self._pg and self._screen:
            self._pg.display.flip()


# ---------- Keyboard ----------
class KeyboardInput:
    """
    Translate PyGame keyboard events into the key names the games use.

    Held keys are reported as ("down", key) / ("up", key) pairs, so games
    keep their own held-key state. Escape and the window close button raise
    `QuitGame`.
    """

    def __init__(self):
        self.keymap = {
            pygame.K_LEFT: settings.KEY_LEFT,
            pygame.K_RIGHT: settings.KEY_RIGHT,
            pygame.K_UP: settings.KEY_UP,
            pygame.K_DOWN: KEY_DOWN,
            pygame.K_RETURN: KEY_ENTER,
            pygame.K_SPACE: KEY_ENTER,
            pygame.K_z: KEY_ENTER,
        }

    def translate(self, event):
        """
        Return ("down"|"up", key) for a known key event, ("resize", (w, h))
        for a window resize, else None.
        """
        if event.type == pygame.QUIT:
            raise QuitGame()
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            raise QuitGame()
        if event.type == pygame.VIDEORESIZE:
            return ("resize", (event.w, event.h))
        if event.type not in (pygame.KEYDOWN, pygame.KEYUP):
            return None
        key = self.keymap.get(event.key)
        if key is None:
            return None
        return ("down" if event.type == pygame.KEYDOWN else "up", key)

    def poll(self):
        """Drain the PyGame event queue and return translated key events."""
        out = []
        for event in pygame.event.get():
            t = self.translate(event)
            if t is not None:
                out.append(t)
        return out


def dispatch(session, events):
    """Forward translated key events to a game session."""
    for kind, key in events:
        if kind == "down":
            session.key_down(key)
        elif kind == "up":
            session.key_up(key)


# ---------- Renderers ----------
def render_asteroid_dodge(display, snap, now):
    """Draw an Asteroid Dodge snapshot. `now` drives the explosion animation."""
    display.clear(BLACK)

    if not snap.over:
        p = snap.player
        display.fill_rect(p.x, p.y + p.h * 0.2, p.w, p.h * 0.8, WHITE)
        display.fill_rect(p.x + p.w * 0.3, p.y, p.w * 0.4, p.h * 0.2, RED)
        display.fill_rect(p.x + p.w * 0.35, p.y + p.h * 0.35, p.w * 0.3, p.h * 0.15, SKY)

    for a in snap.obstacles:
        r = a.size / 2
        cx = a.x + r
        cy = a.y + r
        display.fill_circle(cx, cy, r, ASTEROID_GREY)
        # highlight offset by the asteroid's rotation
        ang = math.radians(a.rotation)
        display.fill_circle(cx + math.cos(ang) * r * 0.3, cy + math.sin(ang) * r * 0.3, r * 0.35, ASTEROID_LIGHT)

    ex = snap.explosion
    if ex is not None:
        # grows from 0.5x to 2x over the animation, then stays hidden until cleared
        t = ticks_diff(now, ex.started_ms) / settings.EXPLOSION_ANIM_MS
        if 0 <= t < 1:
            scale = 0.5 + 1.5 * t
            r = ex.size / 2 * scale
            cx = ex.x + ex.size / 2
            cy = ex.y + ex.size / 2
            for i, col in enumerate(EXPLOSION_COLORS):
                display.fill_circle(cx, cy, r * (0.8 - 0.2 * i), col)

    display.draw_text(10, 10, "Score: %d" % snap.score, WHITE)


def render_rock_flyer(display, snap, now):
    """Draw a Rock Flyer snapshot."""
    display.clear(SKY)
    w = settings.ROCK_WIDTH
    for r in snap.obstacles:
        display.fill_rect(r.x, 0, w, r.top_h, ROCK_BROWN)
        display.fill_rect(r.x, snap.field_h - r.bottom_h, w, r.bottom_h, ROCK_BROWN)
        if r.center:
            display.fill_rect(
                r.x,
                settings.ROCK_CENTER_TOP,
                w,
                settings.ROCK_CENTER_BOTTOM - settings.ROCK_CENTER_TOP,
                ROCK_BROWN,
            )

    p = snap.player
    display.fill_rect(p.x, p.y, p.w, p.h, WHITE)
    display.fill_rect(p.x + p.w * 0.75, p.y + p.h * 0.3, p.w * 0.25, p.h * 0.4, RED)

    display.draw_text(10, 10, "Score: %d" % snap.score, WHITE)


RENDERERS = {
    AsteroidDodgeGame: render_asteroid_dodge,
    RockFlyerGame: render_rock_flyer,
}


# ---------- Screens ----------
class GameOverMenu:
    """Overlay shown after losing; choose retry or quit back to the start screen."""

    RETRY = "RETRY"
    QUIT = "QUIT"

    def __init__(self):
        self.opts = [self.RETRY, self.QUIT]
        self.idx = 0

    def handle(self, events):
        """Move the selection with Up/Down; return the chosen option on Enter."""
        for kind, key in events:
            if kind != "down":
                continue
            if key == settings.KEY_UP and self.idx > 0:
                self.idx -= 1
            elif key == KEY_DOWN and self.idx < len(self.opts) - 1:
                self.idx += 1
            elif key == KEY_ENTER:
                return self.opts[self.idx]
        return None

    def draw(self, display, score):
        cx = display.w // 2
        cy = display.h // 2
        display.fill_rect(cx - 150, cy - 100, 300, 200, (0, 0, 0))
        display.draw_text(cx, cy - 60, "Game Over", WHITE, size=48, center=True)
        display.draw_text(cx, cy - 20, "Your Score: %d" % score, WHITE, center=True)
        for i, o in enumerate(self.opts):
            col = (GREEN if o == self.RETRY else RED) if i == self.idx else GREY
            display.draw_text(cx, cy + 25 + i * 32, o, col, size=32, center=True)


class StartScreen:
    """Title screen: pick a game with Up/Down, start it with Enter."""

    def __init__(self, display, keyboard, games):
        self.display = display
        self.keyboard = keyboard
        self.games = games
        self.selected = 0

    def handle(self, events):
        for kind, key in events:
            if kind == "resize":
                self.display.resize(*key)
                continue
            if kind != "down":
                continue
            if key == settings.KEY_UP and self.selected > 0:
                self.selected -= 1
            elif key == KEY_DOWN and self.selected < len(self.games) - 1:
                self.selected += 1
            elif key == KEY_ENTER:
                return self.games[self.selected]
        return None

    def draw(self):
        d = self.display
        d.clear(BLACK)
        d.draw_text(d.w // 2, d.h // 3, "Rocket Arcade", WHITE, size=64, center=True)
        for i, name in enumerate(self.games):
            col = WHITE if i == self.selected else GREY
            d.draw_text(d.w // 2, d.h // 2 + i * 40, name, col, size=36, center=True)
        d.draw_text(d.w // 2, d.h - 40, "Enter: start   Esc: quit", GREY, center=True)
        d.show()

    def run(self, clock):
        while True:
            choice = self.handle(self.keyboard.poll())
            if choice is not None:
                return choice
            self.draw()
            clock.tick(30)

    async def run_async(self):
        while True:
            choice = self.handle(self.keyboard.poll())
            if choice is not None:
                return choice
            self.draw()
            await asyncio.sleep(1 / 30)


# ---------- Application ----------
class RocketArcade:
    """Owns the window and keyboard, and runs one game session at a time."""

    GAMES = {
        "ASTEROID DODGE": AsteroidDodgeGame,
        "ROCK FLYER": RockFlyerGame,
    }

    def __init__(self, display=None, keyboard=None):
        self.display = display or _PyGameDisplay(settings.WINDOW_WIDTH, settings.WINDOW_HEIGHT)
        self.keyboard = keyboard
        self.session = None
        self.menu = None

    def start(self):
        self.display.start()
        if self.keyboard is None:
            self.keyboard = KeyboardInput()
        _boot_log("display started on " + get_platform_name())

    def on_game_over(self):
        """Called by a session's `quit()`: hand control back to the start screen."""
        self.session = None

    def make_session(self, name):
        """Create the session for the game called `name`."""
        cls = self.GAMES[name]
        if cls is RockFlyerGame:
            return RockFlyerGame(auto_exit=True, on_game_over=self.on_game_over)
        return AsteroidDodgeGame(
            width=self.display.w,
            height=self.display.h,
            on_game_over=self.on_game_over,
        )

    def resize(self, w, h):
        """Resize the window and, if it can follow, the running game's field."""
        self.display.resize(w, h)
        session = self.session
        if session is not None and hasattr(session, "resize"):
            try:
                session.resize(w, h)
            except ValueError as e:
                log("resize", "kept field: %s" % e)

    def frame(self, events):
        """
        Run one frame of the active session: input, scheduled work, drawing.

        Returns:
            bool: False once the session has handed control back.
        """
        session = self.session
        for kind, size in events:
            if kind == "resize":
                self.resize(*size)

        if session.over:
            choice = self.menu.handle(events)
            if choice == GameOverMenu.RETRY:
                self.menu = GameOverMenu()
                session.retry()
            elif choice == GameOverMenu.QUIT:
                session.quit()
                return False
        else:
            dispatch(session, events)

        session.scheduler.pump()
        if self.session is None or session.state == IDLE:
            return False

        snap = session.snapshot()
        RENDERERS[type(session)](self.display, snap, session.scheduler.now())
        if snap.over:
            self.menu.draw(self.display, snap.score)
        self.display.show()
        return True

    def begin(self, name):
        self.session = self.make_session(name)
        self.menu = GameOverMenu()
        self.session.start()

    def end(self):
        """Tear down the session so no timer outlives the screen."""
        if self.session is not None:
            self.session.stop()
        self.session = None

    def play(self, name, clock):
        """Blocking game loop for the desktop."""
        self.begin(name)
        try:
            while self.frame(self.keyboard.poll()):
                clock.tick(settings.FPS)
        finally:
            self.end()

    async def play_async(self, name):
        """Cooperative game loop for pygbag; yields to the browser every frame."""
        self.begin(name)
        try:
            while self.frame(self.keyboard.poll()):
                await asyncio.sleep(0)
        finally:
            self.end()


def _show_error(display):
    display.clear(BLACK)
    display.draw_text(display.w // 2, display.h // 2, "ERR", RED, size=64, center=True)
    display.show()


# ---------- Main ----------
def main():
    """
    Desktop entry point.

    Opens the window and alternates between the start screen and the chosen
    game. Escape in a game returns to the start screen; Escape on the start
    screen exits. Unexpected exceptions are printed, an error marker is
    shown, and the start screen comes back.
    """
    require_desktop()
    app = RocketArcade()
    app.start()
    clock = pygame.time.Clock()
    start_screen = StartScreen(app.display, app.keyboard, list(app.GAMES))

    while True:
        try:
            name = start_screen.run(clock)
        except QuitGame:
            break
        try:
            app.play(name, clock)
        except QuitGame:
            continue
        except Exception as e:
            print("Error:", e)
            traceback.print_exc()
            _show_error(app.display)
            pygame.time.wait(800)
    pygame.quit()


async def async_main():
    """Async entry point for pygbag/web: same flow as `main`, yielding every frame."""
    app = RocketArcade()
    app.start()
    start_screen = StartScreen(app.display, app.keyboard, list(app.GAMES))

    while True:
        try:
            name = await start_screen.run_async()
        except QuitGame:
            # closing the tab is the only way out in the browser
            await asyncio.sleep(0)
            continue
        try:
            await app.play_async(name)
        except QuitGame:
            pass
        except Exception as e:
            print("Error during game:", e)
            traceback.print_exc()
            _show_error(app.display)
            last_err = ticks_ms()
            while ticks_diff(ticks_ms(), last_err) < 800:
                await asyncio.sleep(0.05)
        await asyncio.sleep(0)


if __name__ == "__main__":
    if is_browser:
        asyncio.run(async_main())
    else:
        main()
