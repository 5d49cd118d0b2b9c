"""Platform detection and environment utilities for Rocket Arcade.

This module provides a centralized location for runtime platform detection,
isolating browser-specific (pygbag/WASM) concerns from the desktop runtime.

Platform Support
----------------
The games run in two environments:

1. **Desktop (CPython + PyGame)**:
   - Development and testing environment
   - Detected when not running in the browser
   - Blocking frame loop paced with ``pygame.time.Clock``

2. **Browser (Pygbag/Emscripten/WASM)**:
   - Web deployment via WebAssembly
   - Detected via ``sys.platform == "emscripten"``
   - Requires async/await so the page stays responsive between frames

Module Variables
----------------
is_browser : bool
    True when running in browser via pygbag (Emscripten/WASM).

is_desktop : bool
    True when running on desktop CPython with PyGame.

Example Usage
-------------
::

    from env import is_browser

    if is_browser:
        asyncio.run(async_main())
    else:
        main()

Notes
-----
- Detection happens once, at import time
- Browser detection uses ``sys.platform`` per pygbag documentation
"""

import sys

# Pygbag patches sys.platform to "emscripten"; the platform module is not
# reliable under WASM.
is_browser = sys.platform == "emscripten"

is_desktop = not is_browser


def get_platform_name():
    """Return a human-readable platform name.

    Returns
    -------
    str
        "browser" when running under pygbag, otherwise "desktop".
    """
    if is_browser:
        return "browser"
    return "desktop"


def require_browser():
    """Raise an error if not running in browser environment.

    Raises
    ------
    RuntimeError
        If not running under pygbag (sys.platform != "emscripten").
    """
    if not is_browser:
        raise RuntimeError(
            "This code requires browser environment (pygbag/Emscripten). "
            f"Current platform: {get_platform_name()}"
        )


def require_desktop():
    """Raise an error if not running in desktop environment.

    Raises
    ------
    RuntimeError
        If running in the browser.
    """
    if not is_desktop:
        raise RuntimeError(
            "This code requires desktop CPython environment. "
            f"Current platform: {get_platform_name()}"
        )
