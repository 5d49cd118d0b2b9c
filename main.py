"""
Entry point for Rocket Arcade.

Desktop runs the blocking loop in `rocket_app.main`; pygbag imports this file
in the browser and needs the asyncio entry point instead.
"""

import asyncio

import rocket_app
from env import is_browser


def main():
    """Run the desktop game loop."""
    rocket_app.main()


async def async_main():
    """Run the browser (pygbag) game loop."""
    await rocket_app.async_main()


if __name__ == "__main__":
    if is_browser:
        asyncio.run(async_main())
    else:
        main()
