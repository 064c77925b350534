"""
Minimal HTTP liveness endpoint for hosting platforms.
"""

import logging
from typing import Optional

from aiohttp import web

logger = logging.getLogger(__name__)

HEALTH_RESPONSE = "Bot is running"


async def handle_health(request: web.Request) -> web.Response:
    """Answer any request with a static confirmation."""
    return web.Response(text=HEALTH_RESPONSE)


def create_health_app() -> web.Application:
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", handle_health)
    return app


class HealthServer:
    """Runs the health endpoint on the bot's event loop."""

    def __init__(self, port: int, host: str = "0.0.0.0"):
        self.host = host
        self.port = port
        self._runner: Optional[web.AppRunner] = None

    async def start(self) -> None:
        self._runner = web.AppRunner(create_health_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info(f"Health endpoint listening on {self.host}:{self.port}")

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
