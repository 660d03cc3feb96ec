"""
Keep-alive HTTP server.

Hosting platforms that idle web services without traffic are kept awake by a
tiny aiohttp application plus an optional loop that pings the bot's own
public URL (``APP_URL``).

Routes:

- ``GET /``: plain text banner.
- ``GET /ping``: ``{"status": "ok", "timestamp": ...}``.
- ``GET /health``: ``ok`` when the Discord client is ready, ``degraded``
  otherwise. Always HTTP 200 so platform health checks do not restart the
  process while the gateway reconnects.
"""

from __future__ import annotations

import asyncio
import datetime
import time
from typing import Optional

import aiohttp
from aiohttp import web

from gatecord.util.discord_utils import gateway_latency_ms
from gatecord.util.logger import get_logger

logger = get_logger("keep_alive")


def _utc_now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


class KeepAliveServer:
    """Serves the keep-alive routes and optionally self-pings ``app_url``."""

    def __init__(
        self,
        bot,
        port: int = 8080,
        app_url: Optional[str] = None,
        interval_seconds: float = 120.0,
        timeout_seconds: float = 5.0,
        host: str = "0.0.0.0",
    ) -> None:
        self.bot = bot
        self.host = host
        self.port = port
        self.app_url = app_url.rstrip("/") if app_url else None
        self.interval_seconds = interval_seconds
        self.timeout_seconds = timeout_seconds
        self.started_at = time.monotonic()
        self._runner: Optional[web.AppRunner] = None
        self._ping_task: Optional[asyncio.Task] = None

    # --------------------------
    # Routes
    # --------------------------
    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/", self.handle_root)
        app.router.add_get("/ping", self.handle_ping)
        app.router.add_get("/health", self.handle_health)
        return app

    async def handle_root(self, request: web.Request) -> web.Response:
        return web.Response(text="Gatecord is running.")

    async def handle_ping(self, request: web.Request) -> web.Response:
        return web.json_response({"status": "ok", "timestamp": _utc_now_iso()})

    async def handle_health(self, request: web.Request) -> web.Response:
        ready = bool(self.bot is not None and self.bot.is_ready())
        return web.json_response(
            {
                "status": "ok" if ready else "degraded",
                "discord_ready": ready,
                "uptime_seconds": round(time.monotonic() - self.started_at, 1),
                "latency_ms": gateway_latency_ms(self.bot) if ready else None,
                "timestamp": _utc_now_iso(),
            }
        )

    # --------------------------
    # Lifecycle
    # --------------------------
    async def start(self) -> None:
        """Bind the HTTP server and start the self-ping loop when ``app_url`` is set."""
        self._runner = web.AppRunner(self.build_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info("[KEEP ALIVE] Server up on :%d (GET /, /ping, /health)", self.port)

        if self.app_url:
            self._ping_task = asyncio.create_task(self._self_ping_loop(), name="gatecord-keep-alive")
            logger.info("[KEEP ALIVE] Pinging %s/ping every %ss", self.app_url, self.interval_seconds)
        else:
            logger.info("[KEEP ALIVE] APP_URL not set; self-ping disabled")

    async def stop(self) -> None:
        if self._ping_task is not None:
            self._ping_task.cancel()
            try:
                await self._ping_task
            except asyncio.CancelledError:
                pass
            self._ping_task = None

        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("[KEEP ALIVE] Server stopped")

    async def ping_once(self, session: aiohttp.ClientSession) -> bool:
        """Request ``{app_url}/ping`` once. Returns True on a 2xx/3xx answer."""
        url = f"{self.app_url}/ping"
        try:
            async with session.get(url, timeout=aiohttp.ClientTimeout(total=self.timeout_seconds)) as resp:
                if resp.status < 400:
                    logger.debug("[KEEP ALIVE] Ping OK (%d)", resp.status)
                    return True
                logger.warning("[KEEP ALIVE] Ping returned HTTP %d", resp.status)
                return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.warning("[KEEP ALIVE] Ping to %s failed: %s", url, exc or type(exc).__name__)
            return False

    async def _self_ping_loop(self) -> None:
        async with aiohttp.ClientSession() as session:
            while True:
                await asyncio.sleep(self.interval_seconds)
                await self.ping_once(session)
