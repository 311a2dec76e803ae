# Spotify Controls
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
ControlBase - shared plumbing for playback control services.

Owns the aiohttp ClientSession used for outgoing API calls and, when a
port is set, a small local HTTP surface the render side talks to:

    GET  /status    handle_status()
    POST /command   {"command": "next"} or {"action": "left"}
    GET  /resync    handle_resync()

Subclass contract:

    class MyControls(ControlBase):
        id   = "spotify"     # service ID
        name = "Spotify"     # display name
        port = 8780          # HTTP port (0 = no HTTP surface)
        action_map = {       # remote action → command name
            "play": "toggle",
            "left": "prev",
        }

        async def handle_command(self, cmd, data) -> dict:
            '''Your playback logic.  Return a dict merged into the response.'''

on_start(), on_stop(), handle_status() and handle_resync() may be
overridden as well.
"""

import asyncio
import logging
import signal

from aiohttp import web, ClientSession

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _reply(body=None, status=200):
    if body is None:
        return web.Response(status=status, headers=CORS_HEADERS)
    return web.json_response(body, status=status, headers=CORS_HEADERS)


class UnmappedAction(Exception):
    """A remote action with no entry in action_map."""


class ControlBase:
    id: str = ""
    name: str = ""
    port: int = 0
    action_map: dict = {}

    def __init__(self, session: ClientSession | None = None):
        # A session passed in is borrowed: stop() leaves it open.
        self._http_session: ClientSession | None = session
        self._owns_session = False
        self._runner: web.AppRunner | None = None

    # ── HTTP surface ──

    def build_app(self) -> web.Application:
        app = web.Application()
        app.add_routes([
            web.get("/status", self._status_route),
            web.get("/resync", self._resync_route),
            web.post("/command", self._command_route),
            web.options("/command", self._preflight_route),
        ])
        return app

    async def _preflight_route(self, request):
        return _reply()

    async def _status_route(self, request):
        return _reply(await self.handle_status())

    async def _resync_route(self, request):
        return _reply(await self.handle_resync())

    def command_for(self, data: dict) -> str:
        """Command name for a /command body; remote actions go through action_map."""
        action = data.get("action")
        if not action:
            return data.get("command", "")
        try:
            return self.action_map[action]
        except KeyError:
            raise UnmappedAction(f"Unmapped action: {action}") from None

    async def _command_route(self, request):
        try:
            data = await request.json()
            cmd = self.command_for(data)
            result = await self.handle_command(cmd, data)
        except UnmappedAction as e:
            return _reply({"status": "error", "message": str(e)}, status=400)
        except Exception as e:
            logger.exception("%s: /command failed", self.name or self.id)
            return _reply({"status": "error", "message": str(e)}, status=500)
        return _reply({"status": "ok", "command": cmd, **(result or {})})

    # ── Lifecycle ──

    async def start(self):
        """Open (or borrow) the HTTP session, bind the surface, then on_start()."""
        if self._http_session is None:
            self._http_session, self._owns_session = ClientSession(), True

        if self.port:
            runner = web.AppRunner(self.build_app())
            await runner.setup()
            await web.TCPSite(runner, "127.0.0.1", self.port).start()
            self._runner = runner
            logger.info("%s listening on 127.0.0.1:%d", self.name, self.port)

        await self.on_start()

    async def stop(self):
        await self.on_stop()
        runner, self._runner = self._runner, None
        if runner is not None:
            await runner.cleanup()
        if self._owns_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session, self._owns_session = None, False

    async def run(self):
        """start(), wait for SIGINT/SIGTERM, stop()."""
        await self.start()
        shutdown = asyncio.Event()
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(signal.SIGTERM, shutdown.set)
        loop.add_signal_handler(signal.SIGINT, shutdown.set)
        try:
            await shutdown.wait()
        finally:
            await self.stop()

    # ── Subclass hooks ──

    async def on_start(self):
        pass

    async def on_stop(self):
        pass

    async def handle_status(self) -> dict:
        return {"service": self.id, "name": self.name}

    async def handle_resync(self) -> dict:
        """Re-send current state. Called when the surface is (re)mounted."""
        return {"status": "ok", "resynced": False}

    async def handle_command(self, cmd: str, data: dict) -> dict:
        raise NotImplementedError
