# Spotify Controls
# Copyright (C) 2024-2026 Markus Kirsten
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Spotify playback controller.

Keeps a render surface in sync with Spotify's /me/player state and turns
button presses into playback commands:

  - fetch_state() once at start, then every POLL_INTERVAL seconds, and
    SETTLE_DELAY seconds after every successful command
  - dispatch(): IDLE → DISPATCHING → (SETTLING → IDLE); the surface is
    told to disable its buttons while a command is in flight

The poll tick and the post-command refresh are independent and may both
be in flight; whichever response lands last is what the surface shows.
"""

import asyncio
import logging

from ..lib.config import cfg
from ..lib.control_base import ControlBase
from .auth import AccountProvider, CredentialResolver
from .client import PlaybackClient
from .errors import TransientUiError
from .models import Command, CommandPhase, PlaybackSnapshot
from .render import NowPlayingView, RenderAdapter, StatusBoard

log = logging.getLogger('spotify-controls')

POLL_INTERVAL = 5      # seconds between now-playing polls
SETTLE_DELAY = 0.35    # seconds between a command and the re-read


def _seconds(value, default, allow_zero=False):
    """A usable delay in seconds, else ``default``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if value < 0 or (value == 0 and not allow_zero):
        return default
    return value


class SpotifyControls(ControlBase):
    """Now-playing panel controller for a linked Spotify account."""

    id = "spotify"
    name = "Spotify"
    action_map = {
        "prev": "prev",
        "left": "prev",
        "next": "next",
        "right": "next",
        "toggle": "toggle",
        "play": "toggle",
        "pause": "toggle",
        "go": "toggle",
    }

    def __init__(self, provider: AccountProvider | None = None,
                 render: RenderAdapter | None = None, *,
                 client: PlaybackClient | None = None, session=None,
                 port: int | None = None, poll_interval: float | None = None,
                 settle_delay: float | None = None):
        super().__init__(session)
        if provider is None and client is None:
            raise ValueError("SpotifyControls needs an account provider or a client")
        self.resolver = CredentialResolver(provider) if provider is not None else None
        self.client = client
        self.render = render if render is not None else StatusBoard()
        self.port = port if port is not None else cfg("controls", "port", default=0)
        if poll_interval is None:
            poll_interval = cfg("spotify", "poll_interval")
        if settle_delay is None:
            settle_delay = cfg("spotify", "settle_delay")
        self.poll_interval = _seconds(poll_interval, POLL_INTERVAL)
        self.settle_delay = _seconds(settle_delay, SETTLE_DELAY, allow_zero=True)
        self.snapshot = PlaybackSnapshot.empty()
        self.phase = CommandPhase.IDLE
        self._poll_task = None
        self._settle_tasks: set[asyncio.Task] = set()

    @property
    def busy(self) -> bool:
        return self.phase is CommandPhase.DISPATCHING

    # -- ControlBase hooks --

    async def on_start(self):
        if self.client is None:
            self.client = PlaybackClient(self._http_session, self.resolver)
        log.info("Spotify controls starting (poll every %ss, settle %ss)",
                 self.poll_interval, self.settle_delay)
        await self.fetch_state()
        self._start_polling()

    async def on_stop(self):
        self._stop_polling()
        pending = list(self._settle_tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        log.info("Spotify controls stopped")

    async def handle_status(self) -> dict:
        # A StatusBoard reports what the surface was last told to show.
        if isinstance(self.render, StatusBoard):
            status = self.render.to_dict()
        else:
            status = {
                'snapshot': self.snapshot.to_dict(),
                'view': NowPlayingView.from_snapshot(self.snapshot).to_dict(),
            }
        status.update(service=self.id, name=self.name,
                      phase=self.phase.value, busy=self.busy)
        return status

    async def handle_resync(self) -> dict:
        await self.on_surface_available()
        return {'status': 'ok', 'resynced': True}

    async def handle_command(self, cmd, data) -> dict:
        try:
            command = Command(cmd)
        except ValueError:
            return {'status': 'error', 'message': f'Unknown: {cmd}'}
        accepted = await self.dispatch(command)
        return {'accepted': accepted, 'phase': self.phase.value}

    # -- Render surface --

    def _render(self, method, *args):
        """Call a render adapter method; a broken surface never stops the loop."""
        try:
            getattr(self.render, method)(*args)
        except Exception as e:
            log.warning("Render %s failed: %s", method, e)

    async def on_surface_available(self):
        """The panel was (re)mounted - push the latest state into it."""
        log.debug("Surface available, re-sending snapshot")
        self._render('update_display', self.snapshot)
        self._render('set_busy', self.busy)

    # -- State reconciliation --

    async def fetch_state(self) -> PlaybackSnapshot:
        """Read current playback and hand it to the surface. Never raises."""
        try:
            state = await self.client.current_playback()
            snapshot = PlaybackSnapshot.from_state(state)
        except Exception as e:
            log.debug("Playback state unavailable: %s", e)
            snapshot = PlaybackSnapshot.empty()
        self.snapshot = snapshot
        self._render('update_display', snapshot)
        return snapshot

    def _start_polling(self):
        if self._poll_task and not self._poll_task.done():
            return
        self._poll_task = asyncio.create_task(self._poll_loop())

    def _stop_polling(self):
        if self._poll_task:
            self._poll_task.cancel()
            self._poll_task = None

    async def _poll_loop(self):
        """Re-read playback on a fixed period to catch changes made elsewhere."""
        try:
            while True:
                await asyncio.sleep(self.poll_interval)
                await self.fetch_state()
        except asyncio.CancelledError:
            return

    def _schedule_refresh(self):
        task = asyncio.create_task(self._settle_then_refresh())
        self._settle_tasks.add(task)
        task.add_done_callback(self._settle_tasks.discard)

    async def _settle_then_refresh(self):
        try:
            await asyncio.sleep(self.settle_delay)
            await self.fetch_state()
        finally:
            # Only the last pending refresh closes the SETTLING phase
            if self.phase is CommandPhase.SETTLING and len(self._settle_tasks) <= 1:
                self.phase = CommandPhase.IDLE

    # -- Command dispatch --

    async def dispatch(self, command: Command) -> bool:
        """Run one playback command. Returns True if it was issued successfully."""
        if self.busy:
            log.info("Ignoring %s - previous command still in flight", command.value)
            return False

        self.phase = CommandPhase.DISPATCHING
        self._render('set_busy', True)
        try:
            await self._execute(command)
        except Exception as e:
            log.warning("Command %s failed: %s", command.value, e)
            self.phase = CommandPhase.IDLE
            self._render('show_notice', TransientUiError().message)
            return False
        finally:
            self._render('set_busy', False)

        self.phase = CommandPhase.SETTLING
        self._schedule_refresh()
        return True

    async def _execute(self, command: Command):
        log.info("Command: %s", command.value)
        if command is Command.PREVIOUS:
            await self.client.previous()
        elif command is Command.NEXT:
            await self.client.next()
        elif command is Command.TOGGLE:
            await self._toggle()

    async def _toggle(self):
        # No atomic toggle in the Web API: read, then write the opposite.
        # Playback changed elsewhere between the two calls is not detected.
        state = await self.client.current_playback()
        if state.get('is_playing'):
            await self.client.pause()
        else:
            await self.client.play()
