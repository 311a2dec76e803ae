#!/usr/bin/env python3
"""
Spotify Controls standalone service (spotify-controls)

Runs the controller outside a chat client: tokens come from a PKCE
refresh token (SPOTIFY_REFRESH_TOKEN env var, client_id from config) and
the panel state is served on GET /status.

Port: 8780 (controls.port in config.json)
"""

import asyncio
import logging
import os

import aiohttp

from .lib.config import cfg
from .spotify.providers import PkceAccountProvider
from .spotify.render import StatusBoard
from .spotify.service import SpotifyControls

logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(message)s')
log = logging.getLogger('spotify-controls')

PORT = 8780


async def main():
    async with aiohttp.ClientSession() as session:
        provider = PkceAccountProvider(
            session,
            client_id=cfg("spotify", "client_id", default=""),
            refresh_token=os.getenv("SPOTIFY_REFRESH_TOKEN", ""),
            account_id=cfg("spotify", "account_id", default="spotify"),
            device_id=cfg("spotify", "device_id"),
        )
        if not provider.is_configured:
            log.warning("No Spotify credentials - set spotify.client_id and "
                        "SPOTIFY_REFRESH_TOKEN; the panel will show no track")
        controls = SpotifyControls(
            provider, StatusBoard(), session=session,
            port=cfg("controls", "port", default=PORT),
        )
        await controls.run()


def run():
    asyncio.run(main())


if __name__ == '__main__':
    run()
