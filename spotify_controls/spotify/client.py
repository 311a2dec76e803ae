"""
Spotify Web API playback client (/v1/me/player).

  GET  ""          - current playback ({item, is_playing}, 204 when idle)
  POST /previous   - previous track
  POST /next       - next track
  PUT  /pause      - pause
  PUT  /play       - resume

Every call resolves credentials first; the active device id, when known,
is attached as ?device_id= so commands land on the right output.
Transport failures are not retried here - the caller decides.
"""

import asyncio
import json
import logging

import aiohttp
from yarl import URL

from ..lib.config import cfg
from .auth import CredentialResolver
from .errors import ApiError

log = logging.getLogger('spotify-controls')

API_BASE = "https://api.spotify.com/v1/me/player"
REQUEST_TIMEOUT = 10  # seconds


class PlaybackClient:
    """Thin request layer over the remote playback-control resource."""

    def __init__(self, session: aiohttp.ClientSession, resolver: CredentialResolver,
                 base_url: str | None = None, timeout: float | None = None):
        self._session = session
        self.resolver = resolver
        self.base_url = base_url or cfg("spotify", "api_base", default=API_BASE)
        self.timeout = timeout or cfg("spotify", "request_timeout", default=REQUEST_TIMEOUT)

    def build_url(self, operation: str, device_id: str | None = None) -> URL:
        """Append *operation* to the base resource and scope it to a device."""
        url = URL(f"{self.base_url}{operation}")
        if device_id and "device_id" not in url.query:
            url = url.update_query(device_id=device_id)
        return url

    async def request(self, operation: str = "", method: str = "GET", body=None) -> dict:
        """Issue one request and return the decoded JSON object.

        204 and undecodable bodies both come back as ``{}``.  Raises
        AuthError (before any network I/O) when no token can be resolved,
        ApiError when the request itself could not be sent.
        """
        credential = await self.resolver.resolve()
        url = self.build_url(operation, credential.device_id)
        headers = {
            "Authorization": f"Bearer {credential.access_token}",
            "Content-Type": "application/json",
        }
        data = json.dumps(body) if body is not None else None

        try:
            async with self._session.request(
                method, url, headers=headers, data=data,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                status = resp.status
                if status == 204:
                    return {}
                raw = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.warning("Spotify %s %s failed: %s", method, operation or "/", e)
            raise ApiError("request failed") from e

        try:
            result = json.loads(raw)
        except ValueError:
            log.debug("Spotify %s %s: undecodable body (HTTP %d)", method, operation or "/", status)
            return {}
        if not isinstance(result, dict):
            return {}
        if status >= 400:
            error = result.get("error")
            message = error.get("message") if isinstance(error, dict) else error
            log.warning("Spotify %s %s returned HTTP %d: %s",
                        method, operation or "/", status, message)
        return result

    # -- Playback operations --

    async def current_playback(self) -> dict:
        return await self.request("", "GET")

    async def previous(self) -> dict:
        return await self.request("/previous", "POST")

    async def next(self) -> dict:
        return await self.request("/next", "POST")

    async def pause(self) -> dict:
        return await self.request("/pause", "PUT")

    async def play(self) -> dict:
        return await self.request("/play", "PUT")
