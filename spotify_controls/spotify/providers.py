"""
Standalone account provider.

Inside a chat client the host supplies the AccountProvider.  Running on
its own, the controller needs a token source of its own:
PkceAccountProvider mints access tokens from a PKCE refresh token
(client_id in the body, no secret).  The access token is reused until
five minutes before it expires; rotated refresh tokens are kept in
memory only, nothing is written to disk.
"""

import asyncio
import logging
import time

import aiohttp

from .auth import SPOTIFY_ACCOUNT_TYPE, AccountProvider
from .models import Account, Device, SessionDevice

log = logging.getLogger('spotify-controls')

TOKEN_URL = "https://accounts.spotify.com/api/token"


class PkceAccountProvider(AccountProvider):
    """One linked account whose tokens come from the PKCE refresh grant."""

    def __init__(self, session: aiohttp.ClientSession, client_id, refresh_token,
                 account_id="spotify", device_id=None, token_url=TOKEN_URL,
                 timeout=10):
        self._session = session
        self._client_id = client_id
        self._refresh_token = refresh_token
        self._account = Account(id=account_id, type=SPOTIFY_ACCOUNT_TYPE)
        self.device_id = device_id
        self.token_url = token_url
        self.timeout = timeout
        self.revoked = False
        self._access_token = None
        self._token_expiry = 0

    @property
    def is_configured(self):
        return bool(self._client_id and self._refresh_token)

    def get_active_session_and_device(self) -> SessionDevice | None:
        # No host-side socket here, so never a session-embedded token.
        device = Device(id=self.device_id) if self.device_id else None
        return SessionDevice(session=None, device=device)

    def get_accounts(self) -> list[Account]:
        return [self._account] if self.is_configured else []

    def get_account(self, account_id: str) -> Account | None:
        if self.is_configured and account_id == self._account.id:
            return self._account
        return None

    async def get_access_token(self, account_id: str) -> str | None:
        """Return a valid access token, refreshing if needed.

        Raises aiohttp errors when the refresh grant fails.
        """
        if self.get_account(account_id) is None or self.revoked:
            return None
        if self._access_token and time.monotonic() < self._token_expiry:
            return self._access_token
        return await self._refresh()

    async def _refresh(self):
        body = {
            "grant_type": "refresh_token",
            "refresh_token": self._refresh_token,
            "client_id": self._client_id,
        }
        try:
            async with self._session.post(
                self.token_url, data=body,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                if resp.status == 400:
                    await self._check_revoked(resp)
                resp.raise_for_status()
                result = await resp.json(content_type=None)
        except asyncio.TimeoutError:
            log.warning("Token refresh timed out")
            raise

        expires_in = result.get('expires_in', 3600)
        self._access_token = result.get('access_token')
        self._token_expiry = time.monotonic() + expires_in - 300

        # Keep a rotated refresh token for the next refresh
        new_rt = result.get('refresh_token')
        if new_rt and new_rt != self._refresh_token:
            self._refresh_token = new_rt
            log.info("Refresh token rotated")

        log.debug("Access token refreshed (expires in %ds)", expires_in)
        return self._access_token

    async def _check_revoked(self, resp):
        """Flag that the refresh token has been revoked by Spotify."""
        try:
            body = await resp.json(content_type=None)
            error = body.get('error', '')
        except Exception:
            error = ''
        if error == 'invalid_grant':
            self.revoked = True
            log.error("Spotify refresh token revoked - re-authentication required")
        else:
            log.warning("Token refresh failed (400): %s", error)
