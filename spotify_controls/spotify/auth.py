"""
Credential resolution - the ONE place access tokens come from.

The host chat client already holds a linked Spotify account.  It is
reached through an AccountProvider injected at construction time:

  - session token first (embedded in the active playback session)
  - else an explicit token fetch for the linked account

The resolver caches nothing: every command and every poll asks the
provider again, because the host rotates tokens behind our back.  Token
lifetime is the provider's business.
"""

import logging
from abc import ABC, abstractmethod

from .errors import AuthError
from .models import Account, Credential, SessionDevice

log = logging.getLogger('spotify-controls')

SPOTIFY_ACCOUNT_TYPE = "spotify"


class AccountProvider(ABC):
    """What the host client must expose for us to find a token and device."""

    @abstractmethod
    def get_active_session_and_device(self) -> SessionDevice | None: ...

    @abstractmethod
    def get_accounts(self) -> list[Account]: ...

    @abstractmethod
    def get_account(self, account_id: str) -> Account | None: ...

    @abstractmethod
    async def get_access_token(self, account_id: str) -> str | None: ...


class CredentialResolver:
    """Turns the provider's session/account view into a Credential."""

    def __init__(self, provider: AccountProvider):
        self.provider = provider

    def linked_account(self) -> Account | None:
        """First connected account whose type marks it as Spotify."""
        for account in self.provider.get_accounts() or []:
            if account.type == SPOTIFY_ACCOUNT_TYPE:
                return account
        return None

    async def resolve(self) -> Credential:
        session_device = self.provider.get_active_session_and_device()
        session = session_device.session if session_device else None
        device = session_device.device if session_device else None
        device_id = device.id if device else None

        token = session.access_token if session else None
        if token:
            return Credential(access_token=token, device_id=device_id)

        account = self.linked_account()
        if account is None:
            raise AuthError("not linked")

        try:
            token = await self.provider.get_access_token(account.id)
        except Exception as e:
            log.warning("Token fetch for account %s failed: %s", account.id, e)
            token = None
        if not token:
            raise AuthError("no token")
        return Credential(access_token=token, device_id=device_id)
