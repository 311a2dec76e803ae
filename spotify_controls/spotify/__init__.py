"""
Spotify - playback control for a linked account.

A render surface never talks to Spotify directly.  It implements
RenderAdapter and forwards button presses as Command values; the
controller does the rest:

  auth.py       - CredentialResolver over the host's AccountProvider
  client.py     - PlaybackClient for /v1/me/player
  service.py    - SpotifyControls: polling, toggle, busy flag
  render.py     - RenderAdapter, NowPlayingView, StatusBoard
  providers.py  - PkceAccountProvider for running standalone
"""

from .auth import AccountProvider, CredentialResolver
from .client import PlaybackClient
from .errors import ApiError, AuthError, SpotifyControlsError, TransientUiError
from .models import (
    Account,
    Command,
    CommandPhase,
    Credential,
    Device,
    PlaybackSnapshot,
    Session,
    SessionDevice,
    Track,
)
from .render import NowPlayingView, RenderAdapter, StatusBoard
from .service import SpotifyControls

__all__ = [
    "Account",
    "AccountProvider",
    "ApiError",
    "AuthError",
    "Command",
    "CommandPhase",
    "Credential",
    "CredentialResolver",
    "Device",
    "NowPlayingView",
    "PlaybackClient",
    "PlaybackSnapshot",
    "RenderAdapter",
    "Session",
    "SessionDevice",
    "SpotifyControls",
    "SpotifyControlsError",
    "StatusBoard",
    "Track",
    "TransientUiError",
]
