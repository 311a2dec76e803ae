"""
Spotify Controls - a now-playing panel controller for a chat client.

The host client already holds a linked Spotify account.  This package
turns that into play/pause, next and previous buttons plus a now-playing
line, kept in sync with Spotify by polling.

  lib/      - service plumbing (config loader, ControlBase)
  spotify/  - credential resolution, Web API client, the controller
"""

__version__ = "1.0.0"
