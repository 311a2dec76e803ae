"""
Shared configuration loader for Spotify Controls.

Loads a single JSON config file.  Search order:
  1. /etc/spotify-controls/config.json   (system install)
  2. config.json                         (CWD - handy for local dev)

Secrets (the PKCE refresh token) stay in environment variables and are
read by the entry point, never by the playback core.

Usage:
    from spotify_controls.lib.config import cfg

    poll_interval = cfg("spotify", "poll_interval", default=5)
    port          = cfg("controls", "port", default=0)
    spotify       = cfg("spotify")  # returns the whole dict
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

_config: dict | None = None

_SEARCH_PATHS = [
    "/etc/spotify-controls/config.json",
    "config.json",
]


def _section(config: dict, name: str, path: str) -> dict:
    section = config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        logger.warning("Config %s: %s must be an object, got %r", path, name, section)
        return {}
    return section


def _validate(config: dict, path: str) -> None:
    """Warn about missing or suspicious config values."""
    spotify = _section(config, "spotify", path)
    for key in ("poll_interval", "settle_delay", "request_timeout"):
        val = spotify.get(key)
        if val is None:
            continue
        if isinstance(val, bool) or not isinstance(val, (int, float)) or val <= 0:
            logger.warning("Config %s: spotify.%s must be a positive number, got %r",
                           path, key, val)
    if not spotify.get("client_id"):
        logger.info("Config %s: no spotify.client_id - token refresh unavailable", path)
    port = _section(config, "controls", path).get("port", 0)
    if isinstance(port, bool) or not isinstance(port, int) or port < 0:
        logger.warning("Config %s: controls.port must be a non-negative int, got %r",
                       path, port)


def _read(path: Path) -> dict | None:
    """Parse one candidate file; None when it is absent or unusable."""
    try:
        text = path.read_text()
    except FileNotFoundError:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.error("Ignoring %s: top level must be an object, got %s",
                     path, type(data).__name__)
        return None
    return data


def load_config() -> dict:
    """The first usable file on _SEARCH_PATHS, parsed once and then cached."""
    global _config
    if _config is None:
        found = ((p, _read(p)) for p in map(Path, _SEARCH_PATHS))
        path, data = next(((p, d) for p, d in found if d is not None), (None, None))
        if path is None:
            logger.info("No config file on %s - using defaults",
                        ", ".join(_SEARCH_PATHS))
            data = {}
        else:
            logger.info("Config loaded from %s", path)
            _validate(data, str(path))
        _config = data
    return _config


def cfg(section: str, key: str | None = None, *, default=None):
    """Look up a section, or one key inside it.

    A missing section, a missing key and a section that is not an
    object all give ``default``.
    """
    value = load_config().get(section)
    if key is not None:
        value = value.get(key) if isinstance(value, dict) else None
    return default if value is None else value


def reload_config() -> dict:
    """Drop the cached config and read the search paths again."""
    global _config
    _config = None
    return load_config()
