"""
Value types shared by the resolver, the command client and the controller.

Everything here is immutable: a new snapshot replaces the previous one
whole, it is never patched in place.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Credential:
    """Bearer token plus the device commands should target (if known)."""
    access_token: str
    device_id: str | None = None


@dataclass(frozen=True)
class Track:
    name: str
    artist_names: tuple[str, ...] = ()
    cover_url: str | None = None

    @classmethod
    def from_item(cls, item: dict) -> "Track":
        """Build a Track from the ``item`` object of a /me/player response."""
        artists = tuple(a.get("name") for a in item.get("artists") or []
                        if isinstance(a, dict) and a.get("name"))
        images = (item.get("album") or {}).get("images") or []
        cover_url = images[0].get("url") if images and isinstance(images[0], dict) else None
        return cls(name=item.get("name") or "", artist_names=artists,
                   cover_url=cover_url or None)


@dataclass(frozen=True)
class PlaybackSnapshot:
    track: Track | None = None
    is_playing: bool = False

    @classmethod
    def empty(cls) -> "PlaybackSnapshot":
        """The neutral "no track" snapshot."""
        return cls(track=None, is_playing=False)

    @classmethod
    def from_state(cls, state: dict) -> "PlaybackSnapshot":
        """Build a snapshot from a GET /me/player body ({} when idle)."""
        if not isinstance(state, dict):
            return cls.empty()
        item = state.get("item")
        track = Track.from_item(item) if isinstance(item, dict) and item else None
        return cls(track=track, is_playing=bool(state.get("is_playing")))

    def to_dict(self) -> dict:
        if self.track is None:
            return {"track": None, "is_playing": self.is_playing}
        return {
            "track": {
                "name": self.track.name,
                "artist_names": list(self.track.artist_names),
                "cover_url": self.track.cover_url,
            },
            "is_playing": self.is_playing,
        }


class Command(Enum):
    PREVIOUS = "prev"
    NEXT = "next"
    TOGGLE = "toggle"


class CommandPhase(Enum):
    IDLE = "idle"
    DISPATCHING = "dispatching"
    SETTLING = "settling"


# -- Account/session provider values --

@dataclass(frozen=True)
class Account:
    id: str
    type: str
    name: str | None = None


@dataclass(frozen=True)
class Session:
    access_token: str | None = None


@dataclass(frozen=True)
class Device:
    id: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class SessionDevice:
    """The active playback session and its device, as the host knows them."""
    session: Session | None = None
    device: Device | None = None
