"""
Render side of the controller.

The visual surface (a panel inside the chat client) lives outside this
package.  It implements RenderAdapter and receives three kinds of calls:
a new snapshot, the busy flag that disables the buttons, and a short
notice when a command failed.

NowPlayingView turns a snapshot into the text the panel shows, and
StatusBoard is an in-process adapter that keeps the latest of each so
the HTTP surface can serve it on GET /status.
"""

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass

from .models import PlaybackSnapshot

NO_TRACK_TITLE = "No Spotify playing"
NO_TRACK_SUBTITLE = "Start a song on any device"
UNKNOWN_TITLE = "Unknown title"
UNKNOWN_ARTIST = "Unknown artist"
ICON_PAUSE = "⏸"
ICON_PLAY = "▶️"

MAX_NOTICES = 10


class RenderAdapter(ABC):
    """Interface every visual surface must implement."""

    @abstractmethod
    def update_display(self, snapshot: PlaybackSnapshot) -> None: ...

    @abstractmethod
    def set_busy(self, busy: bool) -> None: ...

    # -- Optional: override in surfaces that can show a toast --

    def show_notice(self, message: str) -> None:
        pass  # no-op by default (surface has no notice area)


@dataclass(frozen=True)
class NowPlayingView:
    title: str
    subtitle: str
    cover_url: str | None
    toggle_icon: str
    has_track: bool

    @classmethod
    def from_snapshot(cls, snapshot: PlaybackSnapshot) -> "NowPlayingView":
        track = snapshot.track
        if track is None:
            return cls(title=NO_TRACK_TITLE, subtitle=NO_TRACK_SUBTITLE,
                       cover_url=None, toggle_icon=ICON_PLAY, has_track=False)
        return cls(
            title=track.name or UNKNOWN_TITLE,
            subtitle=", ".join(track.artist_names) or UNKNOWN_ARTIST,
            cover_url=track.cover_url,
            toggle_icon=ICON_PAUSE if snapshot.is_playing else ICON_PLAY,
            has_track=True,
        )

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "cover_url": self.cover_url,
            "toggle_icon": self.toggle_icon,
            "has_track": self.has_track,
        }


class StatusBoard(RenderAdapter):
    """Keeps the latest render instructions in memory."""

    def __init__(self, max_notices=MAX_NOTICES):
        self.snapshot = PlaybackSnapshot.empty()
        self.view = NowPlayingView.from_snapshot(self.snapshot)
        self.busy = False
        self.notices: deque[str] = deque(maxlen=max_notices)

    def update_display(self, snapshot: PlaybackSnapshot) -> None:
        self.snapshot = snapshot
        self.view = NowPlayingView.from_snapshot(snapshot)

    def set_busy(self, busy: bool) -> None:
        self.busy = busy

    def show_notice(self, message: str) -> None:
        self.notices.append(message)

    def to_dict(self) -> dict:
        return {
            "view": self.view.to_dict(),
            "snapshot": self.snapshot.to_dict(),
            "busy": self.busy,
            "notices": list(self.notices),
        }
