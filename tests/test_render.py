from spotify_controls.spotify.models import PlaybackSnapshot, Track
from spotify_controls.spotify.render import (
    ICON_PAUSE,
    ICON_PLAY,
    NO_TRACK_SUBTITLE,
    NO_TRACK_TITLE,
    UNKNOWN_ARTIST,
    UNKNOWN_TITLE,
    NowPlayingView,
    StatusBoard,
)


def test_no_track_placeholder():
    view = NowPlayingView.from_snapshot(PlaybackSnapshot.empty())

    assert view.title == NO_TRACK_TITLE
    assert view.subtitle == NO_TRACK_SUBTITLE
    assert view.cover_url is None
    assert view.has_track is False


def test_playing_track_shows_pause_affordance():
    track = Track(name="Song A", artist_names=("Artist X", "Artist Y"),
                  cover_url="https://i.scdn.co/image/abc")

    view = NowPlayingView.from_snapshot(PlaybackSnapshot(track=track, is_playing=True))

    assert view.title == "Song A"
    assert view.subtitle == "Artist X, Artist Y"
    assert view.cover_url == "https://i.scdn.co/image/abc"
    assert view.toggle_icon == ICON_PAUSE


def test_paused_track_shows_play_affordance():
    view = NowPlayingView.from_snapshot(
        PlaybackSnapshot(track=Track(name="Song A"), is_playing=False))

    assert view.toggle_icon == ICON_PLAY


def test_unknown_title_and_artist():
    view = NowPlayingView.from_snapshot(PlaybackSnapshot(track=Track(name=""), is_playing=True))

    assert view.title == UNKNOWN_TITLE
    assert view.subtitle == UNKNOWN_ARTIST


def test_status_board_keeps_recent_notices():
    board = StatusBoard(max_notices=2)
    for i in range(3):
        board.show_notice(f"failure {i}")

    assert list(board.notices) == ["failure 1", "failure 2"]


def test_status_board_to_dict():
    board = StatusBoard()
    board.update_display(PlaybackSnapshot(track=Track(name="Song A", artist_names=("X",)),
                                          is_playing=True))
    board.set_busy(True)

    data = board.to_dict()

    assert data["busy"] is True
    assert data["view"]["toggle_icon"] == ICON_PAUSE
    assert data["snapshot"] == {
        "track": {"name": "Song A", "artist_names": ["X"], "cover_url": None},
        "is_playing": True,
    }
    assert data["notices"] == []
