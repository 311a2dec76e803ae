"""Error taxonomy for the playback core."""


class SpotifyControlsError(Exception):
    """Base class for every error raised by the playback core."""


class ApiError(SpotifyControlsError):
    """A request to the remote playback API could not be completed."""


class AuthError(ApiError):
    """No linked Spotify account, or no usable access token."""


class TransientUiError(SpotifyControlsError):
    """A failure the user should see as a short, dismissible notice."""

    def __init__(self, message="Spotify request failed"):
        super().__init__(message)
        self.message = message
