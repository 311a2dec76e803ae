import pytest

from spotify_controls.spotify.auth import CredentialResolver
from spotify_controls.spotify.errors import ApiError, AuthError
from spotify_controls.spotify.models import Account, Credential


async def test_session_token_is_used_first(make_provider, spotify_account):
    provider = make_provider(session_token="from-socket", device_id="dev-1",
                             accounts=[spotify_account], token="fresh")

    credential = await CredentialResolver(provider).resolve()

    assert credential == Credential(access_token="from-socket", device_id="dev-1")
    assert provider.token_requests == []


async def test_falls_back_to_token_fetch_for_linked_account(make_provider, spotify_account):
    provider = make_provider(device_id="dev-1", accounts=[spotify_account], token="fresh")

    credential = await CredentialResolver(provider).resolve()

    assert credential == Credential(access_token="fresh", device_id="dev-1")
    assert provider.token_requests == ["acc-1"]


async def test_only_spotify_accounts_count(make_provider):
    provider = make_provider(accounts=[Account(id="gh", type="github"),
                                       Account(id="sp", type="spotify")],
                             token="fresh")

    await CredentialResolver(provider).resolve()

    assert provider.token_requests == ["sp"]


async def test_not_linked_without_spotify_account(make_provider):
    provider = make_provider(accounts=[Account(id="gh", type="github")])

    with pytest.raises(AuthError, match="not linked"):
        await CredentialResolver(provider).resolve()
    assert provider.token_requests == []


async def test_no_token_when_fetch_returns_nothing(make_provider, spotify_account):
    provider = make_provider(accounts=[spotify_account], token=None)

    with pytest.raises(AuthError, match="no token"):
        await CredentialResolver(provider).resolve()


async def test_no_token_when_fetch_fails(make_provider, spotify_account):
    provider = make_provider(accounts=[spotify_account],
                             token_error=RuntimeError("socket closed"))

    with pytest.raises(AuthError, match="no token"):
        await CredentialResolver(provider).resolve()
    assert provider.token_requests == ["acc-1"]


async def test_device_is_optional(make_provider, spotify_account):
    provider = make_provider(accounts=[spotify_account], token="fresh")

    credential = await CredentialResolver(provider).resolve()

    assert credential.device_id is None


async def test_no_active_session_at_all(make_provider, spotify_account):
    provider = make_provider(accounts=[spotify_account], token="fresh")
    provider.get_active_session_and_device = lambda: None

    credential = await CredentialResolver(provider).resolve()

    assert credential == Credential(access_token="fresh")


def test_auth_error_is_an_api_error():
    assert issubclass(AuthError, ApiError)
