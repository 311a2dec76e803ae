"""Shared fixtures: fake host provider, recording render surface, fake API."""

import asyncio
from types import SimpleNamespace

import aiohttp
import pytest
from aiohttp import web

from spotify_controls.lib import config
from spotify_controls.spotify.auth import AccountProvider
from spotify_controls.spotify.client import PlaybackClient
from spotify_controls.spotify.models import Account, Device, Session, SessionDevice
from spotify_controls.spotify.render import RenderAdapter


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Never pick up a real config.json from /etc or the CWD."""
    monkeypatch.setattr(config, "_SEARCH_PATHS", [str(tmp_path / "config.json")])
    monkeypatch.setattr(config, "_config", None)
    return tmp_path / "config.json"


class FakeProvider(AccountProvider):
    def __init__(self, session_token=None, device_id=None, accounts=None,
                 token=None, token_error=None):
        self.session_token = session_token
        self.device_id = device_id
        self.accounts = accounts if accounts is not None else []
        self.token = token
        self.token_error = token_error
        self.token_requests = []

    def get_active_session_and_device(self):
        session = Session(access_token=self.session_token) if self.session_token else None
        device = Device(id=self.device_id) if self.device_id else None
        return SessionDevice(session=session, device=device)

    def get_accounts(self):
        return list(self.accounts)

    def get_account(self, account_id):
        return next((a for a in self.accounts if a.id == account_id), None)

    async def get_access_token(self, account_id):
        self.token_requests.append(account_id)
        if self.token_error:
            raise self.token_error
        return self.token


class RecordingRender(RenderAdapter):
    def __init__(self):
        self.events = []

    def update_display(self, snapshot):
        self.events.append(("display", snapshot))

    def set_busy(self, busy):
        self.events.append(("busy", busy))

    def show_notice(self, message):
        self.events.append(("notice", message))

    def of(self, kind):
        return [value for k, value in self.events if k == kind]


class FakeClient(PlaybackClient):
    """Records (method, operation) pairs; GETs answer from *states* in order."""

    def __init__(self, states=None, fail=None, gate=None):
        self.states = list(states) if states else [{}]
        self.fail = fail or {}
        self.gate = gate
        self.calls = []

    async def request(self, operation="", method="GET", body=None):
        self.calls.append((method, operation))
        if self.gate is not None and method != "GET":
            await self.gate.wait()
        exc = self.fail.get((method, operation))
        if exc is not None:
            raise exc
        if method == "GET":
            return self.states.pop(0) if len(self.states) > 1 else self.states[0]
        return {}


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def spotify_account():
    return Account(id="acc-1", type="spotify", name="listener")


@pytest.fixture
def render():
    return RecordingRender()


@pytest.fixture
def make_client():
    return FakeClient


@pytest.fixture
async def http_session():
    async with aiohttp.ClientSession() as session:
        yield session


@pytest.fixture
async def spotify_api(aiohttp_server):
    """A stand-in for api.spotify.com/v1/me/player.

    Unconfigured routes answer 204; set ``api.responses[(method, path)]``
    to a zero-arg callable returning a web.Response to change that.
    """
    api = SimpleNamespace(requests=[], responses={})

    async def handler(request):
        api.requests.append({
            "method": request.method,
            "path": request.path,
            "query": dict(request.query),
            "authorization": request.headers.get("Authorization"),
            "content_type": request.headers.get("Content-Type"),
            "body": await request.text(),
        })
        make = api.responses.get((request.method, request.path))
        if make is None:
            return web.Response(status=204)
        return make()

    app = web.Application()
    app.router.add_route("*", "/v1/me/player{tail:.*}", handler)
    api.server = await aiohttp_server(app)
    api.base_url = str(api.server.make_url("/v1/me/player"))
    return api


async def drain(controls):
    """Wait for every pending post-command refresh to finish."""
    while controls._settle_tasks:
        await asyncio.gather(*list(controls._settle_tasks), return_exceptions=True)


@pytest.fixture
def settle():
    return drain
