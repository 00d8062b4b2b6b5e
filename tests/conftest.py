"""
Shared fixtures: the fake REST server behind httpx.MockTransport,
the loopback realtime channel and a log-only toast sink.
"""

import httpx
import pytest

from adapters.cli.navigator import LogNavigator
from core.domain.models import AuthUser
from core.services.auth_service import AuthService
from infrastructure.http import ApiClient
from infrastructure.notifications import LogNotifier
from infrastructure.realtime import MemoryChannel
from tests.helpers import BASE_URL, VIEWER_ID, FakeServer


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def navigator():
    return LogNavigator()


@pytest.fixture
async def api(server, navigator):
    client = ApiClient(
        navigator=navigator,
        base_url=BASE_URL,
        timeout=5.0,
        login_path="/login",
        transport=httpx.MockTransport(server),
    )
    yield client
    await client.aclose()


@pytest.fixture
def channel():
    return MemoryChannel()


@pytest.fixture
def notifier():
    return LogNotifier()


@pytest.fixture
def auth(api, notifier):
    return AuthService(api, notifier)


@pytest.fixture
def viewer(auth):
    """Logged-in session without a round trip"""
    auth.user = AuthUser(id=VIEWER_ID, name="Viewer", email="viewer@example.com")
    return auth.user


@pytest.fixture
def make_store(api, notifier, auth, channel):
    def build(store_cls, **kwargs):
        return store_cls(api, notifier=notifier, session=auth, channel=channel, **kwargs)
    return build
