"""
Shared pytest fixtures and configuration
"""

import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import httpx
import pytest

# Add the project root to Python path to make imports work
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables
os.environ["TWITTER_CONSUMER_KEY"] = "test_consumer_key"
os.environ["TWITTER_CONSUMER_SECRET"] = "test_consumer_secret"

from twitter_oauth.agent import TwitterOAuthAgent
from twitter_oauth.callbacks import AuthorizationView, AuthProcessListener
from twitter_oauth.config import TwitterOAuthSettings
from twitter_oauth.models import ConsumerCredential
from twitter_oauth.transport import HttpTransport


class FakeTwitterAPI:
    """
    Stand-in for Twitter's OAuth endpoints, served through httpx.MockTransport.

    Responses are registered per endpoint method name (request_token,
    access_token); every request received is recorded.
    """

    def __init__(self):
        self.routes: Dict[str, Tuple[int, str, Optional[Exception]]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method_name: str, status_code: int = 200, body: str = "", exc: Optional[Exception] = None):
        self.routes[method_name] = (status_code, body, exc)

    def calls(self, method_name: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(f"/{method_name}")]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method_name = request.url.path.rsplit("/", 1)[-1]
        if method_name not in self.routes:
            return httpx.Response(404, text="not found")
        status_code, body, exc = self.routes[method_name]
        if exc is not None:
            raise exc
        return httpx.Response(status_code, text=body)


class RecordingListener(AuthProcessListener):
    """Listener that records every outcome it receives."""

    def __init__(self):
        self.events = []

    def on_success(self, access_token):
        self.events.append(("success", access_token))

    def on_failure(self, error):
        self.events.append(("failure", error))

    def on_cancelled(self):
        self.events.append(("cancelled", None))


class FakeAuthorizationView(AuthorizationView):
    """
    Authorization view that answers immediately from present().

    With neither a verifier nor cancel set, it only records the URL and
    leaves the decision to the test.
    """

    def __init__(self, verifier=None, cancel=False):
        self.verifier = verifier
        self.cancel = cancel
        self.presented: List[str] = []
        self.delegate = None
        self.dismissed = False

    def present(self, authorize_url, delegate):
        self.presented.append(authorize_url)
        self.delegate = delegate
        if self.cancel:
            delegate.on_authorization_cancelled()
        elif self.verifier is not None:
            delegate.on_authorization_granted(self.verifier)

    def dismiss(self):
        self.dismissed = True


@pytest.fixture
def settings() -> TwitterOAuthSettings:
    return TwitterOAuthSettings(
        CONSUMER_KEY="ck",
        CONSUMER_SECRET="cs",
        OAUTH_BASE_URL="https://api.twitter.com/oauth",
        OAUTH_CALLBACK_URL="oob",
    )


@pytest.fixture
def consumer() -> ConsumerCredential:
    return ConsumerCredential(key="ck", secret="cs")


@pytest.fixture
def twitter_api() -> FakeTwitterAPI:
    return FakeTwitterAPI()


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def make_agent(consumer, listener, settings, twitter_api):
    """
    Build an agent wired to the fake Twitter API.
    """
    def _make_agent(view: Optional[AuthorizationView] = None, **kwargs) -> TwitterOAuthAgent:
        client = httpx.AsyncClient(transport=httpx.MockTransport(twitter_api.handler))
        return TwitterOAuthAgent(
            consumer,
            kwargs.pop("listener", listener),
            authorization_view=view,
            transport=HttpTransport(client=client),
            settings=settings,
            **kwargs,
        )

    return _make_agent


@pytest.fixture
def make_view():
    """Factory for FakeAuthorizationView instances."""
    return FakeAuthorizationView


@pytest.fixture
def make_listener():
    """Factory for extra RecordingListener instances."""
    return RecordingListener
