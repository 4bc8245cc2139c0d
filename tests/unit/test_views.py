"""
Unit tests for the bundled authorization views
"""

from unittest.mock import MagicMock

import pytest

from twitter_oauth.models import Token
from twitter_oauth.views import PinAuthorizationView, RedirectAuthorizationView

pytestmark = [pytest.mark.unit, pytest.mark.oauth_agent]

AUTHORIZE_URL = "https://api.twitter.com/oauth/authorize?oauth_token=abc"


class TestPinAuthorizationView:
    """Test the out-of-band PIN view"""

    @pytest.mark.asyncio
    async def test_pin_grants_authorization(self):
        """Test that a PIN grants authorization"""
        open_browser = MagicMock(return_value=True)
        view = PinAuthorizationView(prompt=lambda message: " 1234567 ", open_browser=open_browser)
        delegate = MagicMock()

        await view.present(AUTHORIZE_URL, delegate)

        open_browser.assert_called_once_with(AUTHORIZE_URL)
        delegate.on_authorization_granted.assert_called_once_with("1234567")
        delegate.on_authorization_cancelled.assert_not_called()

    @pytest.mark.asyncio
    async def test_blank_pin_cancels(self):
        """Test that a blank PIN cancels"""
        view = PinAuthorizationView(prompt=lambda message: "", open_browser=lambda url: False)
        delegate = MagicMock()

        await view.present(AUTHORIZE_URL, delegate)

        delegate.on_authorization_cancelled.assert_called_once_with()
        delegate.on_authorization_granted.assert_not_called()


class TestRedirectAuthorizationView:
    """Test the web callback view"""

    def test_present_records_url(self):
        """Test that present() records the authorize URL"""
        view = RedirectAuthorizationView()
        delegate = MagicMock()

        view.present(AUTHORIZE_URL, delegate)

        assert view.authorize_url == AUTHORIZE_URL
        assert view.pending

    def test_callback_with_verifier(self):
        """Test that a callback with a verifier grants authorization"""
        view = RedirectAuthorizationView()
        delegate = MagicMock()
        view.present(AUTHORIZE_URL, delegate)

        view.handle_callback({"oauth_token": "abc", "oauth_verifier": "v123"})

        delegate.on_authorization_granted.assert_called_once_with(Token(key="abc", verifier="v123"))
        assert not view.pending

    def test_denied_callback_cancels(self):
        """Test that a denied callback cancels"""
        view = RedirectAuthorizationView()
        delegate = MagicMock()
        view.present(AUTHORIZE_URL, delegate)

        view.handle_callback({"denied": "abc"})

        delegate.on_authorization_cancelled.assert_called_once_with()
        delegate.on_authorization_granted.assert_not_called()

    def test_callback_without_pending_authorization(self):
        """Test that a callback with nothing pending is rejected"""
        with pytest.raises(ValueError):
            RedirectAuthorizationView().handle_callback({"oauth_token": "abc", "oauth_verifier": "v123"})
