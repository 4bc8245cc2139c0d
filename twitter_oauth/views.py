# twitter_oauth/views.py
"""
Authorization views for the interactive flow.

PinAuthorizationView opens Twitter's authorization page in a browser and asks
the user to type the PIN Twitter shows (callback URL "oob").
RedirectAuthorizationView is for web applications: the user is redirected to
the authorization URL and the application's callback route hands the query
parameters Twitter sends back to handle_callback().
"""

import asyncio
import logging
import webbrowser
from typing import Callable, Mapping, Optional

from twitter_oauth.callbacks import AuthorizationDelegate, AuthorizationView
from twitter_oauth.models import Token

logger = logging.getLogger(__name__)


class PinAuthorizationView(AuthorizationView):
    """
    Out-of-band authorization: browser plus PIN prompt.

    An empty PIN counts as a cancellation.
    """

    def __init__(
        self,
        prompt: Callable[[str], str] = input,
        open_browser: Callable[[str], bool] = webbrowser.open,
    ):
        self._prompt = prompt
        self._open_browser = open_browser

    async def present(self, authorize_url: str, delegate: AuthorizationDelegate) -> None:
        if not self._open_browser(authorize_url):
            logger.warning("Could not open a browser; showing the authorization URL instead")
        print(f"Authorize this application at: {authorize_url}")

        pin = await asyncio.to_thread(self._prompt, "Enter the PIN shown by Twitter (blank to cancel): ")
        pin = (pin or "").strip()
        if not pin:
            delegate.on_authorization_cancelled()
        else:
            delegate.on_authorization_granted(pin)


class RedirectAuthorizationView(AuthorizationView):
    """
    Authorization through a browser redirect and a web callback.

    present() only records the URL and delegate; the web layer reads
    authorize_url to redirect the user and later passes Twitter's callback
    query parameters to handle_callback().
    """

    def __init__(self):
        self.authorize_url: Optional[str] = None
        self._delegate: Optional[AuthorizationDelegate] = None

    @property
    def pending(self) -> bool:
        return self._delegate is not None

    def present(self, authorize_url: str, delegate: AuthorizationDelegate) -> None:
        self.authorize_url = authorize_url
        self._delegate = delegate

    def handle_callback(self, params: Mapping[str, str]) -> None:
        """
        Report the user's decision from the callback query parameters.

        Twitter sends oauth_token and oauth_verifier on approval, and
        denied=<request token> when the user refuses.

        Raises:
            ValueError: If no authorization is pending
        """
        if self._delegate is None:
            raise ValueError("No authorization is pending")
        delegate = self._delegate
        self.dismiss()

        if "denied" in params or not params.get("oauth_verifier"):
            delegate.on_authorization_cancelled()
            return

        delegate.on_authorization_granted(
            Token(key=params.get("oauth_token", ""), verifier=params["oauth_verifier"])
        )

    def dismiss(self) -> None:
        self.authorize_url = None
        self._delegate = None
