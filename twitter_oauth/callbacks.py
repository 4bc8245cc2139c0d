# twitter_oauth/callbacks.py
"""
Callback interfaces between the agent and its collaborators
==========================================================

The agent talks to two caller-supplied collaborators:

1. Auth Process Listener: receives the terminal outcome of a handshake attempt
   (success with an access token, failure with a classified error, or
   cancellation). Exactly one of its methods is called per attempt.
2. Authorization View: shows the user Twitter's authorization page and reports
   back through an AuthorizationDelegate (the agent) whether access was
   granted or cancelled.

Listener methods and AuthorizationView.present may be plain functions or
coroutine functions; the agent awaits or schedules whatever they return.

Two ready-made listeners are provided:
- CallbackListener wraps plain function references
- FutureListener resolves an asyncio future with the Outcome
"""

import asyncio
from typing import Any, Callable, Optional, Union

from twitter_oauth.errors import TwitterOAuthError
from twitter_oauth.models import Outcome, Token


class AuthProcessListener:
    """
    Base class for receivers of handshake outcomes.

    Subclasses implement all three methods; the agent calls exactly one of
    them per attempt.
    """

    def on_success(self, access_token: Token) -> Any:
        """
        Called when the handshake produced an access token.

        Args:
            access_token (Token): The new access token

        Raises:
            NotImplementedError: If the subclass doesn't implement this method
        """
        raise NotImplementedError("Subclasses must implement on_success")

    def on_failure(self, error: TwitterOAuthError) -> Any:
        """
        Called when the handshake failed.

        Args:
            error (TwitterOAuthError): The failure, classified by its `kind`

        Raises:
            NotImplementedError: If the subclass doesn't implement this method
        """
        raise NotImplementedError("Subclasses must implement on_failure")

    def on_cancelled(self) -> Any:
        """
        Called when the user or the caller cancelled the handshake.

        Raises:
            NotImplementedError: If the subclass doesn't implement this method
        """
        raise NotImplementedError("Subclasses must implement on_cancelled")


class AuthorizationDelegate:
    """The receiving end of an authorization view. Implemented by the agent."""

    def on_authorization_granted(self, verifier_token: Union[Token, str]) -> None:
        raise NotImplementedError("Subclasses must implement on_authorization_granted")

    def on_authorization_cancelled(self) -> None:
        raise NotImplementedError("Subclasses must implement on_authorization_cancelled")


class AuthorizationView:
    """
    Base class for surfaces that let the user approve a request token.

    A view is handed the authorization URL and the delegate to report to.
    It may report synchronously from present() or at any later time; the
    agent imposes no timeout.
    """

    def present(self, authorize_url: str, delegate: AuthorizationDelegate) -> Any:
        """
        Show the authorization page.

        Args:
            authorize_url (str): Twitter's authorization URL for the request token
            delegate (AuthorizationDelegate): Receiver of the user's decision

        Raises:
            NotImplementedError: If the subclass doesn't implement this method
        """
        raise NotImplementedError("Subclasses must implement present")

    def dismiss(self) -> None:
        """Take the view down without a decision. Called when the agent abandons the attempt."""


class CallbackListener(AuthProcessListener):
    """Listener built from plain callables. Missing callbacks are skipped."""

    def __init__(
        self,
        on_success: Optional[Callable[[Token], Any]] = None,
        on_failure: Optional[Callable[[TwitterOAuthError], Any]] = None,
        on_cancelled: Optional[Callable[[], Any]] = None,
    ):
        self._on_success = on_success
        self._on_failure = on_failure
        self._on_cancelled = on_cancelled

    def on_success(self, access_token: Token) -> Any:
        if self._on_success is not None:
            return self._on_success(access_token)

    def on_failure(self, error: TwitterOAuthError) -> Any:
        if self._on_failure is not None:
            return self._on_failure(error)

    def on_cancelled(self) -> Any:
        if self._on_cancelled is not None:
            return self._on_cancelled()


class FutureListener(AuthProcessListener):
    """
    Listener that resolves an asyncio future with the Outcome of one attempt.

    Must be created while an event loop is running (or given one). A listener
    serves a single attempt; later outcomes are ignored once the future is done.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        loop = loop or asyncio.get_running_loop()
        self.future: asyncio.Future = loop.create_future()

    def _resolve(self, outcome: Outcome) -> None:
        if not self.future.done():
            self.future.set_result(outcome)

    def on_success(self, access_token: Token) -> None:
        self._resolve(Outcome.success(access_token))

    def on_failure(self, error: TwitterOAuthError) -> None:
        self._resolve(Outcome.failure(error))

    def on_cancelled(self) -> None:
        self._resolve(Outcome.cancelled())

    def __await__(self):
        return asyncio.shield(self.future).__await__()
