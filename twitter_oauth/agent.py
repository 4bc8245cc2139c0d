# twitter_oauth/agent.py
"""
Twitter OAuth Authentication Agent
==================================

This module implements the agent that signs a user in to Twitter with
OAuth 1.0a. It supports two flows:

- Interactive (3-legged): request token -> user authorization in an
  AuthorizationView -> access token
- xAuth: a single signed access token request carrying the user's
  username and password

Handshake Flow:
--------------
1. The caller builds the agent with a consumer credential and a listener
2. start_auth_process() or start_xauth_process() schedules the first request
   and returns immediately
3. The agent signs each request, sends it, and decodes the URL-encoded reply
4. For the interactive flow, the agent presents the authorization URL and
   resumes when the view reports a verifier or a cancellation
5. The listener receives exactly one outcome: success, failure or cancellation

The agent owns a single HandshakeState and a single current token. Only one
attempt may be in flight; all mutation happens on the event loop the attempt
was started on.
"""

import asyncio
import inspect
import logging
import threading
from typing import Any, Dict, List, Optional, Set, Union

from pydantic import ValidationError

from twitter_oauth.callbacks import AuthorizationDelegate, AuthorizationView, AuthProcessListener
from twitter_oauth.config import TwitterOAuthSettings, get_twitter_oauth_settings
from twitter_oauth.endpoints import (
    authorize_url,
    http_method_for_auth_type,
    method_name_for_auth_type,
    parse_token_response,
    url_for_auth_type,
    xauth_parameters,
)
from twitter_oauth.errors import (
    AuthorizationViewError,
    PreconditionError,
    ProtocolError,
    TwitterOAuthError,
)
from twitter_oauth.models import (
    AuthType,
    ConsumerCredential,
    HandshakeState,
    Outcome,
    OutcomeStatus,
    Token,
)
from twitter_oauth.signing import OAuth1SigningProvider, SignedRequest, SigningProvider
from twitter_oauth.transport import HttpResponse, HttpTransport

logger = logging.getLogger(__name__)

_TRANSITIONS = {
    HandshakeState.IDLE: {
        HandshakeState.AWAITING_REQUEST_TOKEN,
        HandshakeState.AWAITING_ACCESS_TOKEN,
    },
    HandshakeState.AWAITING_REQUEST_TOKEN: {
        HandshakeState.AWAITING_USER_AUTHORIZATION,
        HandshakeState.FAILED,
    },
    HandshakeState.AWAITING_USER_AUTHORIZATION: {
        HandshakeState.AWAITING_ACCESS_TOKEN,
        HandshakeState.FAILED,
    },
    HandshakeState.AWAITING_ACCESS_TOKEN: {
        HandshakeState.AUTHENTICATED,
        HandshakeState.FAILED,
    },
    HandshakeState.AUTHENTICATED: {HandshakeState.IDLE},
    HandshakeState.FAILED: {HandshakeState.IDLE},
}


class TwitterOAuthAgent(AuthorizationDelegate):
    """
    Drives a Twitter OAuth handshake and reports its outcome.

    Attributes:
        consumer (ConsumerCredential): The application's credential
        listener (AuthProcessListener): Receiver of the terminal outcome
        authorization_view (Optional[AuthorizationView]): Surface used by the interactive flow
        signer (SigningProvider): Produces signed requests
        transport (HttpTransport): Sends signed requests
        settings (TwitterOAuthSettings): Endpoint and transport configuration
        history (List[HandshakeState]): States visited by the current attempt
    """

    def __init__(
        self,
        consumer: ConsumerCredential,
        listener: AuthProcessListener,
        authorization_view: Optional[AuthorizationView] = None,
        signer: Optional[SigningProvider] = None,
        transport: Optional[HttpTransport] = None,
        settings: Optional[TwitterOAuthSettings] = None,
    ):
        self.settings = settings or get_twitter_oauth_settings()
        self.consumer = consumer
        self.listener = listener
        self.authorization_view = authorization_view
        self.signer = signer or OAuth1SigningProvider()
        self.transport = transport or HttpTransport(timeout=self.settings.REQUEST_TIMEOUT)

        self.history: List[HandshakeState] = [HandshakeState.IDLE]
        self._state = HandshakeState.IDLE
        self._token: Optional[Token] = None
        self._attempt = 0
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._loop_thread: Optional[int] = None
        self._task: Optional[asyncio.Task] = None
        self._finished: Optional[asyncio.Future] = None
        self._reported = False
        self._listener_tasks: Set[asyncio.Future] = set()

    @classmethod
    def from_settings(
        cls,
        listener: AuthProcessListener,
        settings: Optional[TwitterOAuthSettings] = None,
        **kwargs: Any,
    ) -> "TwitterOAuthAgent":
        """
        Build an agent from the configured consumer key and secret.

        Raises:
            PreconditionError: If the consumer key or secret is not configured
        """
        settings = settings or get_twitter_oauth_settings()
        try:
            consumer = ConsumerCredential(key=settings.CONSUMER_KEY, secret=settings.CONSUMER_SECRET)
        except ValidationError as e:
            raise PreconditionError("TWITTER_CONSUMER_KEY and TWITTER_CONSUMER_SECRET must be set") from e
        return cls(consumer, listener, settings=settings, **kwargs)

    #
    # Observable state
    #

    @property
    def state(self) -> HandshakeState:
        return self._state

    @property
    def token(self) -> Optional[Token]:
        """The current token: the request token mid-handshake, the access token once authenticated."""
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._state is HandshakeState.AUTHENTICATED

    @property
    def access_token(self) -> Optional[Token]:
        return self._token if self.is_authenticated else None

    async def wait(self) -> Outcome:
        """
        Wait for the current attempt to finish.

        Raises:
            PreconditionError: If no attempt was ever started
        """
        if self._finished is None:
            raise PreconditionError("No handshake has been started")
        return await asyncio.shield(self._finished)

    #
    # Request preparation and response handling
    #

    def method_name_for_auth_type(self, auth_type: AuthType) -> str:
        return method_name_for_auth_type(auth_type)

    def prepare_request(
        self,
        auth_type: AuthType,
        token: Optional[Token] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> SignedRequest:
        """
        Build the signed request for one handshake step.

        Args:
            auth_type (AuthType): The step to build a request for
            token (Optional[Token]): The token to sign with, None for consumer-only requests
            params (Optional[Dict[str, str]]): Extra form parameters (xAuth)

        Returns:
            SignedRequest: The request, ready for the transport
        """
        callback_uri = self.settings.OAUTH_CALLBACK_URL if auth_type is AuthType.REQUEST else None
        return self.signer.sign(
            http_method_for_auth_type(auth_type),
            url_for_auth_type(auth_type, self.settings.OAUTH_BASE_URL),
            self.consumer,
            token=token,
            params=params,
            callback_uri=callback_uri,
        )

    def update_access_token(self, response: HttpResponse) -> Token:
        """
        Install the access token carried by an access token response.

        Raises:
            ProtocolError: If the response body does not hold a token
        """
        access_token = parse_token_response(response.body, AuthType.ACCESS_TOKEN)
        self._token = access_token
        self._transition(HandshakeState.AUTHENTICATED)
        logger.info("Twitter OAuth handshake complete; access token installed")
        return access_token

    async def _send(self, request: SignedRequest) -> HttpResponse:
        response = await self.transport.send(request)
        if not response.ok:
            raise ProtocolError(
                f"{request.method} {request.url} returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.body,
            )
        return response

    #
    # Starting a handshake
    #

    def start_auth_process(self) -> asyncio.Task:
        """
        Start the interactive flow.

        Returns immediately; the outcome is delivered to the listener.

        Returns:
            asyncio.Task: The task running the request token step

        Raises:
            PreconditionError: If a handshake is in flight, the agent is
                already authenticated, or no authorization view is set
        """
        if self.authorization_view is None:
            raise PreconditionError("The interactive flow needs an authorization view")
        loop = asyncio.get_running_loop()
        self._begin_attempt(loop, HandshakeState.AWAITING_REQUEST_TOKEN)
        logger.info("Starting Twitter OAuth handshake")
        self._task = loop.create_task(self._request_token_step(self._attempt))
        return self._task

    def start_xauth_process(self, username: str, password: str) -> asyncio.Task:
        """
        Start the xAuth flow, exchanging a username and password for an access token.

        Returns:
            asyncio.Task: The task running the access token step

        Raises:
            PreconditionError: If the username or password is empty, or the
                agent cannot start a new attempt
        """
        if not isinstance(username, str) or not username:
            raise PreconditionError("xAuth requires a non-empty username")
        if not isinstance(password, str) or not password:
            raise PreconditionError("xAuth requires a non-empty password")
        loop = asyncio.get_running_loop()
        self._begin_attempt(loop, HandshakeState.AWAITING_ACCESS_TOKEN)
        logger.info("Starting Twitter xAuth handshake")
        self._task = loop.create_task(
            self._access_token_step(self._attempt, None, xauth_parameters(username, password))
        )
        return self._task

    def _begin_attempt(self, loop: asyncio.AbstractEventLoop, first_state: HandshakeState) -> None:
        if self._state.in_flight:
            raise PreconditionError(f"A handshake is already in progress ({self._state.value})")
        if self._state is HandshakeState.AUTHENTICATED:
            raise PreconditionError("Already authenticated; call reset() before starting a new handshake")
        if self._state is HandshakeState.FAILED:
            self._transition(HandshakeState.IDLE)

        self._attempt += 1
        self._loop = loop
        self._loop_thread = threading.get_ident()
        self._finished = loop.create_future()
        self._reported = False
        self._token = None
        self.history = [HandshakeState.IDLE]
        self._transition(first_state)

    #
    # Handshake steps
    #

    async def _request_token_step(self, attempt: int) -> None:
        try:
            request = self.prepare_request(AuthType.REQUEST)
            response = await self._send(request)
            request_token = parse_token_response(response.body, AuthType.REQUEST)
        except TwitterOAuthError as e:
            if self._is_current(attempt, HandshakeState.AWAITING_REQUEST_TOKEN):
                self._fail(e)
            return

        if not self._is_current(attempt, HandshakeState.AWAITING_REQUEST_TOKEN):
            return

        self._token = request_token
        self._transition(HandshakeState.AWAITING_USER_AUTHORIZATION)

        url = authorize_url(
            request_token,
            self.settings.OAUTH_BASE_URL,
            force_login=self.settings.FORCE_LOGIN,
        )
        logger.info("Request token received; presenting authorization view")
        try:
            result = self.authorization_view.present(url, self)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if not self._is_current(attempt, HandshakeState.AWAITING_USER_AUTHORIZATION):
                # The view already reported; this came from the listener.
                raise
            logger.exception("Authorization view failed to present")
            error = AuthorizationViewError(f"Authorization view failed: {str(e)}")
            error.__cause__ = e
            self._fail(error)

    async def _access_token_step(
        self,
        attempt: int,
        token: Optional[Token],
        params: Optional[Dict[str, str]] = None,
    ) -> None:
        try:
            request = self.prepare_request(AuthType.ACCESS_TOKEN, token=token, params=params)
            response = await self._send(request)
            if not self._is_current(attempt, HandshakeState.AWAITING_ACCESS_TOKEN):
                return
            access_token = self.update_access_token(response)
        except TwitterOAuthError as e:
            if self._is_current(attempt, HandshakeState.AWAITING_ACCESS_TOKEN):
                self._fail(e)
            return

        self._finish(Outcome.success(access_token))

    #
    # Authorization view callbacks
    #

    def on_authorization_granted(self, verifier_token: Union[Token, str]) -> None:
        """
        Resume the handshake after the user approved the request token.

        Args:
            verifier_token (Union[Token, str]): The verifier, or a token carrying it
        """
        if self._dispatch_to_loop(self.on_authorization_granted, verifier_token):
            return
        if self._state is not HandshakeState.AWAITING_USER_AUTHORIZATION:
            logger.warning(f"Ignoring authorization grant received while {self._state.value}")
            return

        if isinstance(verifier_token, Token):
            if verifier_token.key and verifier_token.key != self._token.key:
                self._fail(ProtocolError("Authorization was granted for a different request token"))
                return
            verifier = verifier_token.verifier
        else:
            verifier = verifier_token

        if not verifier:
            self._fail(ProtocolError("Authorization grant carried no verifier"))
            return

        self._token = self._token.with_verifier(verifier)
        self._transition(HandshakeState.AWAITING_ACCESS_TOKEN)
        logger.info("Authorization granted; requesting access token")
        self._task = self._loop.create_task(self._access_token_step(self._attempt, self._token))

    def on_authorization_cancelled(self) -> None:
        """Abandon the handshake after the user declined or closed the authorization view."""
        if self._dispatch_to_loop(self.on_authorization_cancelled):
            return
        if self._state is not HandshakeState.AWAITING_USER_AUTHORIZATION:
            logger.warning(f"Ignoring authorization cancellation received while {self._state.value}")
            return

        logger.info("User cancelled Twitter authorization")
        self._token = None
        self._transition(HandshakeState.FAILED)
        self._finish(Outcome.cancelled())

    def _dispatch_to_loop(self, callback, *args) -> bool:
        """Re-post a callback onto the agent's loop when it arrives from another thread."""
        if self._loop is None or threading.get_ident() == self._loop_thread:
            return False
        self._loop.call_soon_threadsafe(callback, *args)
        return True

    #
    # Cancellation and teardown
    #

    def cancel(self) -> bool:
        """
        Abandon the in-flight attempt and report it as cancelled.

        Returns:
            bool: True if an attempt was cancelled, False if none was in flight
        """
        if not self._state.in_flight:
            return False

        logger.info(f"Cancelling Twitter OAuth handshake ({self._state.value})")
        if self._task is not None and not self._task.done() and self._task is not asyncio.current_task():
            self._task.cancel()
        if self._state is HandshakeState.AWAITING_USER_AUTHORIZATION and self.authorization_view is not None:
            self.authorization_view.dismiss()

        self._token = None
        self._transition(HandshakeState.FAILED)
        self._finish(Outcome.cancelled())
        return True

    def reset(self) -> None:
        """
        Forget the outcome of the last attempt and return to IDLE.

        Raises:
            PreconditionError: If a handshake is in flight
        """
        if self._state.in_flight:
            raise PreconditionError("Cannot reset while a handshake is in progress")
        if self._state is HandshakeState.IDLE:
            return
        self._token = None
        self._transition(HandshakeState.IDLE)
        self.history = [HandshakeState.IDLE]

    async def aclose(self) -> None:
        """Cancel any in-flight attempt and release the transport."""
        task = self._task
        try:
            self.cancel()
            if task is not None and not task.done() and task is not asyncio.current_task():
                await asyncio.gather(task, return_exceptions=True)
            if self._listener_tasks:
                await asyncio.gather(*self._listener_tasks, return_exceptions=True)
        finally:
            await self.transport.aclose()

    #
    # State machine internals
    #

    def _transition(self, new_state: HandshakeState) -> None:
        if new_state not in _TRANSITIONS[self._state]:
            raise RuntimeError(f"Invalid handshake transition {self._state.value} -> {new_state.value}")
        logger.debug(f"Handshake state {self._state.value} -> {new_state.value}")
        self._state = new_state
        self.history.append(new_state)

    def _is_current(self, attempt: int, expected: HandshakeState) -> bool:
        return attempt == self._attempt and self._state is expected

    def _fail(self, error: TwitterOAuthError) -> None:
        logger.error(f"Twitter OAuth handshake failed during {self._state.value}: {str(error)}")
        self._token = None
        self._transition(HandshakeState.FAILED)
        self._finish(Outcome.failure(error))

    def _finish(self, outcome: Outcome) -> None:
        if self._reported:
            logger.warning(f"Outcome {outcome.status.value} dropped; attempt already reported")
            return
        self._reported = True

        try:
            if outcome.status is OutcomeStatus.SUCCESS:
                result = self.listener.on_success(outcome.access_token)
            elif outcome.status is OutcomeStatus.FAILURE:
                result = self.listener.on_failure(outcome.error)
            else:
                result = self.listener.on_cancelled()
            if inspect.isawaitable(result):
                listener_task = asyncio.ensure_future(result, loop=self._loop)
                self._listener_tasks.add(listener_task)
                listener_task.add_done_callback(self._listener_tasks.discard)
        finally:
            if self._finished is not None and not self._finished.done():
                self._finished.set_result(outcome)
