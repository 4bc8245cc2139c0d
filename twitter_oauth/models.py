# twitter_oauth/models.py
"""
Data model for the Twitter OAuth agent

This module defines the values that flow through a handshake:
- Credentials: the application's consumer credential and the request/access tokens
- Step tags: which OAuth endpoint a request targets
- Handshake state: where an agent is in its state machine
- Outcomes: the terminal result reported to the auth process listener
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from twitter_oauth.errors import FailureKind, TwitterOAuthError, UserCancelled

#
# Credentials
#

class ConsumerCredential(BaseModel):
    """
    The application's identity with Twitter, as issued on app registration.

    Supplied once when an agent is built and never changed afterwards.
    """
    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    secret: str = Field(min_length=1, repr=False)


class Token(BaseModel):
    """
    An OAuth token pair, optionally carrying the verifier that authorizes it.

    The same type is used for the short-lived request token and for the
    long-lived access token that a successful handshake produces.
    """
    model_config = ConfigDict(frozen=True)

    key: str
    secret: str = Field(default="", repr=False)
    verifier: Optional[str] = Field(default=None, repr=False)

    def with_verifier(self, verifier: str) -> "Token":
        """Return a copy of this token carrying the given verifier."""
        return self.model_copy(update={"verifier": verifier})

#
# Handshake steps and states
#

class AuthType(str, Enum):
    """The OAuth endpoint a handshake step targets."""
    REQUEST = "request"
    AUTHORIZE = "authorize"
    ACCESS_TOKEN = "access_token"


class HandshakeState(str, Enum):
    """
    States of an agent's handshake state machine.

    An attempt is in flight while the agent is awaiting one of the three
    steps; only one attempt may be in flight at a time.
    """
    IDLE = "idle"
    AWAITING_REQUEST_TOKEN = "awaiting_request_token"
    AWAITING_USER_AUTHORIZATION = "awaiting_user_authorization"
    AWAITING_ACCESS_TOKEN = "awaiting_access_token"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"

    @property
    def in_flight(self) -> bool:
        return self in (
            HandshakeState.AWAITING_REQUEST_TOKEN,
            HandshakeState.AWAITING_USER_AUTHORIZATION,
            HandshakeState.AWAITING_ACCESS_TOKEN,
        )

#
# Outcomes
#

class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"


class Outcome(BaseModel):
    """The terminal result of one handshake attempt."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: OutcomeStatus
    access_token: Optional[Token] = None
    error: Optional[TwitterOAuthError] = None

    @classmethod
    def success(cls, access_token: Token) -> "Outcome":
        return cls(status=OutcomeStatus.SUCCESS, access_token=access_token)

    @classmethod
    def failure(cls, error: TwitterOAuthError) -> "Outcome":
        return cls(status=OutcomeStatus.FAILURE, error=error)

    @classmethod
    def cancelled(cls) -> "Outcome":
        return cls(status=OutcomeStatus.CANCELLED)

    @property
    def reason(self) -> Optional[FailureKind]:
        """The classification of a failed outcome, None otherwise."""
        if self.error is None:
            return None
        return self.error.kind

    def unwrap(self) -> Token:
        """
        Return the access token of a successful outcome.

        Raises:
            TwitterOAuthError: The failure's error, or UserCancelled for a cancelled attempt
        """
        if self.status is OutcomeStatus.SUCCESS:
            return self.access_token
        if self.status is OutcomeStatus.CANCELLED:
            raise UserCancelled("Authorization was cancelled by the user")
        raise self.error
