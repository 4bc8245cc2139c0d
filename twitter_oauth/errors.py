# twitter_oauth/errors.py
"""
Error taxonomy for the Twitter OAuth agent.

Every failure of a handshake attempt is one of these exceptions. Transport and
protocol errors are delivered to the auth process listener as the reason of a
failed outcome; precondition errors are raised synchronously to the caller and
never reach the network.
"""

from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    """Classification of a failed handshake attempt."""
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    VIEW = "view"


class TwitterOAuthError(Exception):
    """Base class for all errors raised by the Twitter OAuth agent."""

    kind: Optional[FailureKind] = None


class TransportError(TwitterOAuthError):
    """The request never produced an HTTP response (connection failure, timeout)."""

    kind = FailureKind.TRANSPORT


class ProtocolError(TwitterOAuthError):
    """
    The provider answered, but not with what the handshake expects.

    Raised for HTTP statuses outside the 2xx range and for response bodies
    that do not decode into a token. The raw status and body are kept for
    diagnostics.

    Attributes:
        status_code (Optional[int]): HTTP status of the offending response, if any
        body (Optional[str]): Raw response body, if any
    """

    kind = FailureKind.PROTOCOL

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class PreconditionError(TwitterOAuthError, ValueError):
    """The caller asked for something the agent cannot do in its current state."""


class UserCancelled(TwitterOAuthError):
    """The user dismissed the authorization view."""


class AuthorizationViewError(TwitterOAuthError):
    """The authorization view could not be presented."""

    kind = FailureKind.VIEW
