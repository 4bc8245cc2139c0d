# twitter_oauth/__init__.py
"""
Twitter OAuth 1.0a authentication agent.

The agent obtains an access token for a Twitter user either interactively
(request token, user authorization, access token) or with xAuth, and reports
the outcome to a caller-supplied listener.
"""

from twitter_oauth.agent import TwitterOAuthAgent
from twitter_oauth.callbacks import (
    AuthorizationDelegate,
    AuthorizationView,
    AuthProcessListener,
    CallbackListener,
    FutureListener,
)
from twitter_oauth.config import TwitterOAuthSettings, get_twitter_oauth_settings
from twitter_oauth.errors import (
    AuthorizationViewError,
    FailureKind,
    PreconditionError,
    ProtocolError,
    TransportError,
    TwitterOAuthError,
    UserCancelled,
)
from twitter_oauth.models import (
    AuthType,
    ConsumerCredential,
    HandshakeState,
    Outcome,
    OutcomeStatus,
    Token,
)
from twitter_oauth.views import PinAuthorizationView, RedirectAuthorizationView

__all__ = [
    "TwitterOAuthAgent",
    "AuthorizationDelegate",
    "AuthorizationView",
    "AuthProcessListener",
    "CallbackListener",
    "FutureListener",
    "TwitterOAuthSettings",
    "get_twitter_oauth_settings",
    "AuthorizationViewError",
    "FailureKind",
    "PreconditionError",
    "ProtocolError",
    "TransportError",
    "TwitterOAuthError",
    "UserCancelled",
    "AuthType",
    "ConsumerCredential",
    "HandshakeState",
    "Outcome",
    "OutcomeStatus",
    "Token",
    "PinAuthorizationView",
    "RedirectAuthorizationView",
]
