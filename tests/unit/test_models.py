"""
Unit tests for the data model
"""

import pytest
from pydantic import ValidationError

from twitter_oauth.errors import FailureKind, ProtocolError, TransportError, UserCancelled
from twitter_oauth.models import (
    ConsumerCredential,
    HandshakeState,
    Outcome,
    OutcomeStatus,
    Token,
)

pytestmark = [pytest.mark.unit, pytest.mark.oauth_agent]


class TestCredentials:
    """Test the credential models"""

    def test_consumer_credential_is_immutable(self):
        """Test that consumer credentials cannot be changed"""
        consumer = ConsumerCredential(key="ck", secret="cs")

        with pytest.raises(ValidationError):
            consumer.key = "other"

    def test_consumer_credential_requires_values(self):
        """Test that consumer credentials need a key and secret"""
        with pytest.raises(ValidationError):
            ConsumerCredential(key="", secret="cs")

    def test_secrets_are_not_in_repr(self):
        """Test that secrets are kept out of repr"""
        consumer = ConsumerCredential(key="ck", secret="consumer-secret")
        token = Token(key="tk", secret="token-secret", verifier="the-verifier")

        assert "consumer-secret" not in repr(consumer)
        assert "token-secret" not in repr(token)
        assert "the-verifier" not in repr(token)

    def test_with_verifier_returns_copy(self):
        """Test that with_verifier returns a new token"""
        token = Token(key="abc", secret="xyz")
        verified = token.with_verifier("v123")

        assert verified.verifier == "v123"
        assert verified.key == "abc"
        assert token.verifier is None


class TestHandshakeState:
    """Test the handshake state helpers"""

    def test_in_flight_states(self):
        """Test which states count as in flight"""
        in_flight = {state for state in HandshakeState if state.in_flight}

        assert in_flight == {
            HandshakeState.AWAITING_REQUEST_TOKEN,
            HandshakeState.AWAITING_USER_AUTHORIZATION,
            HandshakeState.AWAITING_ACCESS_TOKEN,
        }


class TestOutcome:
    """Test the Outcome value"""

    def test_success(self):
        """Test a successful outcome"""
        outcome = Outcome.success(Token(key="AT1", secret="ATS1"))

        assert outcome.status is OutcomeStatus.SUCCESS
        assert outcome.reason is None
        assert outcome.unwrap() == Token(key="AT1", secret="ATS1")

    def test_failure_reason(self):
        """Test that a failure reports the error kind"""
        assert Outcome.failure(TransportError("down")).reason is FailureKind.TRANSPORT
        assert Outcome.failure(ProtocolError("bad")).reason is FailureKind.PROTOCOL

    def test_unwrap_failure_raises_error(self):
        """Test that unwrapping a failure raises its error"""
        error = ProtocolError("HTTP 401", status_code=401)

        with pytest.raises(ProtocolError) as exc_info:
            Outcome.failure(error).unwrap()

        assert exc_info.value is error

    def test_unwrap_cancelled_raises_user_cancelled(self):
        """Test that unwrapping a cancellation raises UserCancelled"""
        with pytest.raises(UserCancelled):
            Outcome.cancelled().unwrap()
