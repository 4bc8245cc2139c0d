# twitter_oauth/signing.py
"""
Request signing for the Twitter OAuth agent.

The agent never computes signatures itself. It asks a SigningProvider for a
fully signed request and hands that to the transport. OAuth1SigningProvider
delegates the HMAC-SHA1 computation to oauthlib.
"""

import logging
from typing import Dict, Optional
from urllib.parse import urlencode

from oauthlib.oauth1 import SIGNATURE_HMAC, SIGNATURE_TYPE_AUTH_HEADER, Client
from pydantic import BaseModel, Field

from twitter_oauth.models import ConsumerCredential, Token

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class SignedRequest(BaseModel):
    """An HTTP request ready to be sent, Authorization header included."""
    method: str
    url: str
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None


class SigningProvider:
    """
    Base class for request signers.

    Implementations turn a method, URL, consumer credential and optional token
    into a signed request for one OAuth endpoint.
    """

    def sign(
        self,
        method: str,
        url: str,
        consumer: ConsumerCredential,
        token: Optional[Token] = None,
        params: Optional[Dict[str, str]] = None,
        callback_uri: Optional[str] = None,
    ) -> SignedRequest:
        """
        Sign a request.

        Args:
            method (str): HTTP method
            url (str): Target endpoint URL
            consumer (ConsumerCredential): The application's credential
            token (Optional[Token]): Request or access token, None for consumer-only requests
            params (Optional[Dict[str, str]]): Form body parameters covered by the signature
            callback_uri (Optional[str]): oauth_callback value for request token calls

        Returns:
            SignedRequest: The signed request

        Raises:
            NotImplementedError: If the subclass doesn't implement this method
        """
        raise NotImplementedError("Subclasses must implement sign")


class OAuth1SigningProvider(SigningProvider):
    """OAuth 1.0a signer backed by oauthlib, placing parameters in the Authorization header."""

    def __init__(self, signature_method: str = SIGNATURE_HMAC):
        self.signature_method = signature_method

    def sign(
        self,
        method: str,
        url: str,
        consumer: ConsumerCredential,
        token: Optional[Token] = None,
        params: Optional[Dict[str, str]] = None,
        callback_uri: Optional[str] = None,
    ) -> SignedRequest:
        client = Client(
            consumer.key,
            client_secret=consumer.secret,
            resource_owner_key=token.key if token else None,
            resource_owner_secret=token.secret if token else None,
            verifier=token.verifier if token else None,
            callback_uri=callback_uri,
            signature_method=self.signature_method,
            signature_type=SIGNATURE_TYPE_AUTH_HEADER,
        )

        headers = {}
        body = None
        if params:
            headers["Content-Type"] = FORM_CONTENT_TYPE
            body = urlencode(params)

        signed_url, signed_headers, signed_body = client.sign(
            url, http_method=method, body=body, headers=headers
        )
        logger.debug(f"Signed {method} {signed_url} (token: {'yes' if token else 'no'})")

        return SignedRequest(
            method=method,
            url=signed_url,
            headers=dict(signed_headers),
            body=signed_body,
        )
