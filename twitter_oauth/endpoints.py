# twitter_oauth/endpoints.py
"""
Mapping between handshake steps and Twitter's OAuth endpoints.

Everything here is a pure function: which path and HTTP method a step uses,
how the authorization URL is built, and how a token response body decodes.
"""

from typing import Dict, Optional, Union
from urllib.parse import parse_qs, urlencode

from twitter_oauth.errors import ProtocolError
from twitter_oauth.models import AuthType, Token

DEFAULT_BASE_URL = "https://api.twitter.com/oauth"

REQUEST_TOKEN_METHOD = "request_token"
AUTHORIZE_METHOD = "authorize"
ACCESS_TOKEN_METHOD = "access_token"

CLIENT_AUTH_MODE = "client_auth"

_METHOD_NAMES = {
    AuthType.REQUEST: REQUEST_TOKEN_METHOD,
    AuthType.AUTHORIZE: AUTHORIZE_METHOD,
    AuthType.ACCESS_TOKEN: ACCESS_TOKEN_METHOD,
}

_HTTP_METHODS = {
    AuthType.REQUEST: "POST",
    AuthType.AUTHORIZE: "GET",
    AuthType.ACCESS_TOKEN: "POST",
}


def method_name_for_auth_type(auth_type: AuthType) -> str:
    """Translate an AuthType into the endpoint path segment it corresponds to."""
    return _METHOD_NAMES[auth_type]


def http_method_for_auth_type(auth_type: AuthType) -> str:
    return _HTTP_METHODS[auth_type]


def url_for_auth_type(auth_type: AuthType, base_url: str = DEFAULT_BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/{method_name_for_auth_type(auth_type)}"


def authorize_url(
    request_token: Token,
    base_url: str = DEFAULT_BASE_URL,
    force_login: bool = False,
    screen_name: Optional[str] = None,
) -> str:
    """
    Build the URL the user visits to approve a request token.

    Args:
        request_token (Token): The request token obtained from the first step
        base_url (str): OAuth base URL
        force_login (bool): Ask Twitter to prompt for credentials even with an active session
        screen_name (Optional[str]): Prefill the username field on the login form

    Returns:
        str: The authorization URL
    """
    params = {"oauth_token": request_token.key}
    if force_login:
        params["force_login"] = "true"
    if screen_name:
        params["screen_name"] = screen_name
    return f"{url_for_auth_type(AuthType.AUTHORIZE, base_url)}?{urlencode(params)}"


def xauth_parameters(username: str, password: str) -> Dict[str, str]:
    """Body parameters of an xAuth access token request."""
    return {
        "x_auth_username": username,
        "x_auth_password": password,
        "x_auth_mode": CLIENT_AUTH_MODE,
    }


def parse_token_response(body: Union[str, bytes], auth_type: AuthType = AuthType.REQUEST) -> Token:
    """
    Decode a URL-encoded token response.

    Unknown fields (user_id, screen_name, oauth_callback_confirmed, ...) are
    ignored. An echoed oauth_verifier is kept for the access token step only.

    Args:
        body (Union[str, bytes]): Raw response body
        auth_type (AuthType): The step that produced the response

    Returns:
        Token: The decoded token

    Raises:
        ProtocolError: If the body is not text or lacks oauth_token / oauth_token_secret
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ProtocolError("Token response is not valid UTF-8") from e

    fields = parse_qs(body, keep_blank_values=True)

    key = fields.get("oauth_token", [""])[0]
    secret = fields.get("oauth_token_secret", [""])[0]
    if not key:
        raise ProtocolError(f"Token response from {method_name_for_auth_type(auth_type)} is missing oauth_token", body=body)
    if not secret:
        raise ProtocolError(f"Token response from {method_name_for_auth_type(auth_type)} is missing oauth_token_secret", body=body)

    verifier = None
    if auth_type is AuthType.ACCESS_TOKEN:
        verifier = fields.get("oauth_verifier", [None])[0] or None

    return Token(key=key, secret=secret, verifier=verifier)
