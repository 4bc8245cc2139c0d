# twitter_oauth/account.py
"""
Account lookups with an access token produced by the agent.

These helpers use tweepy's v1.1 API client to confirm that an access token
works and to identify the account it belongs to. tweepy is synchronous, so
calls run in a worker thread.
"""

import asyncio
import logging
from typing import Any, Dict

import tweepy

from twitter_oauth.errors import ProtocolError, TransportError
from twitter_oauth.models import ConsumerCredential, Token

logger = logging.getLogger(__name__)


def get_oauth_handler(consumer: ConsumerCredential, access_token: Token) -> tweepy.OAuth1UserHandler:
    """Get a tweepy OAuth handler signed with the consumer credential and access token."""
    return tweepy.OAuth1UserHandler(
        consumer.key,
        consumer.secret,
        access_token.key,
        access_token.secret,
    )


async def get_user_info(consumer: ConsumerCredential, access_token: Token) -> Dict[str, Any]:
    """
    Get Twitter user information for an access token.

    Args:
        consumer (ConsumerCredential): The application's credential
        access_token (Token): The access token to look up

    Returns:
        Dict[str, Any]: User information from Twitter

    Raises:
        ProtocolError: If Twitter rejects the token
        TransportError: If Twitter could not be reached
    """
    auth = get_oauth_handler(consumer, access_token)

    try:
        api = tweepy.API(auth)
        user = await asyncio.to_thread(api.verify_credentials)
    except tweepy.HTTPException as e:
        logger.error(f"Twitter rejected the access token: {str(e)}")
        raise ProtocolError(f"Failed to get Twitter user info: {str(e)}", status_code=e.response.status_code) from e
    except tweepy.TweepyException as e:
        logger.error(f"Error getting Twitter user info: {str(e)}")
        raise TransportError(f"Failed to get Twitter user info: {str(e)}") from e

    return {
        "id": user.id_str,
        "screen_name": user.screen_name,
        "name": user.name,
        "profile_image_url": user.profile_image_url_https,
    }


async def validate_access_token(consumer: ConsumerCredential, access_token: Token) -> bool:
    """Check whether an access token is still accepted by Twitter."""
    try:
        await get_user_info(consumer, access_token)
        return True
    except ProtocolError as e:
        logger.warning(f"Twitter access token validation failed: {str(e)}")
        return False
