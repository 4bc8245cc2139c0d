# Standard library imports
import asyncio
import logging
import sys

# Local imports
from twitter_oauth import (
    FutureListener,
    PinAuthorizationView,
    TwitterOAuthAgent,
    TwitterOAuthError,
    get_twitter_oauth_settings,
)
from twitter_oauth.account import get_user_info

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def main() -> int:
    """Sign in with the PIN flow using the consumer credential from the environment."""
    settings = get_twitter_oauth_settings()
    listener = FutureListener()
    agent = TwitterOAuthAgent.from_settings(
        listener,
        settings=settings,
        authorization_view=PinAuthorizationView(),
    )

    try:
        agent.start_auth_process()
        outcome = await listener
        access_token = outcome.unwrap()
        user = await get_user_info(agent.consumer, access_token)
    except TwitterOAuthError as e:
        logger.error(f"Sign-in failed: {str(e)}")
        return 1
    finally:
        await agent.aclose()

    print(f"Signed in as @{user['screen_name']}")
    print(f"oauth_token={access_token.key}")
    print(f"oauth_token_secret={access_token.secret}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
