# twitter_oauth/config.py
"""
Configuration for the Twitter OAuth agent
"""

from functools import lru_cache

from pydantic_settings import BaseSettings

class TwitterOAuthSettings(BaseSettings):
    """
    Twitter OAuth settings

    These settings can be configured via environment variables
    prefixed with TWITTER_, e.g., TWITTER_CONSUMER_KEY
    """
    # Consumer credential
    CONSUMER_KEY: str = ""
    CONSUMER_SECRET: str = ""

    # OAuth endpoints
    OAUTH_BASE_URL: str = "https://api.twitter.com/oauth"
    OAUTH_CALLBACK_URL: str = "oob"  # "oob" selects the PIN-based flow

    # Authorization page
    FORCE_LOGIN: bool = False

    # Transport
    REQUEST_TIMEOUT: float = 30.0

    class Config:
        env_prefix = "TWITTER_"
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_twitter_oauth_settings():
    """
    Get the Twitter OAuth settings, cached to avoid reloading
    """
    return TwitterOAuthSettings()
