from enum import Enum


class OAuthProvider(str, Enum):
    """Supported OAuth identity providers."""

    GOOGLE = "google"
    FACEBOOK = "facebook"
    TWITTER = "twitter"
