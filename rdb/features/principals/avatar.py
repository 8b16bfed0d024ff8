"""
Gravatar URLs for user principals.
"""
import hashlib
from typing import Optional
from urllib.parse import urlencode

from rdb.core import config

GRAVATAR_BASE_URL = "https://secure.gravatar.com/avatar/"


def avatar_url(email: Optional[str], size: int = 128) -> Optional[str]:
    """
    Build the avatar URL for an e-mail address.

    Returns None when avatars are disabled or there is no address.
    """
    if not config.GRAVATAR_ENABLED or not email:
        return None

    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    query = urlencode({"rating": "PG", "size": size, "default": config.GRAVATAR_DEFAULT})
    return f"{GRAVATAR_BASE_URL}{digest}?{query}"
