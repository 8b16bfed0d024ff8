"""
Bearer token helpers.

The host application signs a short JWT whose `sub` claim is the user id.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt

from rdb.core import config
from rdb.utils import get_logger


log = get_logger(__name__)


def encode_token(user_id: int, expires_in: timedelta = timedelta(hours=8)) -> str:
    """Issue a token for `user_id` the way the host does."""
    payload = {
        "sub": str(user_id),
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, config.SESSION_SECRET, algorithm=config.SESSION_ALGORITHM)


def verify_token(token: str) -> Optional[int]:
    """
    Verify a host-issued token.

    Returns:
        The user id carried by the token, or None when the token is
        expired, badly signed or malformed.
    """
    try:
        payload = jwt.decode(
            token,
            config.SESSION_SECRET,
            algorithms=[config.SESSION_ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        log.info("Rejected expired token")
        return None
    except jwt.InvalidTokenError as e:
        log.info("Rejected invalid token: %s", e)
        return None

    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        log.info("Rejected token without a usable subject")
        return None
