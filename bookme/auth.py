"""
Bearer-token helpers for BookMe.

Tokens are issued by the identity service; the booking core only verifies
them. ``sub`` carries the user id.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

import jwt

from .core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def _secret_value(secret_obj: Any) -> str:
    getter = getattr(secret_obj, "get_secret_value", None)
    if callable(getter):
        return cast(str, getter())
    return cast(str, secret_obj)


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Create a signed JWT access token.

    Args:
        data: Claims to encode; ``sub`` should be the user id
        expires_delta: Optional lifetime, defaults to the configured expiry
        settings: Settings to sign with, defaults to the process settings

    Returns:
        str: The encoded JWT token
    """
    cfg = settings or default_settings
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=cfg.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "iat": datetime.now(timezone.utc)})

    encoded_jwt = cast(
        str, jwt.encode(to_encode, _secret_value(cfg.secret_key), algorithm=cfg.algorithm)
    )
    logger.debug(f"Created access token for user: {data.get('sub')}")
    return encoded_jwt


def decode_access_token(token: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Decode and verify a JWT access token.

    Raises:
        jwt.PyJWTError: Signature, expiry or format is invalid
    """
    cfg = settings or default_settings
    payload_raw = jwt.decode(
        token,
        _secret_value(cfg.secret_key),
        algorithms=[cfg.algorithm],
        options={"require": ["exp", "sub"]},
    )
    return cast(Dict[str, Any], payload_raw)
