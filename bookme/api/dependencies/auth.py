# bookme/api/dependencies/auth.py
"""
Authentication dependencies.

Resolves the bearer token to an active ``User``. Any failure (missing
header, bad signature, expired token, unknown or inactive user) is a 401.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from sqlalchemy.orm import Session

from ...auth import decode_access_token
from ...core.exceptions import UnauthorizedException
from ...models.user import User
from ...repositories.factory import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(message: str = "Could not validate credentials") -> HTTPException:
    return UnauthorizedException(message).to_http_exception()


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")

    try:
        payload = decode_access_token(credentials.credentials, request.app.state.settings)
    except jwt.PyJWTError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise _unauthorized()

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise _unauthorized()

    user = RepositoryFactory.create_user_repository(db).get_active(user_id)
    if user is None:
        logger.info("Token subject %s is unknown or inactive", user_id)
        raise _unauthorized()
    return user
