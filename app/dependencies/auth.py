"""
Bearer-token dependencies.

Tokens are HS256 JWTs issued by the auth service; the `id` and `role`
claims become the acting User.
"""

from typing import Optional

import jwt
from fastapi import Header, HTTPException, status

from app.core.config import config
from app.core.logger import logger
from app.models.user import Role, User

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


class AuthError(Exception):
    """Token missing, malformed, expired or forged"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthError("Authentication required")

    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthError("Invalid authorization header format. Expected 'Bearer <token>'")
    return token


def decode_jwt(token: str) -> dict:
    try:
        return jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {e}", metadata={"event": "invalid_token"})
        raise AuthError("Invalid token")


def user_from_claims(payload: dict) -> User:
    user_id = payload.get("id")
    if not user_id:
        raise AuthError("Invalid token: Missing user identifier")
    return User(id=str(user_id), role=payload.get("role") or Role.USER.value)


def authenticate(authorization: Optional[str]) -> User:
    """Header value -> User; raises AuthError on any failure"""
    token = extract_bearer_token(authorization)
    return user_from_claims(decode_jwt(token))


async def get_current_user(
    authorization: Optional[str] = Header(None)
) -> User:
    """
    Dependency for routes that require a signed-in user.
    Raises 401 if authentication fails.
    """
    try:
        user = authenticate(authorization)
    except AuthError as e:
        logger.warning(f"Authentication failed: {e.message}", metadata={"event": "authentication_failed"})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers=BEARER_CHALLENGE,
        )

    logger.debug(f"Authentication successful for user: {user.id}")
    return user


async def get_current_user_optional(
    authorization: Optional[str] = Header(None)
) -> Optional[User]:
    """Same as get_current_user, but anonymous or bad tokens yield None"""
    try:
        return authenticate(authorization)
    except AuthError:
        return None
