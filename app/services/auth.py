"""
Registration, login and token issuance
"""

from datetime import datetime, timedelta, timezone
from typing import Tuple

import bcrypt
import jwt

from app.core.config import config
from app.core.errors import ConflictError, ErrorResponse, NotFoundError
from app.core.logger import logger
from app.models.user import UserAccount
from app.repositories.user import UserRepository
from app.schemas.auth import LoginRequest, RegisterRequest, UserResponse

BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def issue_token(account: UserAccount) -> str:
    """Signed JWT carrying the claims the auth dependency reads back"""
    now = datetime.now(timezone.utc)
    payload = {
        "id": account.id,
        "role": account.role,
        "iat": now,
        "exp": now + timedelta(seconds=config.jwt_expiration),
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def to_public(account: UserAccount) -> UserResponse:
    return UserResponse(**account.model_dump())


class AuthService:
    """Service layer for account registration and login"""

    def __init__(self, repository: UserRepository):
        self.repository = repository

    async def register(self, data: RegisterRequest) -> UserResponse:
        if await self.repository.get_by_email(data.email):
            raise ConflictError("Email already in use", status_code=400)

        account = await self.repository.create(data.username, data.email, hash_password(data.password))

        logger.info(
            f"Registered user {account.id}",
            user_id=account.id,
            metadata={"event": "user_registered"}
        )
        return to_public(account)

    async def login(self, data: LoginRequest) -> Tuple[str, UserResponse]:
        """Returns (token, user). Unknown email -> 404, wrong password -> 400"""
        account = await self.repository.get_by_email(data.email)
        if not account:
            raise NotFoundError("User not found")

        if not verify_password(data.password, account.password_hash):
            logger.warning(
                "Login rejected: incorrect password",
                user_id=account.id,
                metadata={"event": "login_failed"}
            )
            raise ErrorResponse("Incorrect password", status_code=400)

        token = issue_token(account)

        logger.info(f"User {account.id} logged in", user_id=account.id, metadata={"event": "user_logged_in"})
        return token, to_public(account)
