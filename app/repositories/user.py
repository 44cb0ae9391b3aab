"""
User repository
"""

from datetime import datetime, timezone
from typing import Dict, Optional, Sequence
from bson import ObjectId

from pymongo.errors import DuplicateKeyError, PyMongoError
from motor.motor_asyncio import AsyncIOMotorCollection

from app.core.errors import ConflictError, ErrorResponse
from app.core.logger import logger
from app.models.user import Preferences, Role, UserAccount, UserType


class UserRepository:
    """Repository for user accounts"""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    def _doc_to_account(self, doc: dict) -> Optional[UserAccount]:
        if not doc:
            return None

        doc["id"] = str(doc.pop("_id"))
        doc["password_hash"] = doc.pop("password", "")
        return UserAccount(**doc)

    async def create(self, username: str, email: str, password_hash: str) -> UserAccount:
        """Insert an account; the unique email index rejects duplicates"""
        try:
            now = datetime.now(timezone.utc)
            doc = {
                "username": username,
                "email": email,
                "password": password_hash,
                "role": Role.USER.value,
                "user_type": UserType.OTHER.value,
                "preferences": Preferences().model_dump(),
                "is_active": True,
                "is_system": False,
                "created_at": now,
                "updated_at": now,
            }

            result = await self.collection.insert_one(doc)

            created_doc = await self.collection.find_one({"_id": result.inserted_id})
            return self._doc_to_account(created_doc)

        except DuplicateKeyError:
            raise ConflictError("Email already in use", status_code=400)
        except PyMongoError as e:
            logger.error(f"MongoDB error creating user: {e}")
            raise ErrorResponse("Database error during registration", status_code=503)

    async def get_by_email(self, email: str) -> Optional[UserAccount]:
        try:
            doc = await self.collection.find_one({"email": email.strip().lower()})
            return self._doc_to_account(doc)

        except PyMongoError as e:
            logger.error(f"MongoDB error getting user: {e}")
            raise ErrorResponse("Database error during user retrieval", status_code=503)

    async def get_by_id(self, user_id: str) -> Optional[UserAccount]:
        try:
            if not ObjectId.is_valid(user_id):
                return None

            doc = await self.collection.find_one({"_id": ObjectId(user_id)})
            return self._doc_to_account(doc)

        except PyMongoError as e:
            logger.error(f"MongoDB error getting user: {e}")
            raise ErrorResponse("Database error during user retrieval", status_code=503)

    async def get_many(self, user_ids: Sequence[str]) -> Dict[str, UserAccount]:
        """Accounts keyed by ID, used to attach reviewer names"""
        object_ids = [ObjectId(uid) for uid in set(user_ids) if ObjectId.is_valid(uid)]
        if not object_ids:
            return {}
        try:
            cursor = self.collection.find({"_id": {"$in": object_ids}}, projection={"password": 0})
            docs = await cursor.to_list(length=len(object_ids))
            accounts = [self._doc_to_account(doc) for doc in docs]
            return {account.id: account for account in accounts}

        except PyMongoError as e:
            logger.error(f"MongoDB error getting users: {e}")
            raise ErrorResponse("Database error during user retrieval", status_code=503)
