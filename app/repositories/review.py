"""
Review repository: review documents, the helpful-voter set and rating statistics
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from bson import ObjectId

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError
from motor.motor_asyncio import AsyncIOMotorCollection

from app.core.errors import ConflictError, ErrorResponse
from app.core.logger import logger
from app.models.review import Review
from app.repositories.product import to_object_id

# Attempts before a toggle that keeps losing races falls back to an existence check
TOGGLE_ATTEMPTS = 3


class ReviewRepository:
    """Repository for review data access operations"""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    def _doc_to_review(self, doc: dict) -> Optional[Review]:
        if not doc:
            return None

        doc["id"] = str(doc.pop("_id"))
        doc["product"] = str(doc["product"])
        doc["user"] = str(doc["user"])
        doc["helpful_votes"] = [str(voter) for voter in doc.get("helpful_votes", [])]
        return Review(**doc)

    async def create(self, product_id: str, user_id: str, review_data: Dict[str, Any]) -> Review:
        """
        Insert a review. The unique (product, user) index turns a concurrent
        duplicate into a ConflictError.
        """
        try:
            now = datetime.now(timezone.utc)
            doc = dict(review_data)
            doc.update({
                "product": to_object_id(product_id),
                "user": to_object_id(user_id),
                "helpful": 0,
                "helpful_votes": [],
                "created_at": now,
                "updated_at": now,
            })
            doc.setdefault("verified", False)

            result = await self.collection.insert_one(doc)

            created_doc = await self.collection.find_one({"_id": result.inserted_id})
            return self._doc_to_review(created_doc)

        except DuplicateKeyError:
            raise ConflictError(
                "You have already reviewed this product",
                details={"product_id": product_id}
            )
        except PyMongoError as e:
            logger.error(f"MongoDB error creating review: {e}")
            raise ErrorResponse("Database error during review creation", status_code=503)

    async def get_by_id(self, review_id: str) -> Optional[Review]:
        try:
            if not ObjectId.is_valid(review_id):
                return None

            doc = await self.collection.find_one({"_id": ObjectId(review_id)})
            return self._doc_to_review(doc)

        except PyMongoError as e:
            logger.error(f"MongoDB error getting review: {e}")
            raise ErrorResponse("Database error during review retrieval", status_code=503)

    async def find_by_product_and_user(self, product_id: str, user_id: str) -> Optional[Review]:
        try:
            doc = await self.collection.find_one({
                "product": to_object_id(product_id),
                "user": to_object_id(user_id),
            })
            return self._doc_to_review(doc)

        except PyMongoError as e:
            logger.error(f"MongoDB error getting review: {e}")
            raise ErrorResponse("Database error during review retrieval", status_code=503)

    async def list_by_product(self, product_id: str, skip: int = 0, limit: int = None) -> List[Review]:
        """Reviews of a product, newest first"""
        try:
            cursor = self.collection.find({"product": to_object_id(product_id)}).sort("created_at", -1)
            if skip:
                cursor = cursor.skip(skip)
            if limit is not None:
                cursor = cursor.limit(limit)

            docs = await cursor.to_list(length=limit)
            return [self._doc_to_review(doc) for doc in docs]

        except PyMongoError as e:
            logger.error(f"MongoDB error listing reviews: {e}")
            raise ErrorResponse("Database error during review listing", status_code=503)

    async def count_by_product(self, product_id: str) -> int:
        try:
            return await self.collection.count_documents({"product": to_object_id(product_id)})
        except PyMongoError as e:
            logger.error(f"MongoDB error counting reviews: {e}")
            raise ErrorResponse("Database error during review listing", status_code=503)

    async def list_by_user(self, user_id: str, limit: int = 10) -> List[Review]:
        """A user's reviews, newest first"""
        try:
            cursor = self.collection.find({"user": to_object_id(user_id)}).sort("created_at", -1).limit(limit)
            docs = await cursor.to_list(length=limit)
            return [self._doc_to_review(doc) for doc in docs]

        except PyMongoError as e:
            logger.error(f"MongoDB error listing user reviews: {e}")
            raise ErrorResponse("Database error during review listing", status_code=503)

    async def rating_stats(self, product_id: str) -> Tuple[float, int]:
        """Mean rating and review count of a product, computed by the server"""
        try:
            pipeline = [
                {"$match": {"product": to_object_id(product_id)}},
                {"$group": {
                    "_id": None,
                    "rating": {"$avg": "$rating"},
                    "count": {"$sum": 1},
                }},
            ]
            results = await self.collection.aggregate(pipeline).to_list(length=1)
            if not results:
                return 0.0, 0
            return float(results[0]["rating"]), int(results[0]["count"])

        except PyMongoError as e:
            logger.error(f"MongoDB error computing rating stats: {e}")
            raise ErrorResponse("Database error during rating computation", status_code=503)

    async def update(self, review_id: str, user_id: str, changes: Dict[str, Any]) -> Optional[Review]:
        """Apply whitelisted changes; the author filter is re-checked at write time"""
        try:
            if not ObjectId.is_valid(review_id):
                return None

            update_data = dict(changes)
            update_data["updated_at"] = datetime.now(timezone.utc)

            doc = await self.collection.find_one_and_update(
                {"_id": ObjectId(review_id), "user": to_object_id(user_id)},
                {"$set": update_data},
                return_document=ReturnDocument.AFTER,
            )
            return self._doc_to_review(doc)

        except PyMongoError as e:
            logger.error(f"MongoDB error updating review: {e}")
            raise ErrorResponse("Database error during review update", status_code=503)

    async def delete(self, review_id: str) -> Optional[Review]:
        """Delete a review, returning the removed document"""
        try:
            if not ObjectId.is_valid(review_id):
                return None

            doc = await self.collection.find_one_and_delete({"_id": ObjectId(review_id)})
            return self._doc_to_review(doc)

        except PyMongoError as e:
            logger.error(f"MongoDB error deleting review: {e}")
            raise ErrorResponse("Database error during review deletion", status_code=503)

    async def delete_by_product(self, product_id: str) -> int:
        try:
            result = await self.collection.delete_many({"product": to_object_id(product_id)})
            return result.deleted_count

        except PyMongoError as e:
            logger.error(f"MongoDB error deleting product reviews: {e}")
            raise ErrorResponse("Database error during review deletion", status_code=503)

    async def toggle_helpful(self, review_id: str, user_id: str) -> Optional[int]:
        """
        Add the user to the helpful-voter set, or remove them if already
        present. Each branch is a single conditional update, so concurrent
        toggles never double count. Returns the new set size, or None when
        the review does not exist.
        """
        try:
            if not ObjectId.is_valid(review_id):
                return None

            review_oid = ObjectId(review_id)
            voter = to_object_id(user_id)

            for _ in range(TOGGLE_ATTEMPTS):
                doc = await self.collection.find_one_and_update(
                    {"_id": review_oid, "helpful_votes": {"$ne": voter}},
                    {"$addToSet": {"helpful_votes": voter}, "$inc": {"helpful": 1}},
                    projection={"helpful_votes": 1},
                    return_document=ReturnDocument.AFTER,
                )
                if doc is None:
                    doc = await self.collection.find_one_and_update(
                        {"_id": review_oid, "helpful_votes": voter},
                        {"$pull": {"helpful_votes": voter}, "$inc": {"helpful": -1}},
                        projection={"helpful_votes": 1},
                        return_document=ReturnDocument.AFTER,
                    )
                if doc is not None:
                    return len(doc.get("helpful_votes", []))

                if await self.collection.count_documents({"_id": review_oid}, limit=1) == 0:
                    return None

            raise ErrorResponse("Helpful vote could not be applied, please retry", status_code=409)

        except PyMongoError as e:
            logger.error(f"MongoDB error toggling helpful vote: {e}")
            raise ErrorResponse("Database error during helpful vote", status_code=503)
