"""
Product repository for data access layer following Repository pattern
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
from bson import ObjectId

from pymongo.errors import PyMongoError
from motor.motor_asyncio import AsyncIOMotorCollection

from app.core.errors import ErrorResponse
from app.core.logger import logger
from app.schemas.product import ProductResponse

SortSpec = List[Tuple[str, int]]


def to_object_id(value: Any) -> Any:
    """Store references as ObjectId when they look like one"""
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


class ProductRepository:
    """Repository for product data access operations"""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    def _doc_to_response(self, doc: dict) -> Optional[ProductResponse]:
        """Convert MongoDB document to ProductResponse schema"""
        if not doc:
            return None

        doc["id"] = str(doc.pop("_id"))
        if doc.get("added_by") is not None:
            doc["added_by"] = str(doc["added_by"])

        for field in ["created_at", "updated_at"]:
            if field in doc and not isinstance(doc[field], datetime):
                doc[field] = datetime.now(timezone.utc)

        return ProductResponse(**doc)

    async def create(self, product_data: Dict[str, Any], added_by: str) -> ProductResponse:
        """Insert a new product; aggregates always start at zero"""
        try:
            now = datetime.now(timezone.utc)
            doc = dict(product_data)
            doc.update({
                "added_by": to_object_id(added_by),
                "rating": 0.0,
                "review_count": 0,
                "created_at": now,
                "updated_at": now,
            })

            result = await self.collection.insert_one(doc)

            created_doc = await self.collection.find_one({"_id": result.inserted_id})
            return self._doc_to_response(created_doc)

        except PyMongoError as e:
            logger.error(f"MongoDB error creating product: {e}")
            raise ErrorResponse("Database error during product creation", status_code=503)

    async def get_by_id(self, product_id: str) -> Optional[ProductResponse]:
        """Get product by ID"""
        try:
            if not ObjectId.is_valid(product_id):
                return None

            doc = await self.collection.find_one({"_id": ObjectId(product_id)})
            return self._doc_to_response(doc) if doc else None

        except PyMongoError as e:
            logger.error(f"MongoDB error getting product: {e}")
            raise ErrorResponse("Database error during product retrieval", status_code=503)

    async def get_many(self, product_ids: Sequence[str]) -> Dict[str, ProductResponse]:
        """Fetch several products at once, keyed by ID; unknown IDs are skipped"""
        object_ids = [ObjectId(pid) for pid in set(product_ids) if ObjectId.is_valid(pid)]
        if not object_ids:
            return {}
        try:
            cursor = self.collection.find({"_id": {"$in": object_ids}})
            docs = await cursor.to_list(length=len(object_ids))
            products = [self._doc_to_response(doc) for doc in docs]
            return {product.id: product for product in products}

        except PyMongoError as e:
            logger.error(f"MongoDB error getting products: {e}")
            raise ErrorResponse("Database error during product retrieval", status_code=503)

    async def update(self, product_id: str, changes: Dict[str, Any]) -> Optional[ProductResponse]:
        """Apply already-whitelisted field changes"""
        try:
            if not ObjectId.is_valid(product_id):
                return None

            obj_id = ObjectId(product_id)
            update_data = dict(changes)
            update_data["updated_at"] = datetime.now(timezone.utc)

            result = await self.collection.update_one({"_id": obj_id}, {"$set": update_data})
            if result.matched_count == 0:
                return None

            updated_doc = await self.collection.find_one({"_id": obj_id})
            return self._doc_to_response(updated_doc)

        except PyMongoError as e:
            logger.error(f"MongoDB error updating product: {e}")
            raise ErrorResponse("Database error during product update", status_code=503)

    async def delete(self, product_id: str) -> bool:
        """Hard delete a product; reviews are removed by the caller"""
        try:
            if not ObjectId.is_valid(product_id):
                return False

            result = await self.collection.delete_one({"_id": ObjectId(product_id)})
            return result.deleted_count > 0

        except PyMongoError as e:
            logger.error(f"MongoDB error deleting product: {e}")
            raise ErrorResponse("Database error during product deletion", status_code=503)

    async def set_review_aggregates(self, product_id: str, rating: float, review_count: int) -> bool:
        """
        Write the derived rating fields. Returns False when the product no
        longer exists. Only the rating aggregator calls this.
        """
        try:
            if not ObjectId.is_valid(product_id):
                return False

            result = await self.collection.update_one(
                {"_id": ObjectId(product_id)},
                {"$set": {
                    "rating": rating,
                    "review_count": review_count,
                    "updated_at": datetime.now(timezone.utc),
                }}
            )
            return result.matched_count > 0

        except PyMongoError as e:
            logger.error(f"MongoDB error updating review aggregates: {e}")
            raise ErrorResponse("Database error during rating update", status_code=503)

    async def find(self,
                   query: Dict[str, Any],
                   sort: SortSpec = None,
                   skip: int = 0,
                   limit: int = None) -> List[ProductResponse]:
        """Run a filter built by the query builder"""
        try:
            cursor = self.collection.find(query)
            if sort:
                cursor = cursor.sort(sort)
            if skip:
                cursor = cursor.skip(skip)
            if limit is not None:
                cursor = cursor.limit(limit)

            docs = await cursor.to_list(length=limit)
            return [self._doc_to_response(doc) for doc in docs]

        except PyMongoError as e:
            logger.error(f"MongoDB error listing products: {e}")
            raise ErrorResponse("Database error during product listing", status_code=503)

    async def count(self, query: Dict[str, Any]) -> int:
        try:
            return await self.collection.count_documents(query)
        except PyMongoError as e:
            logger.error(f"MongoDB error counting products: {e}")
            raise ErrorResponse("Database error during product listing", status_code=503)

    async def find_by_owner(self, user_id: str, limit: int = 10) -> List[ProductResponse]:
        """Newest products added by a user"""
        return await self.find(
            {"added_by": to_object_id(user_id)},
            sort=[("created_at", -1)],
            limit=limit,
        )
