"""
Rating Aggregator

Keeps a product's `rating` and `review_count` equal to the mean and count of
its reviews. It is the only writer of those two fields.

Recomputes for the same product run one at a time: the statistics read and
the product write both happen inside a per-product lock, so whichever
recompute runs last observes every review write committed before it.
"""

import asyncio
import weakref
from typing import Dict, Optional

from app.core.logger import logger
from app.repositories.product import ProductRepository
from app.repositories.review import ReviewRepository


class RatingAggregator:
    """Recomputes derived rating fields after review writes"""

    def __init__(self, review_repository: ReviewRepository, product_repository: ProductRepository):
        self.review_repository = review_repository
        self.product_repository = product_repository

    def lock_for(self, product_id: str) -> asyncio.Lock:
        return _product_locks.lock_for(product_id)

    async def recompute(self, product_id: str) -> Optional[Dict[str, float]]:
        """
        Recompute and persist the aggregates of one product.

        Returns {"rating": float, "reviewCount": int}, or None when the
        product no longer exists (a delete won the race), which is not an
        error.
        """
        async with self.lock_for(product_id):
            rating, review_count = await self.review_repository.rating_stats(product_id)
            updated = await self.product_repository.set_review_aggregates(
                product_id, rating, review_count
            )

        if not updated:
            logger.warning(
                f"Product not found for review aggregate update: {product_id}",
                metadata={"event": "review_aggregate_product_not_found", "productId": product_id}
            )
            return None

        logger.info(
            f"Updated review aggregates for product {product_id}",
            metadata={
                "event": "review_aggregates_updated",
                "productId": product_id,
                "rating": rating,
                "reviewCount": review_count,
            }
        )
        return {"rating": rating, "reviewCount": review_count}


class _ProductLocks:
    """Process-wide registry of per-product locks; idle locks are dropped"""

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def lock_for(self, product_id: str) -> asyncio.Lock:
        lock = self._locks.get(product_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[product_id] = lock
        return lock


# Shared by every aggregator instance; services are built per request
_product_locks = _ProductLocks()
