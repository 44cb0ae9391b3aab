"""
Unit tests for the rating aggregator.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock

from app.services.rating_aggregator import RatingAggregator


@pytest.fixture
def mock_review_repository():
    repo = AsyncMock()
    repo.rating_stats.return_value = (3.5, 2)
    return repo


@pytest.fixture
def mock_product_repository():
    repo = AsyncMock()
    repo.set_review_aggregates.return_value = True
    return repo


@pytest.fixture
def aggregator(mock_review_repository, mock_product_repository):
    return RatingAggregator(mock_review_repository, mock_product_repository)


class TestRecompute:

    @pytest.mark.asyncio
    async def test_writes_mean_and_count(self, aggregator, mock_product_repository):
        result = await aggregator.recompute("p1")

        mock_product_repository.set_review_aggregates.assert_awaited_once_with("p1", 3.5, 2)
        assert result == {"rating": 3.5, "reviewCount": 2}

    @pytest.mark.asyncio
    async def test_no_reviews_resets_to_zero(self, aggregator, mock_review_repository, mock_product_repository):
        mock_review_repository.rating_stats.return_value = (0.0, 0)

        result = await aggregator.recompute("p1")

        mock_product_repository.set_review_aggregates.assert_awaited_once_with("p1", 0.0, 0)
        assert result == {"rating": 0.0, "reviewCount": 0}

    @pytest.mark.asyncio
    async def test_missing_product_is_not_an_error(self, aggregator, mock_product_repository):
        mock_product_repository.set_review_aggregates.return_value = False

        assert await aggregator.recompute("gone") is None

    @pytest.mark.asyncio
    async def test_same_product_shares_a_lock(self, aggregator, mock_review_repository, mock_product_repository):
        assert aggregator.lock_for("p1") is aggregator.lock_for("p1")
        assert aggregator.lock_for("p1") is not aggregator.lock_for("p2")

        other = RatingAggregator(mock_review_repository, mock_product_repository)
        assert other.lock_for("p1") is aggregator.lock_for("p1")

    @pytest.mark.asyncio
    async def test_recomputes_for_one_product_do_not_interleave(
        self, aggregator, mock_review_repository, mock_product_repository
    ):
        events = []

        async def slow_stats(product_id):
            events.append("read")
            await asyncio.sleep(0.01)
            return 4.0, 1

        async def record_write(product_id, rating, review_count):
            events.append("write")
            return True

        mock_review_repository.rating_stats.side_effect = slow_stats
        mock_product_repository.set_review_aggregates.side_effect = record_write

        await asyncio.gather(aggregator.recompute("p1"), aggregator.recompute("p1"))

        assert events == ["read", "write", "read", "write"]
