#!/usr/bin/env python3

import asyncio
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from dotenv import load_dotenv

# Load environment variables before the app config is built
load_dotenv()

from motor.motor_asyncio import AsyncIOMotorClient

from app.core.config import config
from app.db.mongodb import PRODUCTS, REVIEWS, USERS, ensure_indexes
from app.models.user import Role, User, UserType
from app.repositories import ProductRepository, ReviewRepository, UserRepository
from app.schemas.product import ProductCreate
from app.services import ProductService, ReviewService
from app.services.auth import hash_password

SYSTEM_EMAIL = "system@marketplace.local"

SAMPLE_PRODUCTS = [
    {
        "name": "EduBook Pro 14",
        "category": "laptop",
        "description": "Lightweight 14-inch laptop with all-day battery for classroom and homework use",
        "price": 549.0,
        "brand": "EduTech",
        "features": ["14-inch display", "16 GB RAM", "12h battery"],
        "badges": ["best-value", "student-discount"],
        "targetAudience": ["student", "teacher"],
        "useCase": ["programming", "homework", "research"],
        "initialReview": {"title": "Our classroom pick", "comment": "Fast, quiet and survives a full school day."},
    },
    {
        "name": "ClassCam 1080p",
        "category": "webcam",
        "description": "Full HD webcam with dual microphones for online lessons",
        "price": 79.0,
        "brand": "Lumen",
        "badges": ["top-rated"],
        "targetAudience": ["teacher"],
        "useCase": ["teaching-online", "meetings"],
        "initialReview": {
            "rating": 4,
            "title": "Clear picture",
            "comment": "Sharp image in dim rooms; the clip fits most monitors.",
        },
    },
    {
        "name": "Slate 10 Kids",
        "category": "tablet",
        "description": "Rugged 10-inch tablet with parental controls",
        "price": 199.0,
        "brand": "Slate",
        "badges": ["durable", "accessible"],
        "targetAudience": ["student", "parent"],
        "useCase": ["homework", "note-taking"],
        "initialReview": {"title": "Built for kids", "comment": "Survived drops that would break most tablets."},
    },
    {
        "name": "BeamBright 300",
        "category": "projector",
        "description": "Short-throw projector for presentations in small classrooms",
        "price": 429.0,
        "brand": "Beam",
        "badges": ["energy-efficient"],
        "targetAudience": ["teacher", "director"],
        "useCase": ["presentations"],
    },
]


class MarketplaceSeeder:
    def __init__(self):
        self.system_password = os.getenv("SEED_SYSTEM_PASSWORD")
        if not self.system_password:
            raise ValueError("SEED_SYSTEM_PASSWORD must be set in environment or .env file")

        self.client = None
        self.db = None

    async def connect(self):
        """Establish MongoDB connection"""
        print(f"Connecting to MongoDB database '{config.mongodb_database}'...")
        self.client = AsyncIOMotorClient(config.mongodb_url)
        self.db = self.client[config.mongodb_database]

        # Test connection
        await self.db.command('ping')
        await ensure_indexes(self.db)
        print("Successfully connected to MongoDB!")

    async def seed_data(self):
        """Main seeding method"""
        print("Seeding marketplace data...")

        try:
            await self.clear_data()
            system_user = await self.seed_system_user()
            await self.seed_products(system_user)

            print("Marketplace data seeding completed successfully!")
        except Exception as error:
            print(f"Error seeding marketplace data: {error}")
            raise error

    async def clear_data(self):
        print("Clearing existing marketplace data...")

        for collection in (REVIEWS, PRODUCTS, USERS):
            result = await self.db[collection].delete_many({})
            print(f"Deleted {result.deleted_count} documents from {collection}")

    async def seed_system_user(self) -> User:
        """The account whose products are flagged system-recommended"""
        now = datetime.now(timezone.utc)
        result = await self.db[USERS].insert_one({
            "username": "Marketplace Team",
            "email": SYSTEM_EMAIL,
            "password": hash_password(self.system_password),
            "role": Role.ADMIN.value,
            "user_type": UserType.ADMINISTRATOR.value,
            "preferences": {"language": "en", "theme": "dark", "notifications": True},
            "is_active": True,
            "is_system": True,
            "created_at": now,
            "updated_at": now,
        })
        print(f"Created system user {SYSTEM_EMAIL}")
        return User(id=str(result.inserted_id), role=Role.ADMIN.value)

    async def seed_products(self, system_user: User):
        product_repository = ProductRepository(self.db[PRODUCTS])
        review_repository = ReviewRepository(self.db[REVIEWS])
        user_repository = UserRepository(self.db[USERS])
        review_service = ReviewService(review_repository, product_repository, user_repository)
        service = ProductService(product_repository, user_repository, review_service)

        for data in SAMPLE_PRODUCTS:
            product = await service.create_product(ProductCreate(**data), system_user)
            print(f"Created product '{product.name}' (rating {product.rating}, {product.review_count} reviews)")

    async def close(self):
        if self.client:
            self.client.close()
            print("MongoDB connection closed")


async def main():
    seeder = MarketplaceSeeder()

    try:
        print("=" * 50)
        print("Review Marketplace Database Seeder")
        print("=" * 50)

        await seeder.connect()
        await seeder.seed_data()

        print("=" * 50)
        print("Marketplace database setup completed!")
        print("=" * 50)
    except Exception as error:
        print(f"Marketplace database setup failed: {error}")
        sys.exit(1)
    finally:
        await seeder.close()


if __name__ == "__main__":
    asyncio.run(main())
