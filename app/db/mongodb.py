"""
MongoDB connection management and index setup
"""

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING, TEXT, IndexModel
from pymongo.errors import PyMongoError
from typing import Optional

from app.core.config import config
from app.core.errors import ErrorResponse
from app.core.logger import logger

USERS = "users"
PRODUCTS = "products"
REVIEWS = "reviews"

INDEXES = {
    USERS: [
        IndexModel([("email", ASCENDING)], unique=True, name="email_unique"),
    ],
    PRODUCTS: [
        IndexModel(
            [("name", TEXT), ("description", TEXT), ("brand", TEXT)],
            name="product_text",
        ),
        IndexModel([("category", ASCENDING), ("price", ASCENDING)], name="category_price"),
        IndexModel([("rating", DESCENDING)], name="rating_desc"),
        IndexModel([("system_recommended", ASCENDING)], name="system_recommended"),
        IndexModel([("added_by", ASCENDING), ("created_at", DESCENDING)], name="owner_recent"),
    ],
    REVIEWS: [
        # One review per user per product, enforced by the store
        IndexModel([("product", ASCENDING), ("user", ASCENDING)], unique=True, name="product_user_unique"),
        IndexModel([("product", ASCENDING), ("created_at", DESCENDING)], name="product_recent"),
        IndexModel([("user", ASCENDING), ("created_at", DESCENDING)], name="user_recent"),
    ],
}


class Database:
    """Database connection manager"""

    client: Optional[AsyncIOMotorClient] = None
    database = None


db = Database()


async def connect_to_mongo():
    """Create database connection and make sure indexes exist"""
    logger.info("Connecting to MongoDB...")

    try:
        db.client = AsyncIOMotorClient(config.mongodb_url)
        db.database = db.client[config.mongodb_database]

        await db.client.admin.command('ping')
        await ensure_indexes(db.database)

        logger.info(
            f"Successfully connected to MongoDB database '{config.mongodb_database}'",
            metadata={
                "event": "mongodb_connected",
                "database": config.mongodb_database,
            }
        )
    except PyMongoError as e:
        logger.error(
            f"Could not connect to MongoDB: {e}",
            metadata={"event": "mongodb_connection_error", "error": str(e)}
        )
        raise ErrorResponse(
            f"Could not connect to MongoDB: {e}",
            status_code=503
        )


async def ensure_indexes(database):
    """Create the uniqueness, text and sort indexes the queries rely on"""
    for collection_name, indexes in INDEXES.items():
        created = await database[collection_name].create_indexes(indexes)
        logger.debug(
            f"Indexes ensured on {collection_name}",
            metadata={"event": "indexes_ensured", "collection": collection_name, "indexes": created}
        )


async def close_mongo_connection():
    """Close database connection"""
    logger.info("Closing connection to MongoDB...")
    if db.client is not None:
        db.client.close()
        db.client = None
        db.database = None


async def get_database():
    """Get database instance"""
    if db.database is None:
        await connect_to_mongo()
    return db.database


async def get_user_collection():
    database = await get_database()
    return database[USERS]


async def get_product_collection():
    database = await get_database()
    return database[PRODUCTS]


async def get_review_collection():
    database = await get_database()
    return database[REVIEWS]
