"""
backend/app/database.py

Purpose:
    MongoDB connection bootstrap and index management for the three ledger
    collections (pending_wagers, settled_entries, deficits).

Dependencies:
    - motor.motor_asyncio
    - app.config
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.config import settings

client: AsyncIOMotorClient = None
db: AsyncIOMotorDatabase = None

logger = logging.getLogger("wagerbook.database")


async def connect_db() -> None:
    global client, db
    client = AsyncIOMotorClient(
        settings.MONGO_URI,
        maxPoolSize=25,
        minPoolSize=1,
    )
    db = client[settings.MONGO_DB]
    await _ensure_indexes()


async def close_db() -> None:
    global client
    if client:
        client.close()


async def get_db() -> AsyncIOMotorDatabase:
    return db


async def _ensure_indexes() -> None:
    """Create indexes on startup. Idempotent."""

    # ---- Pending wagers ----
    await db.pending_wagers.create_index("game_id", sparse=True)
    await db.pending_wagers.create_index("game_key", sparse=True)
    await db.pending_wagers.create_index([("sport", 1), ("date", 1), ("team", 1)])

    # ---- Settled entries ----
    await db.settled_entries.create_index("settled_at")
    await db.settled_entries.create_index("date")

    # ---- Deficits ----
    # Not unique: legacy rows may share a timestamp.
    await db.deficits.create_index("settled_at")

    logger.info("Ledger indexes ensured")
