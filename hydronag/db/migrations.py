"""Schema setup, tracked with SQLite's user_version pragma."""

import logging
from pathlib import Path

import aiosqlite

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
SCHEMA_PATH = Path(__file__).parent / "schema.sql"


async def init_database(db: aiosqlite.Connection) -> None:
    """Create all tables and indexes (statements are IF NOT EXISTS)."""
    with open(SCHEMA_PATH) as f:
        schema_sql = f.read()

    await db.executescript(schema_sql)


async def run_migrations(db_path: Path) -> None:
    """Bring the database at db_path up to SCHEMA_VERSION."""
    async with aiosqlite.connect(db_path) as db:
        async with db.execute("PRAGMA user_version") as cursor:
            (version,) = await cursor.fetchone()

        if version >= SCHEMA_VERSION:
            logger.debug(f"Database at {db_path} is up to date (version {version})")
            return

        await init_database(db)
        await db.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
        await db.commit()

        logger.info(f"Database at {db_path} migrated from version {version} to {SCHEMA_VERSION}")
