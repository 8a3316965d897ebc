"""
CNVTBOT Database Connection

Process-wide asyncpg pool for the snapshot store. Opened lazily on the
first query, closed by the application lifespan.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import asyncpg
from asyncpg import Connection, Pool

from cnvtbot.config import get_settings

logger = logging.getLogger(__name__)

_pool: Pool | None = None


async def get_pool() -> Pool:
    global _pool
    if _pool is None:
        settings = get_settings()
        # Snapshot reads are one row per event; a small pool is plenty
        _pool = await asyncpg.create_pool(
            host=settings.database_host,
            port=settings.database_port,
            database=settings.database_name,
            user=settings.database_user,
            password=settings.database_password,
            min_size=1,
            max_size=5,
            command_timeout=30,
            ssl=settings.database_ssl_mode,
        )
        logger.info(
            f"Database pool created: {settings.database_host}:{settings.database_port}"
            f"/{settings.database_name}"
        )
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("Database pool closed")


@asynccontextmanager
async def get_connection() -> AsyncGenerator[Connection, None]:
    pool = await get_pool()
    async with pool.acquire() as connection:
        yield connection


async def check_connection() -> bool:
    """SELECT 1 through the pool; False (and an error log) when the database is unreachable."""
    try:
        async with get_connection() as conn:
            return await conn.fetchval("SELECT 1") == 1
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
        logger.error(f"Database connection check failed: {e}")
        return False
