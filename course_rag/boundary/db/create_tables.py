"""
Database table creation script.

Enables the pgvector extension and creates the material, content and chunk
embedding tables defined in the ORM models.

Dependencies: sqlalchemy, asyncpg, course_rag.configs
System role: Database schema initialization

Usage:
    python -m course_rag.boundary.db.create_tables
"""

import asyncio
import logging
import time

from course_rag.boundary.db.connection import create_tables, get_async_engine
from course_rag.configs import get_settings
from course_rag.observability.log_utils import elapsed_ms, log_with_context
from course_rag.observability.logger import configure_logging, get_logger

logger = get_logger(__name__)


async def create_all_tables() -> None:
    """
    Create all index tables from registered ORM models.

    Idempotent: CREATE EXTENSION and CREATE TABLE only run for objects that
    do not exist yet, so it is safe to run repeatedly.

    Raises:
        SQLAlchemyError: If the connection or table creation fails
    """
    settings = get_settings()
    engine = get_async_engine(settings.database)
    start = time.perf_counter()
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()

    log_with_context(
        logger,
        logging.INFO,
        f"{__name__}:create_all_tables - Index tables ready",
        host=settings.database.host,
        database=settings.database.db,
        embedding_dimension=settings.embedding.dimension,
        elapsed_ms=elapsed_ms(start),
    )


if __name__ == "__main__":
    configure_logging()
    asyncio.run(create_all_tables())
