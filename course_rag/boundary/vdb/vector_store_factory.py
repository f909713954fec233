"""
Index store factory selecting between pgvector (prod) and in-memory (dev).

Depends on the INDEX_STORE_TYPE environment variable.

Dependencies: course_rag.boundary.vdb, course_rag.configs
System role: Index store instantiation and selection
"""

import logging

from course_rag.boundary.vdb.base_store import MaterialIndexStore
from course_rag.configs import get_settings

logger = logging.getLogger(__name__)


def get_index_store(store_type: str | None = None) -> MaterialIndexStore:
    """
    Build the configured index store.

    Args:
        store_type: Override for INDEX_STORE_TYPE

    Returns:
        PgVectorIndexStore or InMemoryIndexStore

    Raises:
        ValueError: If the store type is unknown
    """
    store_type = (store_type or get_settings().index_store.type).lower()

    if store_type == "memory":
        from course_rag.boundary.vdb.memory_store import InMemoryIndexStore

        logger.info(f"{__name__}:get_index_store - Creating in-memory index store (local dev mode)")
        return InMemoryIndexStore()

    elif store_type == "pgvector":
        from course_rag.boundary.vdb.pgvector_store import PgVectorIndexStore

        logger.info(f"{__name__}:get_index_store - Creating pgvector index store (production mode)")
        return PgVectorIndexStore()

    else:
        raise ValueError(
            f"Invalid INDEX_STORE_TYPE: {store_type}. "
            f"Must be 'memory' (dev) or 'pgvector' (production)."
        )
