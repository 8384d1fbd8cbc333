"""Context search clients and selection helpers."""
from __future__ import annotations

import logging

from ..config import Settings
from .base import DEFAULT_TOP_K, ContextSearchClient
from .memory import InMemoryContextSearch
from .remote import RemoteContextSearch

__all__ = [
    "DEFAULT_TOP_K",
    "ContextSearchClient",
    "InMemoryContextSearch",
    "RemoteContextSearch",
    "get_default_search",
]

logger = logging.getLogger(__name__)


def get_default_search(settings: Settings | None = None) -> ContextSearchClient:
    """Pick the remote search client when ``USE_REAL_VECTOR_DB`` is enabled."""
    settings = settings or Settings.from_env()
    if settings.use_real_vector_db:
        logger.info("Using remote vector database at %s", settings.vector_db_api_url)
        return RemoteContextSearch(
            settings.vector_db_api_url,
            launch_command=settings.vector_db_launch_command,
        )
    logger.info("Using in-memory context search")
    return InMemoryContextSearch()
