"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from blog_api.config import get_settings
from blog_api.db import InMemoryPostStore, MongoPostStore, PostStore, SqlPostStore

logger = logging.getLogger(__name__)

_post_store: PostStore | None = None


def get_post_store() -> PostStore:
    """
    Return a singleton post store so state persists across requests.
    """
    global _post_store
    if _post_store:
        return _post_store

    settings = get_settings()
    if settings.use_in_memory_backends or not (
        settings.mongo_url or settings.database_url
    ):
        logger.info("Using in-memory post store")
        _post_store = InMemoryPostStore()
    elif settings.mongo_url:
        _post_store = MongoPostStore.from_url(
            settings.mongo_url,
            database=settings.mongo_database,
            collection=settings.mongo_collection,
        )
    else:
        logger.info("Using SQL post store")
        _post_store = SqlPostStore(settings.database_url)
    return _post_store


def reset_post_store() -> None:
    """Drop the cached store so the next request re-reads settings."""
    global _post_store
    _post_store = None
