"""Select and build the configured mapping store."""

import logging
from typing import Optional

from .base import MappingStoreBase
from .filestore import FileMappingStore
from .mongodb import MongoMappingStore
from ..errors import StartupError


BACKEND_MONGODB = "mongodb"
BACKEND_FILE = "file"

SUPPORTED_BACKENDS = (BACKEND_MONGODB, BACKEND_FILE)


def build_store(config, logger: Optional[logging.Logger] = None) -> MappingStoreBase:
    """Build the store named by ``config.storage_backend``.

    The store is returned unconnected; call ``await store.connect()``.

    Args:
        config: Application configuration
        logger: Optional logger passed to the store

    Returns:
        Store instance

    Raises:
        StartupError: If the backend is unknown or MongoDB has no URI
    """
    backend = config.storage_backend.lower()

    if backend == BACKEND_MONGODB:
        if not config.mongodb_uri:
            raise StartupError("MONGODB_URI not set")
        return MongoMappingStore(
            db_config=config.mongodb_uri,
            database=config.mongodb_database,
            collection=config.mongodb_collection,
            timeout_seconds=config.mongodb_timeout_seconds,
            logger=logger,
        )

    if backend == BACKEND_FILE:
        return FileMappingStore(db_config=config.data_file, logger=logger)

    raise StartupError(
        f"Unknown storage backend '{config.storage_backend}' "
        f"(expected one of: {', '.join(SUPPORTED_BACKENDS)})"
    )
