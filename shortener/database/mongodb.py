"""MongoDB implementation of the URL mapping store."""

import logging
from typing import Optional, List, Any

from pymongo import AsyncMongoClient
from pymongo import errors as mongo_errors

from .base import MappingStoreBase
from .models import URLMapping
from ..errors import DuplicateKeyError, NotFoundError, StartupError, StorageError


class MongoMappingStore(MappingStoreBase):
    """MongoDB implementation of the URL mapping store.

    Each mapping is one document. MongoDB gives per-document atomicity only;
    visits use the inherited read-then-write ``record_visit``, so concurrent
    redirects of the same code can lose increments.
    """

    def __init__(
        self,
        db_config: str,
        database: str = "urlshortener",
        collection: str = "urls",
        timeout_seconds: int = 5,
        client: Optional[Any] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize MongoDB store.

        Args:
            db_config: MongoDB connection URI (mongodb://host:port)
            database: Database name
            collection: Collection name
            timeout_seconds: Bound on connect, server selection and each operation
            client: Optional pre-built client (the store will not own it)
            logger: Optional logger instance
        """
        super().__init__(db_config)

        self.logger = logger or logging.getLogger(__name__)
        self.database_name = database
        self.collection_name = collection
        self.timeout_seconds = timeout_seconds

        self._client = client
        self._owns_client = client is None
        self._collection = None

    def _create_client(self) -> AsyncMongoClient:
        timeout_ms = int(self.timeout_seconds * 1000)
        return AsyncMongoClient(
            self.db_config,
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
            timeoutMS=timeout_ms,
            tz_aware=True,
        )

    @property
    def collection(self):
        if self._collection is None:
            raise StorageError("MongoDB store is not connected")
        return self._collection

    async def connect(self) -> None:
        """Connect, ping, and ensure indexes exist.

        Raises:
            StartupError: If the server cannot be reached within the timeout
        """
        try:
            if self._client is None:
                self._client = self._create_client()

            await self._client.admin.command("ping")

            collection = self._client[self.database_name][self.collection_name]
            await collection.create_index("short_url", unique=True)
            await collection.create_index("long_url")
            self._collection = collection

        except mongo_errors.PyMongoError as e:
            self.logger.error(f"Failed to connect to MongoDB: {e}")
            raise StartupError(f"Failed to connect to MongoDB: {e}") from e

        self.logger.info(
            f"Connected to MongoDB collection {self.database_name}.{self.collection_name}"
        )

    async def insert(self, mapping: URLMapping) -> None:
        """Insert a new mapping document.

        Args:
            mapping: The mapping to store

        Raises:
            DuplicateKeyError: If the short code is already taken (unique index)
        """
        try:
            await self.collection.insert_one(mapping.to_document())
        except mongo_errors.DuplicateKeyError as e:
            raise DuplicateKeyError(f"Short code already exists: {mapping.short_code}") from e
        except mongo_errors.PyMongoError as e:
            self.logger.error(f"Error inserting short code {mapping.short_code}: {e}")
            raise StorageError(f"Failed to save URL mapping: {e}") from e

        self.logger.debug(f"Inserted short code {mapping.short_code}")

    async def _find_one(self, query: dict, description: str) -> URLMapping:
        try:
            doc = await self.collection.find_one(query, {"_id": 0})
        except mongo_errors.PyMongoError as e:
            self.logger.error(f"Error looking up {description}: {e}")
            raise StorageError(f"Failed to look up URL mapping: {e}") from e

        if doc is None:
            raise NotFoundError(f"{description} not found")
        return URLMapping.from_document(doc)

    async def find_by_code(self, short_code: str) -> URLMapping:
        """Get the mapping for a short code."""
        return await self._find_one({"short_url": short_code}, f"Short code '{short_code}'")

    async def find_by_long_url(self, long_url: str) -> URLMapping:
        """Get a mapping targeting ``long_url``."""
        return await self._find_one({"long_url": long_url}, f"Long URL '{long_url}'")

    async def update(self, mapping: URLMapping) -> None:
        """Set visit fields on an existing mapping document.

        Args:
            mapping: Mapping carrying the new visit_count and last_visited_at

        Raises:
            NotFoundError: If no document has mapping.short_code
        """
        fields = {"visits": mapping.visit_count}
        if mapping.last_visited_at is not None:
            fields["last_visited"] = mapping.last_visited_at

        try:
            result = await self.collection.update_one(
                {"short_url": mapping.short_code},
                {"$set": fields},
            )
        except mongo_errors.PyMongoError as e:
            self.logger.error(f"Error updating short code {mapping.short_code}: {e}")
            raise StorageError(f"Failed to update URL mapping: {e}") from e

        if result.matched_count == 0:
            raise NotFoundError(f"Short code '{mapping.short_code}' not found")

    async def list_all(self) -> List[URLMapping]:
        """List every mapping document."""
        try:
            cursor = self.collection.find({}, {"_id": 0})
            return [URLMapping.from_document(doc) async for doc in cursor]
        except mongo_errors.PyMongoError as e:
            self.logger.error(f"Error listing URL mappings: {e}")
            raise StorageError(f"Failed to retrieve URL mappings: {e}") from e

    async def health_check(self) -> bool:
        """Ping the server.

        Returns:
            True if healthy, False otherwise
        """
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
            return True
        except mongo_errors.PyMongoError as e:
            self.logger.error(f"Health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close the client if this store created it."""
        if self._client is not None and self._owns_client:
            await self._client.close()
            self._client = None
            self.logger.debug("MongoDB client closed")
        self._collection = None
