"""Business logic service for URL shortener."""

import logging
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone

from .shortcode import ShortCodeGenerator
from .database.base import MappingStoreBase
from .database.models import URLMapping
from .errors import (
    CodeGenerationError,
    DuplicateKeyError,
    NotFoundError,
    URLValidationError,
)
from .common.validators import is_valid_url


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class URLShortenerService:
    """Service layer for URL shortening business logic.

    Submitting a long URL that is already stored returns its existing short
    code instead of creating a second mapping.
    """

    def __init__(
        self,
        store: MappingStoreBase,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 5,
    ):
        """Initialize URL shortener service.

        Args:
            store: Mapping store instance
            short_code_generator: Optional short code generator
            logger: Optional logger
            max_collision_retries: Maximum insert attempts per shorten
        """
        self.store = store
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.max_collision_retries = max_collision_retries

    async def shorten(self, long_url: str) -> Dict[str, Any]:
        """Create (or reuse) a short code for a long URL.

        Args:
            long_url: The URL to shorten

        Returns:
            Dictionary with short_code, long_url, created_at, already_existed

        Raises:
            URLValidationError: If the URL is malformed
            CodeGenerationError: If no free code was found
            StorageError: If the store fails
        """
        is_valid, error = is_valid_url(long_url)
        if not is_valid:
            raise URLValidationError(error)

        try:
            existing = await self.store.find_by_long_url(long_url)
        except NotFoundError:
            existing = None

        if existing is not None:
            self.logger.debug(f"Reusing short code {existing.short_code} for {long_url}")
            return self._result(existing, already_existed=True)

        mapping = await self._insert_with_unique_code(long_url)
        self.logger.info(f"Created short URL: {mapping.short_code} -> {long_url}")
        return self._result(mapping, already_existed=False)

    async def _insert_with_unique_code(self, long_url: str) -> URLMapping:
        """Insert a new mapping, regenerating the code on collision.

        Raises:
            CodeGenerationError: If every attempt collided
        """
        for attempt in range(1, self.max_collision_retries + 1):
            mapping = URLMapping(
                short_code=self.generator.generate(),
                long_url=long_url,
                created_at=utcnow(),
            )
            try:
                await self.store.insert(mapping)
                return mapping
            except DuplicateKeyError:
                self.logger.debug(
                    f"Short code collision on attempt {attempt}: {mapping.short_code}"
                )

        self.logger.error(
            f"Unable to generate unique short code after {self.max_collision_retries} attempts"
        )
        raise CodeGenerationError(
            f"Unable to generate unique short code after {self.max_collision_retries} attempts"
        )

    @staticmethod
    def _result(mapping: URLMapping, already_existed: bool) -> Dict[str, Any]:
        return {
            "short_code": mapping.short_code,
            "long_url": mapping.long_url,
            "created_at": mapping.created_at,
            "already_existed": already_existed,
        }

    async def redirect(self, short_code: str) -> str:
        """Resolve a short code and count the visit.

        The long URL is returned only once the visit is persisted.

        Args:
            short_code: The short code that was requested

        Returns:
            The long URL to redirect to

        Raises:
            NotFoundError: If the code is unknown
            StorageError: If the visit could not be persisted
        """
        try:
            mapping = await self.store.record_visit(short_code, utcnow())
        except NotFoundError:
            self.logger.warning(f"Short code not found: {short_code}")
            raise

        self.logger.debug(
            f"Redirecting {short_code} -> {mapping.long_url} (visits={mapping.visit_count})"
        )
        return mapping.long_url

    async def get_mapping(self, short_code: str) -> URLMapping:
        """Get a mapping without counting a visit.

        Raises:
            NotFoundError: If the code is unknown
        """
        return await self.store.find_by_code(short_code)

    async def list_all(self) -> List[URLMapping]:
        """List every stored mapping."""
        return await self.store.list_all()

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        storage_healthy = await self.store.health_check()
        return {
            "storage": storage_healthy,
            "overall": storage_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
