"""Abstract base class for URL mapping store implementations."""

from abc import ABC, abstractmethod
from typing import List
from datetime import datetime

from .models import URLMapping


class MappingStoreBase(ABC):
    """Abstract base class for URL mapping storage.
    
    All operations raise ``StorageError`` on backend I/O failure.
    """
    
    def __init__(self, db_config: str):
        """Initialize store.
        
        Args:
            db_config: Connection string or file path of the backend
        """
        self.db_config = db_config
    
    @abstractmethod
    async def connect(self) -> None:
        """Open the backend and verify it is usable.
        
        Raises:
            StartupError: If the backend cannot be reached or loaded
        """
        pass
    
    @abstractmethod
    async def insert(self, mapping: URLMapping) -> None:
        """Add a new URL mapping.
        
        Args:
            mapping: The mapping to store
            
        Raises:
            DuplicateKeyError: If mapping.short_code already exists
        """
        pass
    
    @abstractmethod
    async def find_by_code(self, short_code: str) -> URLMapping:
        """Get the mapping for a short code.
        
        Args:
            short_code: The short code to lookup
            
        Returns:
            The stored mapping
            
        Raises:
            NotFoundError: If the code is unknown
        """
        pass
    
    @abstractmethod
    async def find_by_long_url(self, long_url: str) -> URLMapping:
        """Get a mapping whose target is ``long_url``.
        
        Args:
            long_url: The long URL to lookup
            
        Returns:
            The stored mapping
            
        Raises:
            NotFoundError: If no mapping targets the URL
        """
        pass
    
    @abstractmethod
    async def update(self, mapping: URLMapping) -> None:
        """Replace visit_count and last_visited_at of an existing mapping.
        
        Args:
            mapping: Mapping carrying the new field values
            
        Raises:
            NotFoundError: If mapping.short_code is unknown
        """
        pass
    
    @abstractmethod
    async def list_all(self) -> List[URLMapping]:
        """List every stored mapping.
        
        Returns:
            List of mappings (insertion order where the backend keeps it)
        """
        pass
    
    async def record_visit(self, short_code: str, visited_at: datetime) -> URLMapping:
        """Count one visit of a short code and persist it.
        
        This default is a plain read-then-write: two concurrent calls for the
        same code may both read the old count, and one increment is lost.
        Backends that can do better override it.
        
        Args:
            short_code: The short code that was visited
            visited_at: Time of the visit
            
        Returns:
            The mapping as persisted after the visit
            
        Raises:
            NotFoundError: If the code is unknown
        """
        mapping = await self.find_by_code(short_code)
        visited = mapping.with_visit(visited_at)
        await self.update(visited)
        return visited
    
    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the backend is healthy.
        
        Returns:
            True if healthy, False otherwise
        """
        pass
    
    @abstractmethod
    async def close(self) -> None:
        """Release backend resources."""
        pass
