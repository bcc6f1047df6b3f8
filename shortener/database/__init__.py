"""Storage layer for URL shortener."""

from .base import MappingStoreBase
from .filestore import FileMappingStore
from .mongodb import MongoMappingStore
from .models import URLMapping
from .factory import build_store

__all__ = [
    "MappingStoreBase",
    "FileMappingStore",
    "MongoMappingStore",
    "URLMapping",
    "build_store",
]
