"""Beeswax resource types and their CRUD operations."""

from .facade import EMPTY_BODY_MESSAGE, ResourceClient
from .pagination import BATCH_SIZE, query_all
from .registry import RESOURCES

__all__ = [
    "BATCH_SIZE",
    "EMPTY_BODY_MESSAGE",
    "RESOURCES",
    "ResourceClient",
    "query_all",
]
