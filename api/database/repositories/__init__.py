"""Database repositories for data access layer"""

from .items import AsyncInMemoryRegistry, AsyncRegistry, MongoItemRegistry
from .state import InMemoryStateRepository, MongoStateRepository, StateRepository


__all__ = [
    "AsyncRegistry",
    "AsyncInMemoryRegistry",
    "MongoItemRegistry",
    "StateRepository",
    "InMemoryStateRepository",
    "MongoStateRepository",
]
