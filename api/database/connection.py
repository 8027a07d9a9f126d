"""
Database Connection Management

Handles the MongoDB client and Beanie initialization for the engine state and
item registry collections.
"""

from typing import Any, Optional

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from api.config import settings


class MongoDatabaseManager:
    """MongoDB connection with lazy initialization"""

    def __init__(self, connection_string: str, database_name: str):
        """
        Initialize database manager

        Args:
            connection_string: MongoDB URI
            database_name: Database holding the engine collections
        """
        self.connection_string = connection_string
        self.database_name = database_name
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Any = None
        self._initialized = False

    async def initialize(self):
        """Connect and register Beanie document models"""
        if self._initialized:
            return

        self.client = AsyncIOMotorClient(
            self.connection_string,
            maxPoolSize=50,
            minPoolSize=5,
            maxIdleTimeMS=300000,  # 5 minutes
        )
        self.database = self.client[self.database_name]

        from api.database.models import ItemMongo, MintStateMongo, RegistryMetaMongo

        await init_beanie(
            database=self.database,
            document_models=[MintStateMongo, ItemMongo, RegistryMetaMongo],
        )

        self._initialized = True

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def close(self):
        """Close database connections"""
        if self.client:
            self.client.close()
        self._initialized = False


# ============================================================================
# Global database manager instance
# ============================================================================

_db_manager: Optional[MongoDatabaseManager] = None


def get_db_manager() -> MongoDatabaseManager:
    """
    Get global database manager instance

    Returns:
        MongoDatabaseManager singleton
    """
    global _db_manager
    if _db_manager is None:
        _db_manager = MongoDatabaseManager(settings.mongodb_uri, settings.mongodb_database)
    return _db_manager
