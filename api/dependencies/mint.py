"""
Mint Service Dependency

FastAPI dependency providing the process-wide MintService backed by MongoDB.
"""

from api.config import settings
from api.database.repositories import MongoItemRegistry, MongoStateRepository
from api.services.mint_service import MintService


# Global state for the mint service
_mint_service: MintService | None = None


def get_mint_service() -> MintService:
    """
    Get or initialize the mint service.

    Returns:
        MintService: Service over the Mongo state document and item registry
    """
    global _mint_service
    if _mint_service is None:
        _mint_service = MintService(
            repository=MongoStateRepository(settings.collection_id),
            registry=MongoItemRegistry(settings.collection_id),
            config=settings.sale_config(),
            owner=settings.owner_wallet,
        )
    return _mint_service
