"""
Database Models for the Mint Engine

MongoDB/Beanie Document models holding the engine's durable state.
All models use MongoDB with Beanie ODM (Object Document Mapper).
"""

from datetime import datetime, timezone
from typing import Annotated, Any

from beanie import Document, Indexed
from pydantic import Field as BeanieField
from pymongo import ASCENDING, IndexModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MintStateMongo(Document):
    """
    Engine state - one document per collection

    Holds the serialized EngineState (wave, counters, roots, lists, claim set).
    Replaced as a whole on every successful mutating call.
    """

    id: str  # Collection identifier - MongoDB _id
    state: dict[str, Any]  # EngineState.to_document()

    # Timestamps
    created_at: datetime = BeanieField(default_factory=utcnow)
    updated_at: datetime = BeanieField(default_factory=utcnow)

    class Settings:
        name = "mint_state"


class ItemMongo(Document):
    """
    Issued item - one document per item id

    Backs the Mongo item registry. Item ids are sequential per collection.
    """

    collection_id: Annotated[str, Indexed()]
    item_id: int
    owner: Annotated[str, Indexed()]  # Payment key hash
    minted_at: datetime = BeanieField(default_factory=utcnow)

    class Settings:
        name = "items"
        indexes = [
            IndexModel([("collection_id", ASCENDING), ("item_id", ASCENDING)], unique=True),
        ]


class RegistryMetaMongo(Document):
    """Per-collection registry counter; item ids run from 1 to issued_count"""

    id: str  # Collection identifier
    issued_count: int = 0
    updated_at: datetime = BeanieField(default_factory=utcnow)

    class Settings:
        name = "registry_meta"
