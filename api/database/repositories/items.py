"""
Item Registry Repositories

Async registries used by the API service to issue and look up items.
"""

from typing import Protocol

from pymongo import ReturnDocument

from api.database.models import ItemMongo, RegistryMetaMongo
from mint_engine.registry import InMemoryRegistry


class AsyncRegistry(Protocol):
    async def issue(self, owner: str, count: int) -> list[int]: ...

    async def owner_of(self, item_id: int) -> str | None: ...

    async def balance_of(self, owner: str) -> int: ...


class MongoItemRegistry:
    """Item registry backed by the items collection"""

    def __init__(self, collection_id: str):
        self.collection_id = collection_id

    async def _reserve_ids(self, count: int) -> list[int]:
        """Atomically advance the issued counter and return the reserved id range"""
        collection = RegistryMetaMongo.get_motor_collection()
        meta = await collection.find_one_and_update(
            {"_id": self.collection_id},
            {"$inc": {"issued_count": count}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        issued = meta["issued_count"]
        return list(range(issued - count + 1, issued + 1))

    async def issue(self, owner: str, count: int) -> list[int]:
        """
        Issue count items to owner

        Args:
            owner: Payment key hash of the receiving wallet
            count: Number of items

        Returns:
            list[int]: Issued item ids
        """
        item_ids = await self._reserve_ids(count)
        await ItemMongo.insert_many(
            [ItemMongo(collection_id=self.collection_id, item_id=i, owner=owner) for i in item_ids]
        )
        return item_ids

    async def owner_of(self, item_id: int) -> str | None:
        item = await ItemMongo.find_one(
            ItemMongo.collection_id == self.collection_id, ItemMongo.item_id == item_id
        )
        return item.owner if item else None

    async def balance_of(self, owner: str) -> int:
        return await ItemMongo.find(
            ItemMongo.collection_id == self.collection_id, ItemMongo.owner == owner
        ).count()


class AsyncInMemoryRegistry:
    """Async facade over the in-memory registry"""

    def __init__(self, registry: InMemoryRegistry | None = None):
        self.registry = registry or InMemoryRegistry()

    async def issue(self, owner: str, count: int) -> list[int]:
        return self.registry.issue(owner, count)

    async def owner_of(self, item_id: int) -> str | None:
        return self.registry.owner_of(item_id)

    async def balance_of(self, owner: str) -> int:
        return self.registry.balance_of(owner)
