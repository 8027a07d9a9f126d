"""
Engine State Repository

Loads and saves the serialized EngineState for one collection.
"""

import copy
from typing import Any, Protocol

from api.database.models import MintStateMongo, utcnow
from mint_engine.state import EngineState


class StateRepository(Protocol):
    async def load(self) -> EngineState | None: ...

    async def save(self, state: EngineState) -> None: ...


class MongoStateRepository:
    """Repository for the engine state document"""

    def __init__(self, collection_id: str):
        """
        Initialize state repository

        Args:
            collection_id: Identifier of the state document
        """
        self.collection_id = collection_id

    async def load(self) -> EngineState | None:
        """
        Load engine state

        Returns:
            EngineState or None if the collection has not been initialized
        """
        document = await MintStateMongo.get(self.collection_id)
        if document is None:
            return None
        return EngineState.from_document(document.state)

    async def save(self, state: EngineState) -> None:
        """
        Replace the stored state

        Args:
            state: Engine state to persist
        """
        document = await MintStateMongo.get(self.collection_id)
        if document is None:
            document = MintStateMongo(id=self.collection_id, state=state.to_document())
            await document.insert()
            return

        document.state = state.to_document()
        document.updated_at = utcnow()
        await document.replace()


class InMemoryStateRepository:
    """Keeps the serialized state in memory, same round trip as the Mongo repository"""

    def __init__(self):
        self.document: dict[str, Any] | None = None
        self.saves = 0

    async def load(self) -> EngineState | None:
        if self.document is None:
            return None
        return EngineState.from_document(copy.deepcopy(self.document))

    async def save(self, state: EngineState) -> None:
        self.document = state.to_document()
        self.saves += 1
