"""
Item Registry

The registry is the system of record for item ownership. The engine only asks it
to issue items once a request has been fully validated.
"""

import logging
from typing import Dict, List, Optional, Protocol


logger = logging.getLogger(__name__)


class Registry(Protocol):
    def issue(self, owner: str, count: int) -> List[int]:
        """Issue count new items to owner, all or nothing"""
        ...

    def owner_of(self, item_id: int) -> Optional[str]: ...


class InMemoryRegistry:
    """Sequential item ids starting at 1, held in memory"""

    def __init__(self, next_id: int = 1):
        self.next_id = next_id
        self.owners: Dict[int, str] = {}

    def issue(self, owner: str, count: int) -> List[int]:
        item_ids = list(range(self.next_id, self.next_id + count))
        for item_id in item_ids:
            self.owners[item_id] = owner
        self.next_id += count
        logger.debug(f"Issued items {item_ids} to {owner}")
        return item_ids

    def owner_of(self, item_id: int) -> Optional[str]:
        return self.owners.get(item_id)

    def balance_of(self, owner: str) -> int:
        return sum(1 for o in self.owners.values() if o == owner)

