from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class SimulationRepository(ABC):

    @abstractmethod
    async def ensure_indexes(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def insert(self, doc: Dict) -> str:
        """
        Insert one simulation record; returns its id. Records are never updated.
        """
        raise NotImplementedError

    @abstractmethod
    async def list_recent(
        self,
        username: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 10,
    ) -> List[Dict]:
        """
        Newest first, optionally filtered by username / status.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, record_id: str) -> Optional[Dict]:
        raise NotImplementedError
