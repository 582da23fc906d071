# signal_relay/adapters/external/database/simulation_repository_mongodb.py

import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from ....core.repositories.simulation_repository import SimulationRepository


def _out(doc: Dict) -> Dict:
    """
    Expose Mongo's _id as a string id.
    """
    doc = dict(doc)
    _id = doc.pop("_id", None)
    if _id is not None:
        doc["id"] = str(_id)
    return doc


class SimulationRepositoryMongoDB(SimulationRepository):
    """
    Insert-only log of trade simulations triggered from Telegram buttons.
    """

    COLLECTION = "trade_simulations"

    def __init__(self, db: AsyncIOMotorDatabase):
        self._col = db[self.COLLECTION]

    async def ensure_indexes(self) -> None:
        await self._col.create_index(
            [("username", 1), ("created_at", -1)],
            name="ix_username_created_at",
        )
        await self._col.create_index(
            [("status", 1), ("created_at", -1)],
            name="ix_status_created_at",
        )

    async def insert(self, doc: Dict) -> str:
        now_ms = int(time.time() * 1000)
        now_iso = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        payload = {
            **doc,
            "created_at": now_ms,
            "created_at_iso": now_iso,
        }
        res = await self._col.insert_one(payload)
        return str(res.inserted_id)

    async def list_recent(
        self,
        username: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 10,
    ) -> List[Dict]:
        q: Dict = {}
        if username:
            q["username"] = username
        if status:
            q["status"] = status
        cursor = self._col.find(q, sort=[("created_at", -1)], limit=limit)
        docs = await cursor.to_list(length=limit)
        return [_out(d) for d in docs]

    async def get_by_id(self, record_id: str) -> Optional[Dict]:
        if not ObjectId.is_valid(record_id):
            return None
        doc = await self._col.find_one({"_id": ObjectId(record_id)})
        return _out(doc) if doc else None
