from __future__ import annotations

import unittest

from bson import ObjectId

from signal_relay.adapters.external.database.simulation_repository_mongodb import SimulationRepositoryMongoDB
from tests.fakes import FakeDatabase


class SimulationRepositoryMongoDBTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.db = FakeDatabase()
        self.col = self.db["trade_simulations"]
        self.repo = SimulationRepositoryMongoDB(self.db)

    def _seed(self, username: str, status: str, created_at: int) -> None:
        self.col.docs.append({"_id": ObjectId(), "username": username, "status": status, "created_at": created_at})

    async def test_ensure_indexes(self) -> None:
        await self.repo.ensure_indexes()
        names = [kw["name"] for _, kw in self.col.indexes]
        self.assertEqual(names, ["ix_username_created_at", "ix_status_created_at"])

    async def test_insert_stamps_creation_time(self) -> None:
        record_id = await self.repo.insert({"username": "alice", "status": "success"})

        self.assertTrue(ObjectId.is_valid(record_id))
        stored = self.col.docs[0]
        self.assertIsInstance(stored["created_at"], int)
        self.assertTrue(stored["created_at_iso"].endswith("Z"))

    async def test_list_recent_is_newest_first_and_filtered(self) -> None:
        self._seed("alice", "success", 1)
        self._seed("alice", "failed", 3)
        self._seed("bob", "success", 2)
        self._seed("alice", "success", 4)

        everything = await self.repo.list_recent()
        self.assertEqual([d["created_at"] for d in everything], [4, 3, 2, 1])
        self.assertTrue(all("id" in d and "_id" not in d for d in everything))

        alice_ok = await self.repo.list_recent(username="alice", status="success")
        self.assertEqual([d["created_at"] for d in alice_ok], [4, 1])

        self.assertEqual(len(await self.repo.list_recent(limit=2)), 2)

    async def test_get_by_id(self) -> None:
        record_id = await self.repo.insert({"username": "alice", "status": "failed"})

        doc = await self.repo.get_by_id(record_id)
        self.assertEqual(doc["id"], record_id)
        self.assertEqual(doc["status"], "failed")

        self.assertIsNone(await self.repo.get_by_id(str(ObjectId())))
        self.assertIsNone(await self.repo.get_by_id("not-an-object-id"))


if __name__ == "__main__":
    unittest.main()
