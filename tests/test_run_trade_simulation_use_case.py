from __future__ import annotations

import unittest
from datetime import datetime, timezone

from signal_relay.adapters.external.database.simulation_repository_mongodb import SimulationRepositoryMongoDB
from signal_relay.adapters.external.database.user_directory_repository_mongodb import UserDirectoryRepositoryMongoDB
from signal_relay.core.domain.entities.simulation_result import (
    SimulationFailure,
    SimulationMalformed,
    SimulationSuccess,
)
from signal_relay.core.exceptions import NotFoundError, PersistenceError, RemoteCallError
from signal_relay.core.services.user_directory_service import UserDirectoryService
from signal_relay.core.usecases.run_trade_simulation_use_case import RunTradeSimulationUseCase
from tests.fakes import (
    SAFE_ADDRESS,
    FakeDatabase,
    FakeSimulationClient,
    make_event,
    seed_user,
    success_response,
)

NOW = datetime(2024, 6, 10, 12, 1, 30, tzinfo=timezone.utc)


class RunTradeSimulationUseCaseTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.db = FakeDatabase()
        seed_user(self.db, "alice", trading_username="alice_trader", safe_address=SAFE_ADDRESS)
        self.client = FakeSimulationClient(response=success_response())
        self.records = self.db["trade_simulations"]
        self.uc = RunTradeSimulationUseCase(
            UserDirectoryService(UserDirectoryRepositoryMongoDB(self.db)),
            self.client,
            SimulationRepositoryMongoDB(self.db),
            clock=lambda: NOW,
        )

    async def test_request_shape(self) -> None:
        await self.uc.run(make_event())

        self.assertEqual(len(self.client.requests), 1)
        self.assertEqual(
            self.client.requests[0],
            {
                "Signal Message": "buy",
                "Token Mentioned": "RNDR",
                "TP1": 11.37,
                "TP2": 12.90,
                "SL": 8.37,
                "Current Price": 9.37,
                "Max Exit Time": "2024-06-11T12:01:30Z",
                "username": "alice_trader",
                "safeAddress": SAFE_ADDRESS,
            },
        )

    async def test_current_price_falls_back_to_midpoint(self) -> None:
        await self.uc.run(make_event(text="Bullish Alert\nTP1: $12\nStop Loss: $8"))
        self.assertEqual(self.client.requests[0]["Current Price"], 10.0)
        self.assertIsNone(self.client.requests[0]["Token Mentioned"])

    async def test_success_persists_one_full_record(self) -> None:
        result = await self.uc.run(make_event())

        self.assertIsInstance(result, SimulationSuccess)
        self.assertEqual(result.trading_pair.trade_id, "trade_42")
        self.assertEqual(len(self.records.docs), 1)
        rec = self.records.docs[0]
        self.assertEqual(str(rec["_id"]), result.record_id)
        self.assertEqual(rec["status"], "success")
        self.assertEqual(rec["username"], "alice")
        self.assertEqual(rec["callback_data"], "simulate_trade_1718000000000_alice")
        self.assertEqual(rec["callback_query_id"], "cbq-1")
        self.assertEqual(rec["chat_type"], "private")
        self.assertEqual(rec["message_id"], 77)
        self.assertEqual(rec["trading_username"], "alice_trader")
        self.assertEqual(rec["safe_address"], SAFE_ADDRESS)
        self.assertEqual(rec["network"], "arbitrum")
        self.assertEqual(rec["parsed_signal"]["tp1"], 11.37)
        self.assertEqual(rec["parsed_signal"]["stop_loss"], 8.37)
        self.assertEqual(rec["parsed_signal"]["entry_price"], 9.37)
        self.assertEqual(rec["simulation_response"], success_response())
        self.assertIn("created_at", rec)
        self.assertIn("created_at_iso", rec)

    async def test_failed_response_is_still_persisted(self) -> None:
        self.client.response = {"status": "failed", "signalId": "sig_9", "result": {"error": "slippage_exceeded"}}
        result = await self.uc.run(make_event())

        self.assertIsInstance(result, SimulationFailure)
        self.assertEqual(result.error, "slippage_exceeded")
        self.assertEqual(len(self.records.docs), 1)
        self.assertEqual(self.records.docs[0]["status"], "failed")
        self.assertEqual(self.records.docs[0]["simulation_response"]["result"]["error"], "slippage_exceeded")

    async def test_malformed_response_is_recorded_as_initiated(self) -> None:
        self.client.response = {"ok": True}
        result = await self.uc.run(make_event())
        self.assertIsInstance(result, SimulationMalformed)
        self.assertEqual(self.records.docs[0]["status"], "initiated")

    async def test_running_the_same_event_twice_creates_two_records(self) -> None:
        event = make_event()
        first = await self.uc.run(event)
        second = await self.uc.run(event)

        self.assertEqual(len(self.records.docs), 2)
        self.assertEqual(len(self.client.requests), 2)
        self.assertNotEqual(first.record_id, second.record_id)

    async def test_unresolvable_identity_aborts_before_remote_call(self) -> None:
        with self.assertRaises(NotFoundError):
            await self.uc.run(make_event(username="mallory"))
        self.assertEqual(self.client.requests, [])
        self.assertEqual(self.records.docs, [])

    async def test_event_without_username_fails_closed(self) -> None:
        with self.assertRaises(NotFoundError):
            await self.uc.run(make_event(username=None))
        self.assertEqual(self.client.requests, [])

    async def test_remote_error_propagates_and_nothing_is_stored(self) -> None:
        self.client.error = RemoteCallError("Simulation service returned HTTP 503", status_code=503)
        with self.assertRaises(RemoteCallError):
            await self.uc.run(make_event())
        self.assertEqual(self.records.docs, [])

    async def test_store_failure_is_rethrown_after_remote_call(self) -> None:
        self.records.fail_insert = True
        with self.assertLogs("RunTradeSimulationUseCase", level="ERROR"):
            with self.assertRaises(PersistenceError) as ctx:
                await self.uc.run(make_event())
        self.assertEqual(len(self.client.requests), 1)
        self.assertEqual(ctx.exception.remote_response, success_response())


if __name__ == "__main__":
    unittest.main()
