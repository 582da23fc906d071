from __future__ import annotations

import unittest

from signal_relay.adapters.external.database.user_directory_repository_mongodb import UserDirectoryRepositoryMongoDB
from signal_relay.core.exceptions import NotFoundError, TransportError
from signal_relay.core.services.user_directory_service import UserDirectoryService
from signal_relay.core.usecases.dispatch_signal_use_case import DispatchSignalUseCase
from tests.fakes import ALICE_SIGNAL, FakeChatTransport, FakeDatabase, seed_user


class DispatchSignalUseCaseTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.db = FakeDatabase()
        seed_user(self.db, "alice", chat_id=1001)
        seed_user(self.db, "bob", chat_id=1002)
        self.transport = FakeChatTransport()
        directory = UserDirectoryService(UserDirectoryRepositoryMongoDB(self.db))
        self.dispatcher = DispatchSignalUseCase(directory, self.transport, parse_mode="HTML")

    async def test_bullish_signal_gets_exactly_one_button(self) -> None:
        res = await self.dispatcher.send("@alice", ALICE_SIGNAL)

        self.assertTrue(res.success)
        self.assertTrue(res.has_action)
        self.assertEqual(res.chat_id, 1001)
        self.assertEqual(len(self.transport.pushes), 1)
        _, chat_id, text, parse_mode, action, message_id = self.transport.pushes[0]
        self.assertEqual(chat_id, 1001)
        self.assertEqual(text, ALICE_SIGNAL)
        self.assertEqual(parse_mode, "HTML")
        self.assertEqual(message_id, res.message_id)
        self.assertIsNotNone(action)
        self.assertRegex(action.callback_data, r"^simulate_trade_\d+_alice$")
        self.assertEqual(action.callback_data, res.callback_data)
        self.assertIn("Simulate Trade", action.label)

    async def test_plain_text_has_no_button(self) -> None:
        res = await self.dispatcher.send("bob", "plain update, no signal")

        self.assertTrue(res.success)
        self.assertFalse(res.has_action)
        self.assertIsNone(res.callback_data)
        self.assertEqual(len(self.transport.pushes), 1)
        self.assertIsNone(self.transport.pushes[0][4])
        # nothing that could ever trigger a callback
        self.assertEqual(self.transport.acks, [])

    async def test_unknown_user_fails_before_any_transport_call(self) -> None:
        with self.assertRaises(NotFoundError):
            await self.dispatcher.send("unknown_user", ALICE_SIGNAL)
        self.assertEqual(self.transport.calls, [])

    async def test_transport_error_propagates_without_retry(self) -> None:
        self.transport.fail_push_times = 1
        with self.assertRaises(TransportError) as ctx:
            await self.dispatcher.send("alice", "hello")
        self.assertIn("Too Many Requests", str(ctx.exception))
        self.assertEqual(self.transport.pushes, [])

    async def test_each_send_gets_its_own_token(self) -> None:
        a = await self.dispatcher.send("alice", ALICE_SIGNAL)
        b = await self.dispatcher.send("bob", ALICE_SIGNAL)
        self.assertNotEqual(a.callback_data, b.callback_data)
        self.assertTrue(b.callback_data.endswith("_bob"))


if __name__ == "__main__":
    unittest.main()
