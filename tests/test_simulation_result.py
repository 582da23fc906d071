from __future__ import annotations

import unittest

from signal_relay.core.domain.entities.simulation_result import (
    SimulationFailure,
    SimulationMalformed,
    SimulationSuccess,
    classify_response,
)
from signal_relay.core.domain.enums.simulation_enums import SimulationStatus
from signal_relay.core.services.message_formatter import fmt_result
from tests.fakes import SAFE_ADDRESS, success_response


class ClassifyResponseTests(unittest.TestCase):
    def test_success(self) -> None:
        res = classify_response(success_response(signal_id="sig_7", trade_id="t_1"))
        self.assertIsInstance(res, SimulationSuccess)
        self.assertEqual(res.status, SimulationStatus.SUCCESS)
        self.assertEqual(res.signal_id, "sig_7")
        self.assertEqual(res.trading_pair.trade_id, "t_1")
        self.assertEqual(res.trading_pair.safe_address, SAFE_ADDRESS)
        self.assertEqual(res.trading_pair.network_key, "arbitrum")

    def test_success_without_trading_pair_is_malformed(self) -> None:
        res = classify_response({"status": "success", "signalId": "s", "result": {}})
        self.assertIsInstance(res, SimulationMalformed)
        self.assertEqual(res.status, SimulationStatus.INITIATED)

    def test_failed_reads_nested_error(self) -> None:
        res = classify_response({"status": "failed", "result": {"error": "insufficient_liquidity"}})
        self.assertIsInstance(res, SimulationFailure)
        self.assertEqual(res.error, "insufficient_liquidity")
        self.assertEqual(res.status, SimulationStatus.FAILED)

    def test_failed_falls_back_to_top_level_message(self) -> None:
        self.assertEqual(classify_response({"status": "failed", "message": "boom"}).error, "boom")
        self.assertEqual(classify_response({"status": "failed"}).error, "Unknown error")

    def test_unknown_status_and_non_objects_are_malformed(self) -> None:
        self.assertIsInstance(classify_response({"status": "pending"}), SimulationMalformed)
        self.assertIsInstance(classify_response("OK"), SimulationMalformed)
        self.assertIsInstance(classify_response(None), SimulationMalformed)
        self.assertIsInstance(classify_response({"status": "success", "result": "x"}), SimulationMalformed)


class FormatResultTests(unittest.TestCase):
    def test_missing_fields_render_as_dash(self) -> None:
        res = classify_response({"status": "success", "result": {"tradingPair": {}}})
        text = fmt_result(res)
        self.assertIn("Signal ID: -", text)
        self.assertIn("Trade ID: -", text)

    def test_unknown_variant_is_rejected(self) -> None:
        with self.assertRaises(TypeError):
            fmt_result({"status": "success"})  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
