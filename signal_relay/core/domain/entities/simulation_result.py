# signal_relay/core/domain/entities/simulation_result.py

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from ..enums.simulation_enums import SimulationStatus


@dataclass(frozen=True)
class TradingPair:
    network_key: Optional[str]
    safe_address: Optional[str]
    trade_id: Optional[str]
    status: Optional[str]


@dataclass(frozen=True)
class SimulationSuccess:
    signal_id: Optional[str]
    trading_pair: TradingPair
    raw: Dict[str, Any] = field(repr=False)
    record_id: Optional[str] = None

    @property
    def status(self) -> SimulationStatus:
        return SimulationStatus.SUCCESS


@dataclass(frozen=True)
class SimulationFailure:
    signal_id: Optional[str]
    error: str
    raw: Dict[str, Any] = field(repr=False)
    record_id: Optional[str] = None

    @property
    def status(self) -> SimulationStatus:
        return SimulationStatus.FAILED


@dataclass(frozen=True)
class SimulationMalformed:
    reason: str
    raw: Any = field(repr=False)
    record_id: Optional[str] = None

    @property
    def status(self) -> SimulationStatus:
        return SimulationStatus.INITIATED


SimulationResult = Union[SimulationSuccess, SimulationFailure, SimulationMalformed]


def _str_or_none(v: Any) -> Optional[str]:
    return None if v is None else str(v)


def classify_response(raw: Any) -> SimulationResult:
    """
    Turn the simulation API's loosely shaped JSON into one of the three variants.

    Expected:
      {
        "status": "success" | "failed",
        "signalId": "...",
        "result": {
          "tradingPair": {"networkKey", "safeAddress", "tradeId", "status"},
          "error": "..."
        }
      }
    """
    if not isinstance(raw, dict):
        return SimulationMalformed(reason="response is not a JSON object", raw=raw)

    status = raw.get("status")
    signal_id = _str_or_none(raw.get("signalId"))
    result = raw.get("result") or {}
    if not isinstance(result, dict):
        result = {}

    if status == "success":
        tp = result.get("tradingPair")
        if not isinstance(tp, dict):
            return SimulationMalformed(reason="success response without tradingPair", raw=raw)
        pair = TradingPair(
            network_key=_str_or_none(tp.get("networkKey")),
            safe_address=_str_or_none(tp.get("safeAddress")),
            trade_id=_str_or_none(tp.get("tradeId")),
            status=_str_or_none(tp.get("status")),
        )
        return SimulationSuccess(signal_id=signal_id, trading_pair=pair, raw=raw)

    if status == "failed":
        error = result.get("error") or raw.get("error") or raw.get("message") or "Unknown error"
        return SimulationFailure(signal_id=signal_id, error=str(error), raw=raw)

    return SimulationMalformed(reason=f"unexpected status {status!r}", raw=raw)
