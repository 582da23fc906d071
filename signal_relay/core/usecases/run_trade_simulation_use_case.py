import dataclasses
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from ..domain.entities.interaction_event import InteractionEvent
from ..domain.entities.signal_entity import ParsedSignal, TradingIdentity
from ..domain.entities.simulation_result import SimulationResult, classify_response
from ..exceptions import NotFoundError, PersistenceError
from ..repositories.simulation_repository import SimulationRepository
from ..services.signal_parser import parse_signal
from ..services.user_directory_service import UserDirectoryService
from ...adapters.external.simulation.trade_simulation_http_client import TradeSimulationHttpClient

MAX_EXIT_HORIZON = timedelta(days=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def build_simulation_request(
    parsed: ParsedSignal,
    identity: TradingIdentity,
    max_exit_time: datetime,
) -> Dict[str, Any]:
    """
    Request body expected by the trade-simulation API.
    """
    return {
        "Signal Message": "buy",
        "Token Mentioned": parsed.token,
        "TP1": parsed.tp1,
        "TP2": parsed.tp2,
        "SL": parsed.stop_loss,
        "Current Price": parsed.current_price_estimate(),
        "Max Exit Time": _iso(max_exit_time),
        "username": identity.trading_username,
        "safeAddress": identity.safe_address,
    }


class RunTradeSimulationUseCase:
    """
    Runs one trade simulation for a button press.

    Steps (strictly in order, no retries):
      1) parse the signal text captured in the interaction event
      2) resolve trading identity + safe address (NotFoundError aborts)
      3) estimate current price, 4) set max exit time = now + 1 day
      5) POST to the simulation API (RemoteCallError aborts, nothing stored)
      6) insert ONE trade_simulations record with the raw response

    The record is written after the remote call. A store failure is logged
    and re-raised as PersistenceError even though the simulation may have run.
    Calling run() twice with the same event inserts two records.
    """

    def __init__(
        self,
        directory: UserDirectoryService,
        simulation_client: TradeSimulationHttpClient,
        simulation_repo: SimulationRepository,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._directory = directory
        self._client = simulation_client
        self._repo = simulation_repo
        self._logger = logger or logging.getLogger(self.__class__.__name__)
        self._clock = clock

    async def run(self, event: InteractionEvent) -> SimulationResult:
        parsed = parse_signal(event.message_text)
        self._logger.info("Simulating %s for @%s (callback %s)", parsed.token, event.username, event.callback_data)

        if not event.username:
            raise NotFoundError("Telegram user has no username; cannot resolve trading account", stage="telegram_user")
        identity = await self._directory.resolve_trading_identity(event.username)

        max_exit_time = self._clock() + MAX_EXIT_HORIZON
        request = build_simulation_request(parsed, identity, max_exit_time)

        raw = await self._client.simulate(request)
        result = classify_response(raw)

        record = {
            **event.to_document(),
            "status": result.status.value,
            "parsed_signal": parsed.model_dump(),
            "trading_username": identity.trading_username,
            "network": identity.network,
            "safe_address": identity.safe_address,
            "simulation_request": request,
            "simulation_response": raw,
        }
        try:
            record_id = await self._repo.insert(record)
        except Exception as exc:
            self._logger.exception(
                "Failed to store simulation for @%s (remote status=%s): %s",
                event.username, result.status.value, exc,
            )
            raise PersistenceError(f"Failed to store simulation record: {exc}", remote_response=raw) from exc

        self._logger.info("Stored simulation %s status=%s", record_id, result.status.value)
        return dataclasses.replace(result, record_id=record_id)
