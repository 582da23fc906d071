import asyncio
import contextlib
import logging
import time
from dataclasses import dataclass
from typing import Optional

from ..domain.entities.interaction_event import InteractionEvent
from ..domain.entities.simulation_result import SimulationResult, SimulationSuccess
from ..domain.enums.simulation_enums import CallbackState
from ..exceptions import TransportError
from ..services.correlation_token import CALLBACK_PATTERN, parse_token
from ..services.message_formatter import RESULT_PARSE_MODE, fmt_error, fmt_processing, fmt_result
from ..transports.chat_transport import ChatTransport
from .run_trade_simulation_use_case import RunTradeSimulationUseCase


@dataclass(frozen=True)
class CallbackOutcome:
    state: CallbackState
    text: Optional[str] = None
    message_id: Optional[int] = None
    result: Optional[SimulationResult] = None


class HandleSimulationCallbackUseCase:
    """
    Drives one simulate-trade button press to a terminal, user-visible state.

      RECEIVED      callback data matches simulate_trade_(.+)
      ACKNOWLEDGED  answer the callback at once, post a "processing" message
      PROCESSING    run the simulation while a background task refreshes the
                    processing message every `progress_interval_sec`
      SUCCEEDED /   edit the processing message with the outcome (or send a
      FAILED        new one when it can no longer be edited)

    An expired callback answer is logged and ignored. Refresh failures are
    swallowed. The refresher is cancelled and awaited before the terminal
    edit, so no progress edit can land after the result.
    """

    def __init__(
        self,
        transport: ChatTransport,
        simulation: RunTradeSimulationUseCase,
        progress_interval_sec: float = 3.0,
        logger: Optional[logging.Logger] = None,
    ):
        self._transport = transport
        self._simulation = simulation
        self._interval = progress_interval_sec
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def handle(self, event: InteractionEvent) -> CallbackOutcome:
        if not CALLBACK_PATTERN.match(event.callback_data or ""):
            await self._acknowledge(event, None)
            self._logger.info("Ignoring callback %r from user %s", event.callback_data, event.user_id)
            return CallbackOutcome(state=CallbackState.IGNORED)

        token = parse_token(event.callback_data)
        age_sec = token.age_ms() / 1000 if token else None
        self._logger.info(
            "%s callback %s from @%s in chat %s (button age %s)", CallbackState.RECEIVED.value,
            event.callback_data, event.username, event.chat_id,
            f"{age_sec:.0f}s" if age_sec is not None else "unknown",
        )

        await self._acknowledge(event, "Processing trade simulation...")
        processing_id = await self._post_processing(event.chat_id)
        self._logger.info("%s callback %s", CallbackState.ACKNOWLEDGED.value, event.callback_query_id)

        refresher: Optional[asyncio.Task] = None
        if processing_id is not None and self._interval > 0:
            refresher = asyncio.create_task(self._refresh_progress(event.chat_id, processing_id))

        result: Optional[SimulationResult] = None
        self._logger.info("%s callback %s", CallbackState.PROCESSING.value, event.callback_query_id)
        try:
            result = await self._simulation.run(event)
            state = CallbackState.SUCCEEDED if isinstance(result, SimulationSuccess) else CallbackState.FAILED
            text = fmt_result(result)
        except Exception as exc:
            self._logger.exception("Simulation for callback %s failed: %s", event.callback_query_id, exc)
            state = CallbackState.FAILED
            text = fmt_error(exc)
        finally:
            await self._stop_refresher(refresher)

        message_id = await self._report(event.chat_id, processing_id, text)
        self._logger.info("%s callback %s", state.value, event.callback_query_id)
        return CallbackOutcome(state=state, text=text, message_id=message_id, result=result)

    async def _acknowledge(self, event: InteractionEvent, text: Optional[str]) -> None:
        try:
            await self._transport.acknowledge(event.callback_query_id, text)
        except TransportError as exc:
            # query too old / already answered; the terminal edit is what the user sees
            self._logger.warning("Could not answer callback %s: %s", event.callback_query_id, exc)

    async def _post_processing(self, chat_id: int) -> Optional[int]:
        try:
            return await self._transport.push_message(chat_id, fmt_processing(0), parse_mode=RESULT_PARSE_MODE)
        except TransportError as exc:
            self._logger.warning("Could not post processing message to chat %s: %s", chat_id, exc)
            return None

    async def _refresh_progress(self, chat_id: int, message_id: int) -> None:
        started = time.monotonic()
        while True:
            await asyncio.sleep(self._interval)
            elapsed = max(1, int(round(time.monotonic() - started)))
            try:
                await self._transport.edit_message(
                    chat_id, message_id, fmt_processing(elapsed), parse_mode=RESULT_PARSE_MODE
                )
            except Exception as exc:
                self._logger.debug("progress refresh failed for %s/%s: %s", chat_id, message_id, exc)

    @staticmethod
    async def _stop_refresher(task: Optional[asyncio.Task]) -> None:
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _report(self, chat_id: int, processing_id: Optional[int], text: str) -> Optional[int]:
        if processing_id is not None:
            try:
                await self._transport.edit_message(chat_id, processing_id, text, parse_mode=RESULT_PARSE_MODE)
                return processing_id
            except TransportError as exc:
                self._logger.warning("Edit of %s/%s failed, sending a new message: %s", chat_id, processing_id, exc)
        try:
            return await self._transport.push_message(chat_id, text, parse_mode=RESULT_PARSE_MODE)
        except TransportError as exc:
            self._logger.error("Could not deliver simulation result to chat %s: %s", chat_id, exc)
            return None
