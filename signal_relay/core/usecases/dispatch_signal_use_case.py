import logging
from dataclasses import dataclass
from typing import Optional

from ..services.correlation_token import build_token, normalize_username
from ..services.message_classifier import is_actionable
from ..services.message_formatter import SIMULATE_BUTTON_LABEL
from ..services.user_directory_service import UserDirectoryService
from ..transports.chat_transport import ActionButton, ChatTransport


@dataclass(frozen=True)
class DeliveryResult:
    success: bool
    username: str
    chat_id: int
    message_id: int
    has_action: bool
    callback_data: Optional[str] = None


class DispatchSignalUseCase:
    """
    Sends a signal text to one Telegram user.

    Bullish / buy signals get a single "Simulate Trade" button whose callback
    data is the correlation token simulate_trade_<ms>_<username>; any other
    text goes out plain. One outbound message per call, no retries: a
    NotFoundError (unknown user) is raised before Telegram is touched, a
    TransportError propagates as-is.
    """

    def __init__(
        self,
        directory: UserDirectoryService,
        transport: ChatTransport,
        parse_mode: Optional[str] = "HTML",
        logger: Optional[logging.Logger] = None,
    ):
        self._directory = directory
        self._transport = transport
        self._parse_mode = parse_mode
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def send(self, username: str, text: str) -> DeliveryResult:
        clean = normalize_username(username)
        chat_id = await self._directory.resolve_chat_id(clean)

        action: Optional[ActionButton] = None
        if is_actionable(text):
            action = ActionButton(label=SIMULATE_BUTTON_LABEL, callback_data=build_token(clean))

        message_id = await self._transport.push_message(
            chat_id,
            text,
            parse_mode=self._parse_mode,
            action=action,
        )
        self._logger.info(
            "Sent message %s to @%s (chat %s) action=%s",
            message_id, clean, chat_id, action.callback_data if action else None,
        )
        return DeliveryResult(
            success=True,
            username=clean,
            chat_id=chat_id,
            message_id=message_id,
            has_action=action is not None,
            callback_data=action.callback_data if action else None,
        )
