"""
ChatTransport backed by python-telegram-bot's Bot (v20+).
- push_message: sendMessage, optionally with a one-button inline keyboard
- edit_message: editMessageText
- acknowledge: answerCallbackQuery
One Bot instance (and its HTTP connection pool) is shared by every interaction.
"""
import logging
from typing import Optional

from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.error import TelegramError

from ....core.exceptions import TransportError
from ....core.transports.chat_transport import ActionButton, ChatTransport


def _keyboard(action: Optional[ActionButton]) -> Optional[InlineKeyboardMarkup]:
    if action is None:
        return None
    return InlineKeyboardMarkup([[InlineKeyboardButton(action.label, callback_data=action.callback_data)]])


class TelegramBotTransport(ChatTransport):

    def __init__(self, bot: Bot, logger: Optional[logging.Logger] = None):
        self._bot = bot
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def push_message(
        self,
        chat_id: int,
        text: str,
        parse_mode: Optional[str] = None,
        action: Optional[ActionButton] = None,
    ) -> int:
        try:
            msg = await self._bot.send_message(
                chat_id=chat_id,
                text=text,
                parse_mode=parse_mode,
                reply_markup=_keyboard(action),
            )
        except TelegramError as exc:
            self._logger.warning("[TELEGRAM] sendMessage to %s failed: %s", chat_id, exc.message)
            raise TransportError("sendMessage", exc.message) from exc
        self._logger.debug("[TELEGRAM] sent msg_id=%s to %s", msg.message_id, chat_id)
        return msg.message_id

    async def edit_message(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        parse_mode: Optional[str] = None,
    ) -> None:
        try:
            await self._bot.edit_message_text(
                text=text,
                chat_id=chat_id,
                message_id=message_id,
                parse_mode=parse_mode,
            )
        except TelegramError as exc:
            raise TransportError("editMessageText", exc.message) from exc

    async def acknowledge(self, callback_query_id: str, text: Optional[str] = None) -> None:
        try:
            await self._bot.answer_callback_query(callback_query_id=callback_query_id, text=text)
        except TelegramError as exc:
            raise TransportError("answerCallbackQuery", exc.message) from exc
