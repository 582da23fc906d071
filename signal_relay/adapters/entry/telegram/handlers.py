# signal_relay/adapters/entry/telegram/handlers.py
"""
Telegram handlers for the signal relay bot.

Commands:
  /start   link this chat to the sender's username so signals can reach them

Callback queries:
  simulate_trade_<ms>_<username>   run a trade simulation for the signal the
                                   button is attached to
  anything else                    answered and ignored

Notes:
- Requires python-telegram-bot v20+.
- Use cases are stored in application.bot_data by the supervisor.
- Updates are processed concurrently, one coroutine per button press.
"""
import logging
from datetime import datetime, timezone

from telegram import Update
from telegram.ext import (
    Application, ApplicationBuilder, CallbackQueryHandler, CommandHandler, ContextTypes
)

from ....core.domain.entities.interaction_event import InteractionEvent
from ....core.services.correlation_token import parse_token
from ....core.usecases.handle_simulation_callback_use_case import HandleSimulationCallbackUseCase
from ....core.usecases.register_chat_use_case import RegisterChatUseCase

CALLBACK_USE_CASE_KEY = "simulation_callback_use_case"
REGISTER_USE_CASE_KEY = "register_chat_use_case"

_logger = logging.getLogger(__name__)


def interaction_event_from_update(update: Update) -> InteractionEvent | None:
    """
    Snapshot every field of a callback query we may need later.
    Returns None when the query has no message (inline-mode buttons).
    """
    query = update.callback_query
    if query is None:
        return None
    msg = query.message
    if msg is None:
        return None

    user = query.from_user
    chat = msg.chat
    username = user.username
    if not username:
        token = parse_token(query.data)
        username = token.username if token else None

    # messages older than 48h come back as InaccessibleMessage (no text, date=epoch)
    text = getattr(msg, "text", None) or getattr(msg, "caption", None)

    return InteractionEvent(
        user_id=user.id,
        username=username,
        first_name=user.first_name,
        last_name=user.last_name,
        language_code=user.language_code,
        chat_id=chat.id,
        chat_type=str(chat.type),
        chat_title=chat.title,
        message_id=msg.message_id,
        message_text=text,
        message_date=msg.date,
        callback_query_id=query.id,
        callback_data=query.data or "",
        interaction_at=datetime.now(timezone.utc),
    )


async def _reply(update: Update, context: ContextTypes.DEFAULT_TYPE, text: str):
    """
    Safe reply helper: works even if update.message is None.
    """
    chat = update.effective_chat
    if not chat:
        return
    await context.bot.send_message(chat_id=chat.id, text=text)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    user = update.effective_user
    chat = update.effective_chat
    if not user or not chat:
        return
    if not user.username:
        await _reply(
            update, context,
            "⚠️ Your Telegram account has no username.\n"
            "Set one in Telegram settings and send /start again to receive signals."
        )
        return

    uc: RegisterChatUseCase = context.bot_data[REGISTER_USE_CASE_KEY]
    await uc.execute(
        user.username,
        chat.id,
        {"telegram_user_id": user.id, "first_name": user.first_name, "chat_type": str(chat.type)},
    )
    await _reply(
        update, context,
        f"👋 Hi @{user.username}! You're now subscribed to trading signals.\n"
        "Bullish signals come with a 🎯 Simulate Trade button."
    )


async def simulation_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    if query is None:
        return
    event = interaction_event_from_update(update)
    if event is None:
        await query.answer()
        return
    uc: HandleSimulationCallbackUseCase = context.bot_data[CALLBACK_USE_CASE_KEY]
    await uc.handle(event)


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE):
    _logger.error("Unhandled error while processing update %s", update, exc_info=context.error)


def register_handlers(
    app: Application,
    callback_uc: HandleSimulationCallbackUseCase,
    register_uc: RegisterChatUseCase,
) -> None:
    app.bot_data[CALLBACK_USE_CASE_KEY] = callback_uc
    app.bot_data[REGISTER_USE_CASE_KEY] = register_uc

    app.add_handler(CommandHandler("start", start))
    # every callback goes to the use case; it answers and drops unknown payloads
    app.add_handler(CallbackQueryHandler(simulation_callback))
    app.add_error_handler(on_error)


def build_application(token: str) -> Application:
    """
    Builds the telegram application; handlers are attached by register_handlers().
    """
    if not token:
        raise RuntimeError("Missing env: TELEGRAM_BOT_TOKEN")
    return ApplicationBuilder().token(token).concurrent_updates(True).build()
