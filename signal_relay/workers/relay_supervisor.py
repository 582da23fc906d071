import logging

from motor.motor_asyncio import AsyncIOMotorClient
from telegram.ext import Application

from ..config import Settings, get_settings
from ..adapters.entry.telegram.handlers import build_application, register_handlers
from ..adapters.external.database.simulation_repository_mongodb import SimulationRepositoryMongoDB
from ..adapters.external.database.user_directory_repository_mongodb import UserDirectoryRepositoryMongoDB
from ..adapters.external.simulation.trade_simulation_http_client import TradeSimulationHttpClient
from ..adapters.external.telegram.telegram_bot_transport import TelegramBotTransport
from ..core.repositories.simulation_repository import SimulationRepository
from ..core.services.user_directory_service import UserDirectoryService
from ..core.usecases.dispatch_signal_use_case import DispatchSignalUseCase
from ..core.usecases.handle_simulation_callback_use_case import HandleSimulationCallbackUseCase
from ..core.usecases.register_chat_use_case import RegisterChatUseCase
from ..core.usecases.run_trade_simulation_use_case import RunTradeSimulationUseCase


class RelaySupervisor:
    """
    High-level supervisor for the signal-relay process.

    Responsibilities:
    - Connect to Mongo (Motor connects lazily on first use), ensure indexes.
    - Build the single Telegram Application / Bot shared by every interaction.
    - Wire repositories, services and use cases.
    - Start long polling for /start and Simulate Trade callbacks.
    Everything is created once in start() and released in stop().
    """

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or get_settings()
        self._logger = logging.getLogger(self.__class__.__name__)
        self._mongo_client: AsyncIOMotorClient | None = None
        self._db = None
        self._application: Application | None = None
        self._polling = False

        self.dispatcher: DispatchSignalUseCase | None = None
        self.simulation_repo: SimulationRepository | None = None
        self.callback_use_case: HandleSimulationCallbackUseCase | None = None

    async def start(self):
        s = self._settings

        # Mongo
        self._mongo_client = AsyncIOMotorClient(s.MONGODB_URI)
        self._db = self._mongo_client[s.MONGODB_DB_NAME]
        safes_db = self._mongo_client[s.MONGODB_SAFES_DB_NAME]

        user_repo = UserDirectoryRepositoryMongoDB(self._db, safes_db)
        simulation_repo = SimulationRepositoryMongoDB(self._db)
        await user_repo.ensure_indexes()
        await simulation_repo.ensure_indexes()

        # Telegram (one Bot, one connection pool)
        self._application = build_application(s.TELEGRAM_BOT_TOKEN)
        transport = TelegramBotTransport(self._application.bot)

        # Services + use cases
        directory = UserDirectoryService(user_repo, network=s.SIMULATION_NETWORK)
        simulation_client = TradeSimulationHttpClient(s.SIMULATION_API_URL, timeout_sec=s.SIMULATION_TIMEOUT_SEC)

        self.dispatcher = DispatchSignalUseCase(directory, transport, parse_mode=s.TELEGRAM_PARSE_MODE)
        self.simulation_repo = simulation_repo
        simulate_uc = RunTradeSimulationUseCase(directory, simulation_client, simulation_repo)
        self.callback_use_case = HandleSimulationCallbackUseCase(
            transport,
            simulate_uc,
            progress_interval_sec=s.PROGRESS_INTERVAL_SEC,
        )
        register_uc = RegisterChatUseCase(user_repo)

        register_handlers(self._application, self.callback_use_case, register_uc)

        await self._application.initialize()
        await self._application.start()
        if s.TELEGRAM_POLLING:
            await self._application.updater.start_polling(allowed_updates=["message", "callback_query"])
            self._polling = True
            self._logger.info("Telegram polling started")
        self._logger.info("Relay started (db=%s, network=%s)", s.MONGODB_DB_NAME, s.SIMULATION_NETWORK)

    async def stop(self):
        """
        Gracefully stop resources.
        """
        if self._application:
            try:
                if self._polling and self._application.updater:
                    await self._application.updater.stop()
                if self._application.running:
                    await self._application.stop()
                await self._application.shutdown()
            except Exception as exc:
                self._logger.warning("Telegram shutdown error: %s", exc)
            self._polling = False

        if self._mongo_client:
            self._mongo_client.close()
            self._mongo_client = None
