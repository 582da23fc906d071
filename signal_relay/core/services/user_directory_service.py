import logging
from typing import Optional

from ..domain.entities.signal_entity import TradingIdentity
from ..exceptions import NotFoundError
from ..repositories.user_directory_repository import UserDirectoryRepository
from .correlation_token import normalize_username


class UserDirectoryService:
    """
    Resolves a Telegram username to its chat id, and to its trading identity
    plus the safe address registered for the configured network.

    Lookups fail closed: a missing link raises NotFoundError, never a default.
    """

    def __init__(
        self,
        repo: UserDirectoryRepository,
        network: str = "arbitrum",
        logger: Optional[logging.Logger] = None,
    ):
        self._repo = repo
        self._network = network
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def network(self) -> str:
        return self._network

    async def resolve_chat_id(self, username: str) -> int:
        username = normalize_username(username)
        doc = await self._repo.get_by_telegram_username(username)
        if not doc:
            raise NotFoundError(
                f"User @{username} not found. Please start a chat with the bot first.",
                stage="telegram_user",
            )
        chat_id = doc.get("chat_id")
        if chat_id is None:
            raise NotFoundError(f"No chat id on record for @{username}", stage="chat_id")
        return int(chat_id)

    async def resolve_trading_identity(self, username: str) -> TradingIdentity:
        username = normalize_username(username)

        # stage 1: telegram username -> trading username
        doc = await self._repo.get_by_telegram_username(username)
        trading_username = (doc or {}).get("trading_username")
        if not trading_username:
            raise NotFoundError(
                f"No trading account linked to Telegram user @{username}",
                stage="trading_identity",
            )

        # stage 2: trading username -> safe address on the network
        safe = await self._repo.get_safe_account(trading_username, self._network)
        address = ((safe or {}).get("safe_address") or {}).get(self._network)
        if not address:
            raise NotFoundError(
                f"No {self._network} safe address found for trading user {trading_username}",
                stage="safe_address",
            )

        self._logger.debug("resolved @%s -> %s / %s", username, trading_username, address)
        return TradingIdentity(
            telegram_username=username,
            trading_username=trading_username,
            network=self._network,
            safe_address=address,
        )
