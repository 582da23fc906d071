from abc import ABC, abstractmethod
from typing import Dict, Optional


class UserDirectoryRepository(ABC):
    """
    Read side of the user identity store, plus the /start chat registration write.
    """

    @abstractmethod
    async def ensure_indexes(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def get_by_telegram_username(self, username: str) -> Optional[Dict]:
        """
        Return {telegram_username, chat_id, trading_username, ...} or None.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_safe_account(self, trading_username: str, network: str) -> Optional[Dict]:
        """
        Return the safe account doc that has an address for `network`, or None.
        """
        raise NotImplementedError

    @abstractmethod
    async def upsert_chat(self, username: str, chat_id: int, profile: Optional[Dict] = None) -> Dict:
        """
        Link a Telegram username to the chat it talks to the bot from.
        """
        raise NotImplementedError
