import logging
from typing import Dict, Optional

from ..repositories.user_directory_repository import UserDirectoryRepository
from ..services.correlation_token import normalize_username


class RegisterChatUseCase:
    """
    Remembers which chat a Telegram user talks to the bot from (/start).
    The bot can only message users it has a chat id for.
    """

    def __init__(self, repo: UserDirectoryRepository, logger: Optional[logging.Logger] = None):
        self._repo = repo
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def execute(self, username: str, chat_id: int, profile: Optional[Dict] = None) -> Dict:
        clean = normalize_username(username)
        if not clean:
            raise ValueError("username is required")
        stored = await self._repo.upsert_chat(clean, chat_id, profile or {})
        self._logger.info("Registered chat %s for @%s", chat_id, clean)
        return stored
