# signal_relay/adapters/external/database/user_directory_repository_mongodb.py

import re
import time
from datetime import datetime, timezone
from typing import Dict, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from ....core.repositories.user_directory_repository import UserDirectoryRepository


def _username_filter(username: str) -> Dict:
    """
    Telegram usernames are case-insensitive: match the whole name ignoring case.
    """
    return {"telegram_username": {"$regex": f"^{re.escape(username)}$", "$options": "i"}}


class UserDirectoryRepositoryMongoDB(UserDirectoryRepository):
    """
    Mongo implementation of the user directory.

    telegram_users : {telegram_username, chat_id, trading_username, ...}
    safe_accounts  : {username: <trading_username>, safe_address: {<network>: <address>}}

    safe_accounts may live in a different database (it is owned by the trading side).
    """

    COLLECTION = "telegram_users"
    SAFES_COLLECTION = "safe_accounts"

    def __init__(self, db: AsyncIOMotorDatabase, safes_db: Optional[AsyncIOMotorDatabase] = None):
        self._col = db[self.COLLECTION]
        self._safes = (safes_db if safes_db is not None else db)[self.SAFES_COLLECTION]

    async def ensure_indexes(self) -> None:
        await self._col.create_index(
            [("telegram_username", 1)],
            unique=True,
            name="ux_telegram_username",
        )

    async def get_by_telegram_username(self, username: str) -> Optional[Dict]:
        return await self._col.find_one(
            _username_filter(username),
            projection={"_id": False},
        )

    async def get_safe_account(self, trading_username: str, network: str) -> Optional[Dict]:
        return await self._safes.find_one(
            {"username": trading_username, f"safe_address.{network}": {"$exists": True}},
            projection={"_id": False},
        )

    async def upsert_chat(self, username: str, chat_id: int, profile: Optional[Dict] = None) -> Dict:
        now_ms = int(time.time() * 1000)
        now_iso = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        update = {
            "$set": {
                **(profile or {}),
                "chat_id": chat_id,
                "updated_at": now_ms,
            },
            "$setOnInsert": {
                "telegram_username": username.lower(),
                "created_at": now_ms,
                "created_at_iso": now_iso,
            },
        }
        return await self._col.find_one_and_update(
            _username_filter(username),
            update,
            upsert=True,
            projection={"_id": False},
            return_document=ReturnDocument.AFTER,
        )
