import os
from dotenv import load_dotenv
from dataclasses import dataclass
from functools import lru_cache

load_dotenv()

@dataclass
class Settings:
    # telegram
    TELEGRAM_BOT_TOKEN: str
    TELEGRAM_PARSE_MODE: str | None   # parse mode for dispatched signals (None = plain text)
    TELEGRAM_POLLING: bool            # long-poll inside the API process

    # mongo
    MONGODB_URI: str
    MONGODB_DB_NAME: str
    MONGODB_SAFES_DB_NAME: str        # db holding safe_accounts (may differ from the main one)

    # trade simulation RPC
    SIMULATION_API_URL: str
    SIMULATION_TIMEOUT_SEC: float = 60.0
    SIMULATION_NETWORK: str = "arbitrum"

    # callback UX
    PROGRESS_INTERVAL_SEC: float = 3.0

    # generic
    LOG_LEVEL: str = "INFO"


def _bool(s: str | None, default: bool = False) -> bool:
    if s is None:
        return default
    return str(s).strip().lower() in ("1", "true", "yes", "y", "on")

def _optional(s: str | None) -> str | None:
    s = (s or "").strip()
    return s or None

@lru_cache()
def get_settings() -> Settings:
    db_name = os.environ.get("MONGODB_DB_NAME", "signal_relay")
    return Settings(
        TELEGRAM_BOT_TOKEN=os.environ.get("TELEGRAM_BOT_TOKEN", ""),  # checked when the bot starts
        TELEGRAM_PARSE_MODE=_optional(os.environ.get("TELEGRAM_PARSE_MODE", "HTML")),
        TELEGRAM_POLLING=_bool(os.environ.get("TELEGRAM_POLLING"), default=True),

        MONGODB_URI=os.environ.get("MONGODB_URI", "mongodb://localhost:27017"),
        MONGODB_DB_NAME=db_name,
        MONGODB_SAFES_DB_NAME=os.environ.get("MONGODB_SAFES_DB_NAME", db_name),

        SIMULATION_API_URL=os.environ.get("SIMULATION_API_URL", "http://localhost:8000/api/simulate-trade"),
        SIMULATION_TIMEOUT_SEC=float(os.environ.get("SIMULATION_TIMEOUT_SEC", "60")),
        SIMULATION_NETWORK=os.environ.get("SIMULATION_NETWORK", "arbitrum"),

        PROGRESS_INTERVAL_SEC=float(os.environ.get("PROGRESS_INTERVAL_SEC", "3")),
        LOG_LEVEL=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
