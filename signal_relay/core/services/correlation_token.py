import re
import time
from typing import NamedTuple, Optional

CALLBACK_PREFIX = "simulate_trade_"

# what the callback router matches on
CALLBACK_PATTERN = re.compile(r"^simulate_trade_(.+)$")
_TOKEN_BODY_PATTERN = re.compile(r"^(\d+)_(.+)$")


class CorrelationToken(NamedTuple):
    issued_at_ms: int
    username: str

    def age_ms(self, now_ms: Optional[int] = None) -> int:
        """
        How long ago the button carrying this token was sent.
        """
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        return now_ms - self.issued_at_ms


def normalize_username(username: str) -> str:
    """
    Strip surrounding whitespace and one leading '@'.
    """
    u = (username or "").strip()
    return u[1:] if u.startswith("@") else u


def build_token(username: str, now_ms: Optional[int] = None) -> str:
    """
    simulate_trade_<epoch millis>_<username>
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{CALLBACK_PREFIX}{now_ms}_{normalize_username(username)}"


def parse_token(data: Optional[str]) -> Optional[CorrelationToken]:
    """
    Reverse of build_token. Returns None for anything that is not a simulate-trade payload.
    """
    m = CALLBACK_PATTERN.match(data or "")
    if not m:
        return None
    body = _TOKEN_BODY_PATTERN.match(m.group(1))
    if not body:
        return None
    return CorrelationToken(issued_at_ms=int(body.group(1)), username=body.group(2))
