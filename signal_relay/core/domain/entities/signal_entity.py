# signal_relay/core/domain/entities/signal_entity.py

from typing import Optional
from pydantic import BaseModel


class ParsedSignal(BaseModel):
    """
    Trade parameters extracted from a rendered signal message.
    Every field is optional: a label missing from the text yields None.
    """

    token: Optional[str] = None
    entry_price: Optional[float] = None
    tp1: Optional[float] = None
    tp2: Optional[float] = None
    stop_loss: Optional[float] = None

    def current_price_estimate(self) -> Optional[float]:
        """
        Entry price when present, else the midpoint of TP1 and stop loss.
        """
        if self.entry_price is not None:
            return self.entry_price
        if self.tp1 is not None and self.stop_loss is not None:
            return (self.tp1 + self.stop_loss) / 2
        return None


class TradingIdentity(BaseModel):
    """
    Cross-system identity linked to a Telegram username, with the safe
    (custodial) address registered for one network.
    """

    telegram_username: str
    trading_username: str
    network: str
    safe_address: str
