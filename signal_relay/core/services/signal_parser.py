"""
Extracts trade parameters from rendered signal messages such as:

    🚀 **Bullish Alert** 🚀
    🏛️ **Token**: OM (mantra-dao)
    📈 **Signal**: Buy
    💰 **Entry Price**: $0.6736
    🎯 **Targets**:
    TP1: $0.75
    TP2: $0.82
    🛑 **Stop Loss**: $0.61

Patterns are anchored on the labels, not on line starts, so bold markers
and emoji around a label do not matter.
"""
import re
from typing import Optional, Pattern

from ..domain.entities.signal_entity import ParsedSignal

# label, optional closing bold marker, colon, optional opening bold marker
_LABEL_TAIL = r"\**\s*:\s*\**\s*"
_NUMBER = r"\$?\s*(\d+(?:\.\d+)?)"

_TOKEN_PATTERN = re.compile(r"Token" + _LABEL_TAIL + r"([A-Z]+)\s*\(")
_TP1_PATTERN = re.compile(r"TP1" + _LABEL_TAIL + _NUMBER)
_TP2_PATTERN = re.compile(r"TP2" + _LABEL_TAIL + _NUMBER)
_STOP_LOSS_PATTERN = re.compile(r"Stop Loss" + _LABEL_TAIL + _NUMBER)
_ENTRY_PRICE_PATTERN = re.compile(r"Entry Price" + _LABEL_TAIL + _NUMBER)


def _first_number(pattern: Pattern[str], text: str) -> Optional[float]:
    m = pattern.search(text)
    if not m:
        return None
    try:
        return float(m.group(1))
    except ValueError:
        return None


def parse_signal(text: Optional[str]) -> ParsedSignal:
    """
    Never raises; fields not found in the text are None.
    """
    if not text:
        return ParsedSignal()

    token_match = _TOKEN_PATTERN.search(text)
    return ParsedSignal(
        token=token_match.group(1) if token_match else None,
        entry_price=_first_number(_ENTRY_PRICE_PATTERN, text),
        tp1=_first_number(_TP1_PATTERN, text),
        tp2=_first_number(_TP2_PATTERN, text),
        stop_loss=_first_number(_STOP_LOSS_PATTERN, text),
    )
