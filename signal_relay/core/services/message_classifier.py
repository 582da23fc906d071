from typing import Optional, Tuple

# Matched case-sensitively against the rendered message.
BULLISH_MARKERS: Tuple[str, ...] = (
    "Bullish Alert",
    "Signal: Buy",
    "Signal**: Buy",
)


def is_actionable(text: Optional[str]) -> bool:
    """
    True when the message is a bullish / buy signal that deserves a Simulate Trade button.
    """
    if not text:
        return False
    return any(marker in text for marker in BULLISH_MARKERS)
