from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ActionButton:
    """
    A single inline button carrying an opaque callback payload.
    """
    label: str
    callback_data: str


class ChatTransport(ABC):
    """
    Outbound chat capability used by the core. Every method raises
    TransportError when the platform rejects the call.
    """

    @abstractmethod
    async def push_message(
        self,
        chat_id: int,
        text: str,
        parse_mode: Optional[str] = None,
        action: Optional[ActionButton] = None,
    ) -> int:
        """Send a message, returns its message id."""
        raise NotImplementedError

    @abstractmethod
    async def edit_message(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        parse_mode: Optional[str] = None,
    ) -> None:
        """Replace the text of a message we sent earlier."""
        raise NotImplementedError

    @abstractmethod
    async def acknowledge(self, callback_query_id: str, text: Optional[str] = None) -> None:
        """Answer a callback query (stops the button spinner client-side)."""
        raise NotImplementedError
