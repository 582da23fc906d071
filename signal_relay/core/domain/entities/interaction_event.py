# signal_relay/core/domain/entities/interaction_event.py

from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel


class InteractionEvent(BaseModel):
    """
    Everything Telegram tells us when a user presses an inline button.

    The signal text is not stored at dispatch time, so this snapshot
    (and in particular `message_text`) is the only way to rebuild the
    context of the click. It is captured once and never re-fetched.
    """

    # who pressed
    user_id: int
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    language_code: Optional[str] = None

    # where
    chat_id: int
    chat_type: str  # private | group | supergroup | channel
    chat_title: Optional[str] = None

    # the message carrying the button
    message_id: Optional[int] = None
    message_text: Optional[str] = None
    message_date: Optional[datetime] = None

    # the callback itself
    callback_query_id: str
    callback_data: str
    interaction_at: datetime

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump()
