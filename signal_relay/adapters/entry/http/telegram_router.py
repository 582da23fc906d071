from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator

from .deps import get_dispatcher
from ....core.usecases.dispatch_signal_use_case import DispatchSignalUseCase

router = APIRouter(prefix="/telegram", tags=["telegram"])

TEST_SIGNAL_MESSAGE = (
    "🚀 **Bullish Alert** 🚀\n"
    "\n"
    "🏛️ **Token**: OM (mantra-dao)\n"
    "📈 **Signal**: Buy\n"
    "💰 **Entry Price**: $0.6736\n"
    "🎯 **Targets**:\n"
    "TP1: $0.75\n"
    "TP2: $0.82\n"
    "🛑 **Stop Loss**: $0.61\n"
    "⏳ **Timeline:** Short-term (1-3 days)\n"
    "\n"
    "💡 **Trade Tip**:\n"
    "OM is breaking out on rising volume. Scale in near entry and respect the stop loss."
)


class SendMessageDTO(BaseModel):
    username: str = Field(..., examples=["@alice"])
    message: str

    @field_validator("username", "message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v


class SendTestSignalDTO(BaseModel):
    username: str = Field(..., examples=["@alice"])

    @field_validator("username")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v


class DeliveryOutDTO(BaseModel):
    success: bool
    message: str
    chat_id: int
    message_id: int
    has_action: bool
    callback_data: Optional[str] = None


@router.post("/send", response_model=DeliveryOutDTO)
async def send_message(dto: SendMessageDTO, dispatcher: DispatchSignalUseCase = Depends(get_dispatcher)):
    """
    Forward a signal text to a Telegram user; bullish signals get a Simulate Trade button.
    """
    res = await dispatcher.send(dto.username, dto.message)
    return DeliveryOutDTO(
        success=res.success,
        message="Telegram message sent successfully",
        chat_id=res.chat_id,
        message_id=res.message_id,
        has_action=res.has_action,
        callback_data=res.callback_data,
    )


@router.post("/send-test-signal", response_model=DeliveryOutDTO)
async def send_test_signal(dto: SendTestSignalDTO, dispatcher: DispatchSignalUseCase = Depends(get_dispatcher)):
    """
    Send a canned bullish signal (always carries the button).
    """
    res = await dispatcher.send(dto.username, TEST_SIGNAL_MESSAGE)
    return DeliveryOutDTO(
        success=res.success,
        message="Test signal sent successfully",
        chat_id=res.chat_id,
        message_id=res.message_id,
        has_action=res.has_action,
        callback_data=res.callback_data,
    )
