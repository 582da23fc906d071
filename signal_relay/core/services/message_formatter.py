from typing import Optional

from telegram.constants import ParseMode
from telegram.helpers import escape_markdown

from ..domain.entities.simulation_result import (
    SimulationFailure,
    SimulationMalformed,
    SimulationResult,
    SimulationSuccess,
)

# terminal and progress messages are rendered with legacy Markdown
RESULT_PARSE_MODE = ParseMode.MARKDOWN

SIMULATE_BUTTON_LABEL = "🎯 Simulate Trade"

_SPINNER = ("⏳", "⌛")


def md(value: Optional[object]) -> str:
    """
    Escape a value for legacy Markdown (underscores in ids/addresses break rendering).
    """
    if value is None:
        return "-"
    return escape_markdown(str(value), version=1)


def fmt_processing(elapsed_sec: int = 0) -> str:
    icon = _SPINNER[elapsed_sec % len(_SPINNER)]
    lines = [f"{icon} *Simulating trade...*"]
    if elapsed_sec:
        lines.append(f"elapsed: {elapsed_sec}s")
    else:
        lines.append("Your request was received, this can take a moment.")
    return "\n".join(lines)


def fmt_success(res: SimulationSuccess) -> str:
    tp = res.trading_pair
    lines = []
    lines.append("✅ *Trade Simulation Successful*")
    lines.append("")
    lines.append(f"🆔 Signal ID: {md(res.signal_id)}")
    lines.append(f"🌐 Network: {md(tp.network_key)}")
    lines.append(f"🏦 Safe Address: {md(tp.safe_address)}")
    lines.append(f"🔖 Trade ID: {md(tp.trade_id)}")
    lines.append(f"📊 Status: {md(tp.status)}")
    return "\n".join(lines)


def fmt_failure(reason: str) -> str:
    return f"❌ *Trade Simulation Failed*\n\nReason: {md(reason)}"


def fmt_result(res: SimulationResult) -> str:
    """
    Exhaustive over the three response variants.
    """
    if isinstance(res, SimulationSuccess):
        return fmt_success(res)
    if isinstance(res, SimulationFailure):
        return fmt_failure(res.error)
    if isinstance(res, SimulationMalformed):
        return fmt_failure(f"unexpected response from simulation service ({res.reason})")
    raise TypeError(f"unknown simulation result {type(res).__name__}")


def fmt_error(exc: BaseException) -> str:
    return fmt_failure(str(exc) or exc.__class__.__name__)
