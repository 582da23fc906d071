# signal_relay/core/domain/enums/simulation_enums.py

from enum import Enum


class SimulationStatus(str, Enum):
    """
    Status stored on a trade_simulations record.
    """
    INITIATED = "initiated"  # remote call made, response shape not recognised
    SUCCESS = "success"      # remote simulation reported success
    FAILED = "failed"        # remote simulation reported failure


class CallbackState(str, Enum):
    """
    Lifecycle of one simulate-trade button press.

    RECEIVED -> ACKNOWLEDGED -> PROCESSING -> SUCCEEDED | FAILED
    Callbacks with unknown data end in IGNORED right after the answer.
    """
    RECEIVED = "RECEIVED"
    ACKNOWLEDGED = "ACKNOWLEDGED"
    PROCESSING = "PROCESSING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    IGNORED = "IGNORED"
