from .signal import Decision
from .config import EngineConfig, GateMode
from .engine import LOWER_BAND, UPPER_BAND, SignalEngine

__all__ = [
    "Decision",
    "EngineConfig",
    "GateMode",
    "SignalEngine",
    "UPPER_BAND",
    "LOWER_BAND",
]
