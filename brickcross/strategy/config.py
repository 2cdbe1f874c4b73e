"""Immutable engine configuration built from the YAML ``strategy:`` block."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from brickcross.indicators.impl.volatility import clamp_window

log = logging.getLogger(__name__)


class GateMode(Enum):
    OFF = "off"
    VOL_GATE = "vol_gate"
    BIAS = "bias"

    @classmethod
    def parse(cls, raw: object) -> GateMode:
        """Resolve a config string (case-insensitive); unknown values mean OFF."""
        if isinstance(raw, GateMode):
            return raw
        # YAML 1.1 loads a bare `off` as False
        if raw is None or raw is False or not str(raw).strip():
            return cls.OFF
        key = str(raw).strip().lower()
        for mode in cls:
            if mode.value == key:
                return mode
        log.warning("Unknown gate_mode %r; falling back to 'off'", raw)
        return cls.OFF


@dataclass(frozen=True)
class EngineConfig:
    """Parameters for one signal engine.

    ``brick_size == 0`` disables brick aggregation. ``vol_window`` is
    clamped into ``[5, 500]`` at construction.
    """

    fast_period: int = 10
    slow_period: int = 50
    brick_size: float = 0.0
    vol_window: int = 30
    vol_threshold: float = 0.002
    bias: float = 0.0
    gate_mode: GateMode = GateMode.OFF

    def __post_init__(self) -> None:
        if self.fast_period < 1 or self.slow_period < 1:
            raise ValueError(
                f"EMA periods must be >= 1, got fast={self.fast_period} slow={self.slow_period}"
            )
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "vol_window", clamp_window(self.vol_window))
        object.__setattr__(self, "brick_size", max(float(self.brick_size), 0.0))
        object.__setattr__(self, "gate_mode", GateMode.parse(self.gate_mode))

    @property
    def uses_bricks(self) -> bool:
        return self.brick_size > 0

    @property
    def uses_volatility(self) -> bool:
        return self.gate_mode is not GateMode.OFF

    @property
    def effective_bias(self) -> float:
        return self.bias if self.gate_mode is GateMode.BIAS else 0.0

    @classmethod
    def from_dict(cls, params: dict | None) -> EngineConfig:
        """Build an EngineConfig from config params, filling defaults.

        A key left blank in YAML loads as ``None`` and counts as absent.
        """
        params = {k: v for k, v in (params or {}).items() if v is not None}
        defaults = cls()
        return cls(
            fast_period=int(params.get("fast_period", defaults.fast_period)),
            slow_period=int(params.get("slow_period", defaults.slow_period)),
            brick_size=float(params.get("brick_size", defaults.brick_size)),
            vol_window=int(params.get("vol_window", defaults.vol_window)),
            vol_threshold=float(params.get("vol_threshold", defaults.vol_threshold)),
            bias=float(params.get("bias", defaults.bias)),
            gate_mode=GateMode.parse(params.get("gate_mode", defaults.gate_mode)),
        )
