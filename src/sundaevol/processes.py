# processes.py
# Mean-reverting jump diffusion for the flavor prices.
# One call to ``advance`` is one simulated step of one underlying. States are
# immutable; stepping returns a new state and leaves the old one intact.

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from .config import PRICE_FLOOR, FlavorConfig
from .core import InvalidParameter, _finite

logger = logging.getLogger(__name__)

__all__ = [
    "FlavorProcessState",
    "advance",
    "simulate_path",
]


def _rng(seed) -> np.random.Generator:
    return np.random.default_rng(seed)


@dataclass(frozen=True)
class FlavorProcessState:
    """Current price plus the process constants of one underlying.

    All checks happen here, at construction, so ``advance`` never has to
    re-validate and is total over every state that exists.
    """
    name: str
    spot: float
    long_run_mean: float
    reversion_speed: float     # per day
    volatility: float          # price units per sqrt(day)
    jump_probability: float    # per day
    jump_size: float           # fraction of price
    floor: float = PRICE_FLOOR
    day: float = 0.0

    def __post_init__(self):
        for name in ("spot", "long_run_mean", "reversion_speed", "volatility",
                     "jump_probability", "jump_size", "floor"):
            _finite(name, getattr(self, name))
        if self.floor <= 0:
            raise InvalidParameter(f"floor must be positive, got {self.floor}")
        if self.spot < self.floor:
            raise InvalidParameter(
                f"{self.name}: spot {self.spot} below floor {self.floor}"
            )
        if self.long_run_mean <= 0:
            raise InvalidParameter(
                f"{self.name}: long_run_mean must be positive, got {self.long_run_mean}"
            )
        if self.reversion_speed < 0:
            raise InvalidParameter(
                f"{self.name}: reversion_speed must be non-negative, got {self.reversion_speed}"
            )
        if self.volatility < 0:
            raise InvalidParameter(
                f"{self.name}: volatility must be non-negative, got {self.volatility}"
            )
        if not (0.0 <= self.jump_probability <= 1.0):
            raise InvalidParameter(
                f"{self.name}: jump_probability must be in [0, 1], got {self.jump_probability}"
            )
        if self.jump_size < 0:
            raise InvalidParameter(
                f"{self.name}: jump_size must be non-negative, got {self.jump_size}"
            )
        if self.day < 0:
            raise InvalidParameter(f"{self.name}: day must be non-negative, got {self.day}")

    @classmethod
    def from_config(cls, cfg: FlavorConfig) -> FlavorProcessState:
        return cls(
            name=cfg.name,
            spot=cfg.spot,
            long_run_mean=cfg.long_run_mean,
            reversion_speed=cfg.reversion_speed,
            volatility=cfg.volatility,
            jump_probability=cfg.jump_probability,
            jump_size=cfg.jump_size,
            floor=cfg.floor,
        )


def advance(
    state: FlavorProcessState,
    dt: float = 1.0,
    *,
    rng: np.random.Generator,
    shock: Optional[float] = None,
) -> FlavorProcessState:
    """
    One Euler step of the mean-reverting jump diffusion, ``dt`` in days:
        drift     = kappa (m - S) dt
        diffusion = sigma sqrt(dt) Z,                  Z ~ N(0, 1)
        jump      = S J U  with prob. min(1, p dt),    U ~ U[-1, 1]
        S'        = max(floor, S + drift + diffusion + jump)

    Every step draws Z (unless ``shock`` supplies it), the jump coin and the
    jump factor, so the random stream advances the same way whether or not a
    jump fires.
    """
    if not (dt > 0 and math.isfinite(dt)):
        raise InvalidParameter(f"dt must be positive, got {dt}")

    z = float(rng.standard_normal()) if shock is None else float(shock)
    coin = float(rng.random())
    factor = float(rng.uniform(-1.0, 1.0))

    S = state.spot
    drift = state.reversion_speed * (state.long_run_mean - S) * dt
    diffusion = state.volatility * math.sqrt(dt) * z
    jump = 0.0
    if coin < min(1.0, state.jump_probability * dt):
        jump = S * state.jump_size * factor
        logger.debug("%s: jump of %+.4f on day %g", state.name, jump, state.day)

    new_spot = S + drift + diffusion + jump
    if not new_spot > state.floor:
        logger.debug("%s: price %.4f clamped to floor %.4f", state.name, new_spot, state.floor)
        new_spot = state.floor

    return replace(state, spot=new_spot, day=state.day + dt)


def simulate_path(
    state: FlavorProcessState,
    n_steps: int,
    dt: float = 1.0,
    *,
    seed: Optional[int] = None,
) -> np.ndarray:
    """Price path of shape (n_steps+1,), including the starting spot."""
    if n_steps <= 0:
        raise InvalidParameter("n_steps must be positive.")

    rng = _rng(seed)
    S = np.empty(n_steps + 1, dtype=float)
    S[0] = state.spot
    for t in range(n_steps):
        state = advance(state, dt, rng=rng)
        S[t + 1] = state.spot
    return S
