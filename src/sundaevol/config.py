"""Calibration constants and frozen configuration for the kernel.

Flavor parameters are product tuning, not design invariants: the market
simulator takes them as inputs and any of them can be swapped out for a
scenario or a test.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Final


DAYS_PER_YEAR: Final[float] = 365.0

#: Volatility below this is treated as zero and refused for T > 0.
VOL_EPSILON: Final[float] = 1e-8

#: CRR steps used for American exercise.
DEFAULT_LATTICE_STEPS: Final[int] = 100

#: Simulated prices never go below this.
PRICE_FLOOR: Final[float] = 0.05

#: C - P = S - K e^{-rT}, float64 accumulation only.
PUT_CALL_PARITY_TOLERANCE: Final[float] = 1e-8


@dataclass(frozen=True)
class PricingConfig:
    lattice_steps: int = DEFAULT_LATTICE_STEPS
    days_per_year: float = DAYS_PER_YEAR


@dataclass(frozen=True)
class FlavorConfig:
    """Calibrated process constants for one underlying.

    Attributes
    ----------
    name : str
        Flavor identifier, e.g. ``"vanilla"``.
    spot : float
        Price on day 0.
    long_run_mean : float
        Level the price is pulled back toward.
    reversion_speed : float
        Fraction of the gap to the mean closed per day.
    volatility : float
        Daily price noise: standard deviation of one day's diffusion move,
        in price units.
    jump_probability : float
        Chance of a jump on any given day, in [0, 1].
    jump_size : float
        Largest jump as a fraction of the current price.
    floor : float
        Hard lower bound on the simulated price.
    """
    name: str
    spot: float
    long_run_mean: float
    reversion_speed: float
    volatility: float
    jump_probability: float = 0.02
    jump_size: float = 0.15
    floor: float = PRICE_FLOOR


DEFAULT_FLAVORS: Final[tuple[FlavorConfig, ...]] = (
    FlavorConfig("vanilla",    spot=2.50, long_run_mean=2.50, reversion_speed=0.30, volatility=0.35),
    FlavorConfig("chocolate",  spot=2.80, long_run_mean=2.80, reversion_speed=0.25, volatility=0.50),
    FlavorConfig("strawberry", spot=2.20, long_run_mean=2.20, reversion_speed=0.30, volatility=0.25),
    FlavorConfig("mint",       spot=3.00, long_run_mean=3.00, reversion_speed=0.20, volatility=0.45,
                 jump_probability=0.04, jump_size=0.20),
)
