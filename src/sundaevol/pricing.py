"""Stateless valuation entry points.

``price`` and ``greeks`` are what the game layer calls: once per quoted
opportunity and once per open position per tick. Both are pure functions of
an :class:`~sundaevol.core.OptionParameters` snapshot and never touch the
market simulator.
"""

from __future__ import annotations

from . import black_scholes as bs
from .binomial import crr
from .config import DAYS_PER_YEAR, DEFAULT_LATTICE_STEPS, VOL_EPSILON
from .core import OptionParameters, Greeks, InvalidParameter, AMERICAN

__all__ = [
    "price",
    "greeks",
    "intrinsic_value",
    "put_call_parity_gap",
    "implied_volatility",
]


def price(params: OptionParameters, *, steps: int = DEFAULT_LATTICE_STEPS) -> float:
    """Value one option.

    Parameters
    ----------
    params : OptionParameters
        Option and market snapshot.
    steps : int
        Lattice steps for American exercise (ignored for European).

    Returns
    -------
    float
        Intrinsic value when ``expiry == 0``; closed form for European
        exercise; CRR lattice for American exercise.

    Raises
    ------
    InvalidParameter
        Volatility below ``VOL_EPSILON`` before expiry, or ``steps <= 0``.
    """
    if params.exercise == AMERICAN:
        if steps <= 0:
            raise InvalidParameter(f"lattice steps must be positive, got {steps}")
        if params.expiry <= 0:
            return params.intrinsic()
        if params.volatility < VOL_EPSILON:
            raise InvalidParameter(
                f"volatility must be at least {VOL_EPSILON} before expiry, "
                f"got {params.volatility}"
            )
        # early exercise can only add value
        return max(crr(params, N=steps, american=True), bs.price(params))
    return bs.price(params)


def greeks(params: OptionParameters, *, days_per_year: float = DAYS_PER_YEAR) -> Greeks:
    """Closed-form sensitivities sharing ``price``'s d1/d2.

    Theta is decay per day of a ``days_per_year`` calendar. American options
    report the European sensitivities.
    """
    return bs.greeks(params, days_per_year=days_per_year)


def intrinsic_value(params: OptionParameters) -> float:
    return params.intrinsic()


def put_call_parity_gap(params: OptionParameters) -> float:
    return bs.parity_gap(params)


def implied_volatility(params: OptionParameters, target_price: float) -> float:
    """Volatility at which the European closed form reproduces ``target_price``."""
    return bs.implied_vol(params, target_price)
