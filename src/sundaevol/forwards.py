"""Forwards and futures: the linear, no-optionality instruments.

A forward is settled once at delivery, so its value today is discounted. A
future is marked to market daily, so its value is the undiscounted gap to
the current futures price.
"""

from __future__ import annotations
from math import exp

from .config import DAYS_PER_YEAR
from .core import Greeks, InvalidParameter, _finite


def _check(spot: float, delivery_price: float, rate: float, expiry: float) -> None:
    for name, value in (("spot", spot), ("delivery_price", delivery_price),
                        ("rate", rate), ("expiry", expiry)):
        _finite(name, value)
    if spot <= 0:
        raise InvalidParameter(f"spot must be positive, got {spot}")
    if delivery_price <= 0:
        raise InvalidParameter(f"delivery_price must be positive, got {delivery_price}")
    if expiry < 0:
        raise InvalidParameter(f"expiry must be non-negative, got {expiry}")


def forward_price(spot: float, rate: float, expiry: float) -> float:
    """Arbitrage-free delivery price S e^{rT}."""
    _check(spot, spot, rate, expiry)
    return spot * exp(rate * expiry)


def forward_value(spot: float, delivery_price: float, rate: float, expiry: float) -> float:
    """Value to the long side: S - K e^{-rT}."""
    _check(spot, delivery_price, rate, expiry)
    return spot - delivery_price * exp(-rate * expiry)


def futures_value(spot: float, delivery_price: float, rate: float, expiry: float) -> float:
    """Daily-settled value to the long side: F - K with F = S e^{rT}."""
    _check(spot, delivery_price, rate, expiry)
    return spot * exp(rate * expiry) - delivery_price



def forward_greeks(spot: float, delivery_price: float, rate: float, expiry: float,
                   *, days_per_year: float = DAYS_PER_YEAR) -> Greeks:
    """Sensitivities of ``forward_value``; gamma and vega are zero."""
    _check(spot, delivery_price, rate, expiry)
    disc_k = delivery_price * exp(-rate * expiry)
    return Greeks(delta=1.0, theta=-rate * disc_k / days_per_year, rho=expiry * disc_k)


def futures_greeks(spot: float, delivery_price: float, rate: float, expiry: float,
                   *, days_per_year: float = DAYS_PER_YEAR) -> Greeks:
    """Sensitivities of ``futures_value``; gamma and vega are zero."""
    _check(spot, delivery_price, rate, expiry)
    fwd = spot * exp(rate * expiry)
    return Greeks(delta=exp(rate * expiry), theta=-rate * fwd / days_per_year, rho=expiry * fwd)
