"""Mark open positions against a spot snapshot.

Positions belong to the game layer. The kernel reads them, prices them and
hands back a :class:`PositionMark`; it never edits a position.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from . import forwards
from .config import PricingConfig
from .core import OptionParameters, Greeks, InvalidParameter, CALL, PUT, EUROPEAN
from .pricing import price, greeks

logger = logging.getLogger(__name__)

__all__ = [
    "Position",
    "PositionMark",
    "mark_position",
    "mark_book",
    "portfolio_value",
    "portfolio_greeks",
]

FORWARD = "forward"
FUTURE = "future"
INSTRUMENTS = (CALL, PUT, FORWARD, FUTURE)


@dataclass(frozen=True)
class Position:
    """One open trade.

    Parameters
    ----------
    flavor : str
        Underlying name, used to look up its spot.
    instrument : str
        ``"call"``, ``"put"``, ``"forward"`` or ``"future"``.
    strike : float
        Strike, or delivery price for forwards and futures.
    expiry_day : float
        Simulated day the contract expires.
    quantity : float
        Signed size; negative is short.
    entry_price : float
        Per-unit premium paid (0 for forwards and futures).
    exercise : str
        Exercise style for options.
    """
    flavor: str
    instrument: str
    strike: float
    expiry_day: float
    quantity: float
    entry_price: float = 0.0
    exercise: str = EUROPEAN

    def __post_init__(self):
        if self.instrument not in INSTRUMENTS:
            raise InvalidParameter(
                f"instrument must be one of {INSTRUMENTS}, got {self.instrument!r}"
            )


@dataclass(frozen=True)
class PositionMark:
    position: Position
    unit_value: float
    market_value: float
    pnl: float
    greeks: Greeks


def mark_position(
    position: Position,
    spot: float,
    *,
    day: float,
    rate: float,
    volatility: float,
    config: PricingConfig = PricingConfig(),
) -> PositionMark:
    """Value and Greeks of ``position`` at ``spot`` on simulated ``day``.

    Greeks are scaled by the signed quantity; ``pnl`` is measured against
    ``entry_price``.
    """
    expiry = max(0.0, position.expiry_day - day) / config.days_per_year

    if position.instrument == FORWARD:
        unit = forwards.forward_value(spot, position.strike, rate, expiry)
        unit_greeks = forwards.forward_greeks(spot, position.strike, rate, expiry,
                                              days_per_year=config.days_per_year)
    elif position.instrument == FUTURE:
        unit = forwards.futures_value(spot, position.strike, rate, expiry)
        unit_greeks = forwards.futures_greeks(spot, position.strike, rate, expiry,
                                              days_per_year=config.days_per_year)
    else:
        params = OptionParameters(
            spot=spot, strike=position.strike, expiry=expiry,
            volatility=volatility, rate=rate,
            kind=position.instrument, exercise=position.exercise,
        )
        unit = price(params, steps=config.lattice_steps)
        unit_greeks = greeks(params, days_per_year=config.days_per_year)

    q = position.quantity
    return PositionMark(
        position=position,
        unit_value=unit,
        market_value=q * unit,
        pnl=q * (unit - position.entry_price),
        greeks=unit_greeks.scaled(q),
    )


def mark_book(
    positions: Iterable[Position],
    spots: Mapping[str, float],
    *,
    day: float,
    rate: float,
    volatilities: Mapping[str, float],
    config: PricingConfig = PricingConfig(),
) -> list[PositionMark]:
    """Mark every position against one spot snapshot."""
    marks = []
    for pos in positions:
        try:
            spot = spots[pos.flavor]
            vol = volatilities[pos.flavor]
        except KeyError:
            raise InvalidParameter(f"no market data for flavor {pos.flavor!r}") from None
        marks.append(mark_position(pos, spot, day=day, rate=rate,
                                   volatility=vol, config=config))
    logger.debug("marked %d positions on day %g", len(marks), day)
    return marks


def portfolio_value(marks: Iterable[PositionMark]) -> float:
    return sum(m.market_value for m in marks)


def portfolio_greeks(marks: Iterable[PositionMark]) -> Greeks:
    total = Greeks()
    for m in marks:
        total = total + m.greeks
    return total
