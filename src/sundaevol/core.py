from __future__ import annotations
import math
from dataclasses import dataclass, replace, asdict


CALL = "call"
PUT  = "put"
EUROPEAN = "european"
AMERICAN = "american"


class InvalidParameter(ValueError):
    """Caller contract violation: the kernel refuses to price or step on it."""


def _finite(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise InvalidParameter(f"{name} must be finite, got {value}")
    return value


# ---------------------------------------------------------------------------
# Option inputs
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class OptionParameters:
    """Immutable input bundle for one vanilla option.

    Parameters
    ----------
    spot : float
        Current underlying price (> 0).
    strike : float
        Strike price (> 0).
    expiry : float
        Time to expiry in years (>= 0). At 0 only intrinsic value remains.
    volatility : float
        Annualised volatility (>= 0). Pricing with ``expiry > 0`` needs it
        strictly positive.
    rate : float
        Continuously-compounded risk-free rate, may be negative.
    kind : str
        ``"call"`` or ``"put"``.
    exercise : str
        ``"european"`` (default) or ``"american"``.
    """
    spot: float
    strike: float
    expiry: float
    volatility: float
    rate: float = 0.0
    kind: str = CALL
    exercise: str = EUROPEAN

    def __post_init__(self):
        for name in ("spot", "strike", "expiry", "volatility", "rate"):
            _finite(name, getattr(self, name))
        if self.spot <= 0:
            raise InvalidParameter(f"spot must be positive, got {self.spot}")
        if self.strike <= 0:
            raise InvalidParameter(f"strike must be positive, got {self.strike}")
        if self.expiry < 0:
            raise InvalidParameter(f"expiry must be non-negative, got {self.expiry}")
        if self.volatility < 0:
            raise InvalidParameter(
                f"volatility must be non-negative, got {self.volatility}"
            )
        if self.kind not in (CALL, PUT):
            raise InvalidParameter(f"kind must be 'call' or 'put', got {self.kind!r}")
        if self.exercise not in (EUROPEAN, AMERICAN):
            raise InvalidParameter(
                f"exercise must be 'european' or 'american', got {self.exercise!r}"
            )

    def with_(self, **changes) -> OptionParameters:
        """Copy with some fields changed; the copy is validated again."""
        return replace(self, **changes)

    def intrinsic(self) -> float:
        if self.kind == CALL:
            return max(0.0, self.spot - self.strike)
        return max(0.0, self.strike - self.spot)


# ---------------------------------------------------------------------------
# Sensitivities
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Greeks:
    """First- and second-order sensitivities of one option.

    ``theta`` is value decay per calendar day; ``vega`` and ``rho`` are per
    unit (1.00) change of volatility and rate, not per 1%.
    """
    delta: float = 0.0
    gamma: float = 0.0
    theta: float = 0.0
    vega: float = 0.0
    rho: float = 0.0

    def as_dict(self) -> dict[str, float]:
        return asdict(self)

    def scaled(self, quantity: float) -> Greeks:
        return Greeks(**{k: v * quantity for k, v in asdict(self).items()})

    def __add__(self, other: Greeks) -> Greeks:
        if not isinstance(other, Greeks):
            return NotImplemented
        return Greeks(
            delta=self.delta + other.delta,
            gamma=self.gamma + other.gamma,
            theta=self.theta + other.theta,
            vega=self.vega + other.vega,
            rho=self.rho + other.rho,
        )
