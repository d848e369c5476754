import math
from math import log, sqrt, exp
from statistics import NormalDist

from .config import DAYS_PER_YEAR, VOL_EPSILON
from .core import OptionParameters, Greeks, InvalidParameter, CALL, PUT

_nd = NormalDist()


def _pdf(x: float) -> float:
    return math.exp(-0.5 * x * x) / math.sqrt(2 * math.pi)


def _require_vol(opt: OptionParameters) -> None:
    if opt.volatility < VOL_EPSILON:
        raise InvalidParameter(
            f"volatility must be at least {VOL_EPSILON} before expiry, got {opt.volatility}"
        )


def _d1_d2(opt: OptionParameters) -> tuple[float, float]:
    _require_vol(opt)
    rt = opt.volatility * sqrt(opt.expiry)
    d1 = (log(opt.spot / opt.strike)
          + (opt.rate + 0.5 * opt.volatility * opt.volatility) * opt.expiry) / rt
    d2 = d1 - rt
    return d1, d2


def price(opt: OptionParameters) -> float:
    """Closed-form European value. Expired options are worth intrinsic only."""
    if opt.expiry <= 0:
        return opt.intrinsic()
    d1, d2 = _d1_d2(opt)
    disc_r = exp(-opt.rate * opt.expiry)
    if opt.kind == CALL:
        value = opt.spot * _nd.cdf(d1) - disc_r * opt.strike * _nd.cdf(d2)
    else:
        value = disc_r * opt.strike * _nd.cdf(-d2) - opt.spot * _nd.cdf(-d1)
    # rounding dust on deep out-of-the-money strikes
    return max(value, 0.0)


def greeks(opt: OptionParameters, *, days_per_year: float = DAYS_PER_YEAR) -> Greeks:
    """Analytic Greeks with theta per day and vega/rho per unit move."""
    if opt.expiry <= 0:
        return _expiry_greeks(opt)

    d1, d2 = _d1_d2(opt)
    S, K, T, r, sigma = opt.spot, opt.strike, opt.expiry, opt.rate, opt.volatility
    n_d1   = _pdf(d1)
    N_d1   = _nd.cdf(d1)
    disc_r = exp(-r * T)
    sqrt_t = sqrt(T)

    # Common
    gamma = n_d1 / (S * sigma * sqrt_t)
    vega  = S * n_d1 * sqrt_t
    decay = -S * n_d1 * sigma / (2 * sqrt_t)

    if opt.kind == CALL:
        delta = N_d1
        theta = decay - r * K * disc_r * _nd.cdf(d2)
        rho   = K * T * disc_r * _nd.cdf(d2)
    else:
        delta = N_d1 - 1.0
        theta = decay + r * K * disc_r * _nd.cdf(-d2)
        rho   = -K * T * disc_r * _nd.cdf(-d2)

    return Greeks(delta=delta, gamma=gamma, theta=theta / days_per_year,
                  vega=vega, rho=rho)


def _expiry_greeks(opt: OptionParameters) -> Greeks:
    # Only a strictly in-the-money option still moves one-for-one with spot.
    if opt.kind == CALL:
        delta = 1.0 if opt.spot > opt.strike else 0.0
    else:
        delta = -1.0 if opt.spot < opt.strike else 0.0
    return Greeks(delta=delta)


def parity_gap(opt: OptionParameters) -> float:
    """call - put - (S - K e^{-rT}); zero up to rounding for any valid input."""
    call = price(opt.with_(kind=CALL))
    put = price(opt.with_(kind=PUT))
    return call - put - (opt.spot - opt.strike * exp(-opt.rate * opt.expiry))


def implied_vol(opt: OptionParameters, target_price: float, *,
                tol: float = 1e-10, maxiter: int = 200, bracket=(1e-6, 5.0)) -> float:
    """Brent root find on volatility for the European closed form."""
    from scipy.optimize import brentq

    if opt.expiry <= 0:
        raise InvalidParameter("implied volatility is undefined at expiry")
    disc_k = opt.strike * exp(-opt.rate * opt.expiry)
    if opt.kind == CALL:
        lower, upper = max(0.0, opt.spot - disc_k), opt.spot
    else:
        lower, upper = max(0.0, disc_k - opt.spot), disc_k
    if not (lower < target_price < upper):
        raise InvalidParameter(
            f"target price {target_price} outside no-arbitrage bounds ({lower}, {upper})"
        )

    def f(sig):
        return price(opt.with_(volatility=sig)) - target_price

    a, b = bracket
    while f(b) < 0 and b < 100.0:
        b *= 2.0
    try:
        return float(brentq(f, a, b, xtol=tol, maxiter=maxiter))
    except (ValueError, RuntimeError) as exc:
        raise InvalidParameter(
            f"no implied volatility in [{a}, {b}] for target price {target_price}"
        ) from exc
