import numpy as np
from math import exp, sqrt

from .config import DEFAULT_LATTICE_STEPS
from .core import OptionParameters, InvalidParameter, CALL


def crr(opt: OptionParameters, N: int = DEFAULT_LATTICE_STEPS, *, american: bool = True) -> float:
    """Cox-Ross-Rubinstein tree, one array of node values walked back to today.

    Fixed ``N`` means fixed cost per call. With ``american=True`` every node
    takes the larger of immediate exercise and discounted continuation.
    """
    if N <= 0:
        raise InvalidParameter(f"lattice steps must be positive, got {N}")
    if opt.expiry <= 0:
        return opt.intrinsic()
    if opt.volatility <= 0:
        raise InvalidParameter(f"volatility must be positive, got {opt.volatility}")

    dt = opt.expiry / N
    u  = exp(opt.volatility * sqrt(dt))
    d  = 1.0 / u
    disc = exp(-opt.rate * dt)
    p = (exp(opt.rate * dt) - d) / (u - d)
    if not (0.0 < p < 1.0):
        raise InvalidParameter(
            "Risk-neutral prob p out of (0,1); try larger N or different params."
        )
    sign = 1.0 if opt.kind == CALL else -1.0

    # Payoff at maturity
    j = np.arange(N + 1)
    ST = opt.spot * (u ** j) * (d ** (N - j))
    V = np.maximum(sign * (ST - opt.strike), 0.0)

    # Backward induction
    for k in range(N - 1, -1, -1):
        V = disc * (p * V[1:] + (1.0 - p) * V[:-1])
        if american:
            j = np.arange(k + 1)
            S_k = opt.spot * (u ** j) * (d ** (k - j))
            V = np.maximum(V, sign * (S_k - opt.strike))

    return float(V[0])
