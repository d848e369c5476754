"""Multi-flavor market: owns the process states and the random stream.

The game loop calls :meth:`Market.step` once per simulated day and gets back
a snapshot of spot prices. Pricing works off that snapshot only; nothing
outside ``step`` mutates the process states.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping, Optional, Sequence

import numpy as np

from .config import DEFAULT_FLAVORS, FlavorConfig
from .core import InvalidParameter
from .processes import FlavorProcessState, advance

logger = logging.getLogger(__name__)

__all__ = ["Market"]


def _cholesky(correlation, n: int) -> np.ndarray:
    C = np.asarray(correlation, dtype=float)
    if C.shape != (n, n):
        raise InvalidParameter(f"correlation must be {n}x{n}, got shape {C.shape}")
    if not np.all(np.isfinite(C)):
        raise InvalidParameter("correlation must be finite")
    if not np.allclose(C, C.T):
        raise InvalidParameter("correlation must be symmetric")
    if not np.allclose(np.diag(C), 1.0):
        raise InvalidParameter("correlation must have a unit diagonal")
    if np.any(np.abs(C) > 1.0 + 1e-12):
        raise InvalidParameter("correlation entries must lie in [-1, 1]")
    try:
        return np.linalg.cholesky(C)
    except np.linalg.LinAlgError as exc:
        raise InvalidParameter("correlation must be positive definite") from exc


class Market:
    """A handful of flavor processes stepped together, one day at a time.

    Parameters
    ----------
    states : sequence of FlavorProcessState
        Initial calibrated states, one per flavor; names must be unique.
    seed : int, optional
        Seed for ``np.random.default_rng``. Same seed, same price paths.
    correlation : array-like, optional
        Correlation of the diffusion shocks, ordered like ``states``.
        ``None`` keeps the flavors independent.
    """

    def __init__(
        self,
        states: Sequence[FlavorProcessState],
        *,
        seed: Optional[int] = None,
        correlation=None,
    ):
        states = tuple(states)
        if not states:
            raise InvalidParameter("market needs at least one flavor")
        names = [s.name for s in states]
        if len(set(names)) != len(names):
            raise InvalidParameter(f"duplicate flavor names: {names}")

        self._initial = states
        self._seed = seed
        self._chol = None if correlation is None else _cholesky(correlation, len(states))
        self._states: dict[str, FlavorProcessState] = {s.name: s for s in states}
        self._rng = np.random.default_rng(seed)
        self._day = 0.0
        logger.info("market created with %d flavors (seed=%s, correlated=%s)",
                    len(states), seed, self._chol is not None)

    @classmethod
    def from_config(
        cls,
        flavors: Iterable[FlavorConfig] = DEFAULT_FLAVORS,
        *,
        seed: Optional[int] = None,
        correlation=None,
    ) -> Market:
        return cls([FlavorProcessState.from_config(f) for f in flavors],
                   seed=seed, correlation=correlation)

    # ------------------------------------------------------------------
    @property
    def day(self) -> float:
        return self._day

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._states)

    def state(self, name: str) -> FlavorProcessState:
        try:
            return self._states[name]
        except KeyError:
            raise InvalidParameter(f"unknown flavor {name!r}") from None

    def spots(self) -> dict[str, float]:
        return {name: s.spot for name, s in self._states.items()}

    # ------------------------------------------------------------------
    def step(self, dt: float = 1.0) -> Mapping[str, float]:
        """Advance every flavor exactly once and return the new spot snapshot."""
        if not (dt > 0 and math.isfinite(dt)):
            raise InvalidParameter(f"dt must be positive, got {dt}")

        shocks = [None] * len(self._states)
        if self._chol is not None:
            shocks = list(self._chol @ self._rng.standard_normal(len(self._states)))

        self._states = {
            name: advance(s, dt, rng=self._rng, shock=z)
            for (name, s), z in zip(self._states.items(), shocks)
        }
        self._day += dt
        return self.spots()

    def run(self, n_days: int, dt: float = 1.0) -> dict[str, np.ndarray]:
        """Step ``n_days`` times; paths of shape (n_days+1,) per flavor."""
        if n_days <= 0:
            raise InvalidParameter("n_days must be positive.")
        paths = {name: np.empty(n_days + 1) for name in self._states}
        for name, spot in self.spots().items():
            paths[name][0] = spot
        for t in range(n_days):
            for name, spot in self.step(dt).items():
                paths[name][t + 1] = spot
        return paths

    def reset(self) -> None:
        """New game: calibrated states, day 0, original seed."""
        self._states = {s.name: s for s in self._initial}
        self._rng = np.random.default_rng(self._seed)
        self._day = 0.0
        logger.info("market reset to day 0")
