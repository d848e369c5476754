"""Tests for the mean-reverting jump diffusion."""

from dataclasses import replace

import numpy as np
import pytest

from sundaevol import FlavorProcessState, InvalidParameter, advance, simulate_path
from sundaevol.config import DEFAULT_FLAVORS, PRICE_FLOOR

N_STEPS, SEED = 10_000, 42


@pytest.fixture
def vanilla():
    return FlavorProcessState(
        name="vanilla", spot=2.5, long_run_mean=2.5, reversion_speed=0.3,
        volatility=0.35, jump_probability=0.02, jump_size=0.15,
    )


# ---------------------------------------------------------------------------
# Long run behaviour
# ---------------------------------------------------------------------------
class TestLongPath:
    def test_shape_includes_start(self, vanilla):
        path = simulate_path(vanilla, N_STEPS, seed=SEED)
        assert path.shape == (N_STEPS + 1,)
        assert path[0] == 2.5

    def test_stays_above_floor(self, vanilla):
        path = simulate_path(vanilla, N_STEPS, seed=SEED)
        assert np.all(path >= PRICE_FLOOR)

    def test_no_runaway_drift(self, vanilla):
        path = simulate_path(vanilla, N_STEPS, seed=SEED)
        assert abs(path.mean() - 2.5) < 0.25
        # stationary spread of the daily AR(1): 0.35 / sqrt(1 - 0.7**2) ~ 0.49
        assert 0.35 < path.std() < 0.65

    def test_low_mean_hits_floor(self):
        # mean half a standard deviation above the floor, ordinary noise
        cheap = FlavorProcessState(
            name="cheap", spot=0.3, long_run_mean=0.3, reversion_speed=0.3,
            volatility=0.35, jump_probability=0.02, jump_size=0.15,
        )
        path = simulate_path(cheap, N_STEPS, seed=SEED)
        assert path.min() == PRICE_FLOOR
        assert np.all(path >= PRICE_FLOOR)
        assert np.count_nonzero(path == PRICE_FLOOR) > 100

    def test_default_flavors_respect_floor(self):
        for cfg in DEFAULT_FLAVORS:
            state = replace(FlavorProcessState.from_config(cfg), spot=0.1)
            path = simulate_path(state, N_STEPS, seed=SEED)
            assert np.all(path >= cfg.floor)

    def test_reproducible(self, vanilla):
        a = simulate_path(vanilla, 1000, seed=7)
        b = simulate_path(vanilla, 1000, seed=7)
        c = simulate_path(vanilla, 1000, seed=8)
        assert np.array_equal(a, b)
        assert not np.array_equal(a, c)


# ---------------------------------------------------------------------------
# Single step
# ---------------------------------------------------------------------------
class TestAdvance:
    def test_pure_and_day_counter(self, vanilla):
        rng = np.random.default_rng(0)
        nxt = advance(vanilla, rng=rng)
        assert vanilla.spot == 2.5 and vanilla.day == 0.0
        assert nxt.day == 1.0
        assert nxt.long_run_mean == vanilla.long_run_mean

    def test_deterministic_reversion(self):
        # no noise, no jumps: exact Euler pull toward the mean
        s = FlavorProcessState(name="x", spot=4.0, long_run_mean=2.0,
                               reversion_speed=0.25, volatility=0.0,
                               jump_probability=0.0, jump_size=0.0)
        nxt = advance(s, rng=np.random.default_rng(1))
        assert nxt.spot == pytest.approx(4.0 + 0.25 * (2.0 - 4.0))

    def test_supplied_shock(self):
        s = FlavorProcessState(name="x", spot=2.0, long_run_mean=2.0,
                               reversion_speed=0.0, volatility=0.35,
                               jump_probability=0.0, jump_size=0.0)
        rng = np.random.default_rng(1)
        # diffusion = volatility * sqrt(dt) * Z
        assert advance(s, 1.0, rng=rng, shock=1.0).spot == pytest.approx(2.35)
        assert advance(s, 4.0, rng=rng, shock=-1.0).spot == pytest.approx(2.0 - 0.7)

    def test_diffusion_size_at_one_day(self):
        s = FlavorProcessState(name="x", spot=10.0, long_run_mean=10.0,
                               reversion_speed=0.0, volatility=0.35,
                               jump_probability=0.0, jump_size=0.0)
        rng = np.random.default_rng(21)
        moves = np.array([advance(s, rng=rng).spot - 10.0 for _ in range(10_000)])
        assert abs(moves.mean()) < 0.02
        assert moves.std() == pytest.approx(0.35, abs=0.015)

    def test_diffusion_ignores_price_level(self):
        base = dict(name="x", long_run_mean=5.0, reversion_speed=0.0,
                    volatility=0.35, jump_probability=0.0, jump_size=0.0)
        low = FlavorProcessState(spot=3.0, **base)
        high = FlavorProcessState(spot=9.0, **base)
        r1, r2 = np.random.default_rng(4), np.random.default_rng(4)
        for _ in range(50):
            a, b = advance(low, rng=r1), advance(high, rng=r2)
            assert a.spot - 3.0 == pytest.approx(b.spot - 9.0)

    @pytest.mark.parametrize("dt, expected", [(0.5, 0.1), (2.0, 0.4)])
    def test_jump_frequency_scales_with_dt(self, dt, expected):
        s = FlavorProcessState(name="x", spot=2.0, long_run_mean=2.0,
                               reversion_speed=0.0, volatility=0.0,
                               jump_probability=0.2, jump_size=0.1)
        rng = np.random.default_rng(8)
        n = 5000
        jumped = sum(advance(s, dt, rng=rng).spot != 2.0 for _ in range(n))
        assert jumped / n == pytest.approx(expected, abs=0.03)

    def test_jump_chance_capped_at_one(self):
        s = FlavorProcessState(name="x", spot=2.0, long_run_mean=2.0,
                               reversion_speed=0.0, volatility=0.0,
                               jump_probability=0.6, jump_size=0.1)
        rng = np.random.default_rng(13)
        for _ in range(500):
            nxt = advance(s, 2.0, rng=rng)
            assert nxt.spot != 2.0
            assert 1.8 - 1e-12 <= nxt.spot <= 2.2 + 1e-12

    def test_certain_jump_bounded(self):
        s = FlavorProcessState(name="x", spot=2.0, long_run_mean=2.0,
                               reversion_speed=0.0, volatility=0.0,
                               jump_probability=1.0, jump_size=0.2)
        rng = np.random.default_rng(3)
        for _ in range(100):
            nxt = advance(s, rng=rng)
            assert 1.6 - 1e-12 <= nxt.spot <= 2.4 + 1e-12

    def test_floor_clamp(self):
        s = FlavorProcessState(name="x", spot=0.06, long_run_mean=0.06,
                               reversion_speed=0.0, volatility=0.0,
                               jump_probability=1.0, jump_size=1.0, floor=0.05)
        rng = np.random.default_rng(11)
        spots = []
        for _ in range(200):
            s = advance(s, rng=rng)
            spots.append(s.spot)
        assert min(spots) == 0.05

    def test_stream_use_independent_of_jumps(self):
        base = dict(name="x", spot=2.0, long_run_mean=2.0, reversion_speed=0.1,
                    volatility=0.3, jump_size=0.1)
        quiet = FlavorProcessState(jump_probability=0.0, **base)
        jumpy = FlavorProcessState(jump_probability=1.0, **base)
        r1, r2 = np.random.default_rng(5), np.random.default_rng(5)
        advance(quiet, rng=r1)
        advance(jumpy, rng=r2)
        assert r1.random() == r2.random()

    @pytest.mark.parametrize("dt", [0.0, -1.0, float("nan")])
    def test_bad_dt(self, vanilla, dt):
        with pytest.raises(InvalidParameter):
            advance(vanilla, dt, rng=np.random.default_rng(0))


# ---------------------------------------------------------------------------
# Configuration errors at construction
# ---------------------------------------------------------------------------
class TestValidation:
    @pytest.mark.parametrize("kwargs", [
        dict(volatility=-0.1),
        dict(reversion_speed=-0.3),
        dict(jump_probability=1.5),
        dict(jump_probability=-0.01),
        dict(jump_size=-0.1),
        dict(long_run_mean=0.0),
        dict(floor=0.0),
        dict(spot=0.01),
        dict(spot=float("inf")),
    ])
    def test_rejected(self, kwargs):
        base = dict(name="bad", spot=2.5, long_run_mean=2.5, reversion_speed=0.3,
                    volatility=0.35, jump_probability=0.02, jump_size=0.15)
        base.update(kwargs)
        with pytest.raises(InvalidParameter):
            FlavorProcessState(**base)

    def test_bad_step_count(self, vanilla):
        with pytest.raises(InvalidParameter):
            simulate_path(vanilla, 0)
