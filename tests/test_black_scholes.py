from sundaevol.core import OptionParameters, PUT
from sundaevol.black_scholes import price


def test_bs_known_values():
    opt = OptionParameters(spot=100, strike=100, expiry=1.0, volatility=0.2, rate=0.05)
    assert abs(price(opt) - 10.4506) < 1e-3
    assert abs(price(opt.with_(kind=PUT)) - 5.5735) < 1e-3
