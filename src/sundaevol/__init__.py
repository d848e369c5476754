# sundaevol: pricing and market-simulation kernel for Sundae Volatility
# Public API

# Data model
from .core import (
    OptionParameters, Greeks, InvalidParameter,
    CALL, PUT, EUROPEAN, AMERICAN,
)

# Pricing engine
from .pricing import price, greeks, intrinsic_value, put_call_parity_gap, implied_volatility
from .binomial import crr

# Forwards & futures
from .forwards import (
    forward_price, forward_value, futures_value, forward_greeks, futures_greeks,
)

# Market simulator
from .processes import FlavorProcessState, advance, simulate_path
from .market import Market

# Positions
from .positions import (
    Position, PositionMark, mark_position, mark_book,
    portfolio_value, portfolio_greeks,
)

# Configuration
from .config import PricingConfig, FlavorConfig, DEFAULT_FLAVORS

__all__ = [
    # Data model
    "OptionParameters", "Greeks", "InvalidParameter",
    "CALL", "PUT", "EUROPEAN", "AMERICAN",
    # Pricing
    "price", "greeks", "intrinsic_value", "put_call_parity_gap",
    "implied_volatility", "crr",
    # Forwards & futures
    "forward_price", "forward_value", "futures_value",
    "forward_greeks", "futures_greeks",
    # Simulator
    "FlavorProcessState", "advance", "simulate_path", "Market",
    # Positions
    "Position", "PositionMark", "mark_position", "mark_book",
    "portfolio_value", "portfolio_greeks",
    # Config
    "PricingConfig", "FlavorConfig", "DEFAULT_FLAVORS",
]

__version__ = "0.1.0"
