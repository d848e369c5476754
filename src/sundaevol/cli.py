import argparse
import logging
import sys

from .config import DEFAULT_FLAVORS, DEFAULT_LATTICE_STEPS
from .core import OptionParameters, InvalidParameter, CALL, PUT, EUROPEAN, AMERICAN
from .market import Market
from .pricing import price, greeks

logger = logging.getLogger(__name__)


def _kind(s: str):
    s = s.lower()
    if s in {"call", "c"}:
        return CALL
    if s in {"put", "p"}:
        return PUT
    raise argparse.ArgumentTypeError("kind must be 'call' or 'put'")


def add_common(parser: argparse.ArgumentParser):
    parser.add_argument("--spot", type=float, required=True)
    parser.add_argument("--strike", type=float, required=True)
    parser.add_argument("--expiry", type=float, required=True, help="years")
    parser.add_argument("--rate", type=float, default=0.0, help="cont. risk-free")
    parser.add_argument("--vol", type=float, required=True, help="annualised volatility")
    parser.add_argument("--kind", type=_kind, default=CALL, help="call|put")
    parser.add_argument("--american", action="store_true")


def _params(args) -> OptionParameters:
    return OptionParameters(
        spot=args.spot, strike=args.strike, expiry=args.expiry,
        volatility=args.vol, rate=args.rate, kind=args.kind,
        exercise=AMERICAN if args.american else EUROPEAN,
    )


def cmd_price(args):
    print(f"{price(_params(args), steps=args.steps):.10f}")


def cmd_greeks(args):
    for name, value in greeks(_params(args)).as_dict().items():
        print(f"{name:>6}  {value: .10f}")


def cmd_simulate(args):
    market = Market.from_config(DEFAULT_FLAVORS, seed=args.seed)
    names = market.names
    print("day  " + "  ".join(f"{n:>10}" for n in names))
    for _ in range(args.days):
        spots = market.step()
        print(f"{market.day:>3.0f}  " + "  ".join(f"{spots[n]:>10.4f}" for n in names))


def main(argv=None):
    p = argparse.ArgumentParser(prog="sundaevol", description="Sundae Volatility pricing kernel")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_price = sub.add_parser("price", help="option value (closed form or CRR)")
    add_common(p_price)
    p_price.add_argument("--steps", type=int, default=DEFAULT_LATTICE_STEPS,
                         help="lattice steps for American")
    p_price.set_defaults(func=cmd_price)

    p_greeks = sub.add_parser("greeks", help="delta, gamma, theta/day, vega, rho")
    add_common(p_greeks)
    p_greeks.set_defaults(func=cmd_greeks)

    p_sim = sub.add_parser("simulate", help="step the default flavor market")
    p_sim.add_argument("--days", type=int, default=30)
    p_sim.add_argument("--seed", type=int, default=None)
    p_sim.set_defaults(func=cmd_simulate)

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        args.func(args)
    except InvalidParameter as exc:
        logger.error("%s", exc)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
