"""
Builders for common option strategies.

Premiums are per contract; every leg uses the same ``quantity``.
"""

from synth_options.distribution.strategy import OptionLeg, Strategy, combine


def long_call(strike: float, premium: float, quantity: float = 1.0) -> Strategy:
    return Strategy((OptionLeg("call", strike, quantity, "long", premium),), name="Long Call")


def long_put(strike: float, premium: float, quantity: float = 1.0) -> Strategy:
    return Strategy((OptionLeg("put", strike, quantity, "long", premium),), name="Long Put")


def bull_call_spread(
    lower_strike: float,
    upper_strike: float,
    lower_premium: float,
    upper_premium: float,
    quantity: float = 1.0,
) -> Strategy:
    """Buy the lower-strike call, sell the upper-strike call."""
    return Strategy(
        (
            OptionLeg("call", lower_strike, quantity, "long", lower_premium),
            OptionLeg("call", upper_strike, quantity, "short", upper_premium),
        ),
        name="Bull Call Spread",
    )


def bear_put_spread(
    upper_strike: float,
    lower_strike: float,
    upper_premium: float,
    lower_premium: float,
    quantity: float = 1.0,
) -> Strategy:
    """Buy the upper-strike put, sell the lower-strike put."""
    return Strategy(
        (
            OptionLeg("put", upper_strike, quantity, "long", upper_premium),
            OptionLeg("put", lower_strike, quantity, "short", lower_premium),
        ),
        name="Bear Put Spread",
    )


def straddle(strike: float, call_premium: float, put_premium: float, quantity: float = 1.0) -> Strategy:
    return Strategy(
        (
            OptionLeg("call", strike, quantity, "long", call_premium),
            OptionLeg("put", strike, quantity, "long", put_premium),
        ),
        name="Straddle",
    )


def strangle(
    put_strike: float,
    call_strike: float,
    put_premium: float,
    call_premium: float,
    quantity: float = 1.0,
) -> Strategy:
    return Strategy(
        (
            OptionLeg("put", put_strike, quantity, "long", put_premium),
            OptionLeg("call", call_strike, quantity, "long", call_premium),
        ),
        name="Strangle",
    )


def iron_condor(
    long_put_strike: float,
    short_put_strike: float,
    short_call_strike: float,
    long_call_strike: float,
    premiums: tuple[float, float, float, float],
    quantity: float = 1.0,
) -> Strategy:
    """
    Short put spread plus short call spread.

    ``premiums`` follows the strike order: long put, short put, short call,
    long call.
    """
    long_put_premium, short_put_premium, short_call_premium, long_call_premium = premiums
    put_side = Strategy(
        (
            OptionLeg("put", short_put_strike, quantity, "short", short_put_premium),
            OptionLeg("put", long_put_strike, quantity, "long", long_put_premium),
        )
    )
    call_side = Strategy(
        (
            OptionLeg("call", short_call_strike, quantity, "short", short_call_premium),
            OptionLeg("call", long_call_strike, quantity, "long", long_call_premium),
        )
    )
    return combine((call_side, put_side), name="Iron Condor")


def butterfly(
    lower_strike: float,
    middle_strike: float,
    upper_strike: float,
    premiums: tuple[float, float, float],
    quantity: float = 1.0,
) -> Strategy:
    """Long call butterfly: +1 lower, -2 middle, +1 upper."""
    lower_premium, middle_premium, upper_premium = premiums
    return Strategy(
        (
            OptionLeg("call", lower_strike, quantity, "long", lower_premium),
            OptionLeg("call", middle_strike, 2 * quantity, "short", middle_premium),
            OptionLeg("call", upper_strike, quantity, "long", upper_premium),
        ),
        name="Butterfly",
    )


TEMPLATES = {
    "long_call": long_call,
    "long_put": long_put,
    "bull_call_spread": bull_call_spread,
    "bear_put_spread": bear_put_spread,
    "straddle": straddle,
    "strangle": strangle,
    "iron_condor": iron_condor,
    "butterfly": butterfly,
}
