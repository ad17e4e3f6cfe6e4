"""
Independent scalar Black-Scholes formulas used as a cross-check.
"""

import math


def norm_cdf(x: float) -> float:
    return 0.5 * math.erfc(-x / math.sqrt(2.0))


def black_scholes_call(S0: float, K: float, r: float, sigma: float, T: float) -> float:
    """Call price from the textbook formula."""
    d1 = (math.log(S0 / K) + (r + 0.5 * sigma**2) * T) / (sigma * math.sqrt(T))
    d2 = d1 - sigma * math.sqrt(T)
    return S0 * norm_cdf(d1) - K * math.exp(-r * T) * norm_cdf(d2)


def black_scholes_put(S0: float, K: float, r: float, sigma: float, T: float) -> float:
    """Put price from the textbook formula."""
    d1 = (math.log(S0 / K) + (r + 0.5 * sigma**2) * T) / (sigma * math.sqrt(T))
    d2 = d1 - sigma * math.sqrt(T)
    return K * math.exp(-r * T) * norm_cdf(-d2) - S0 * norm_cdf(-d1)


def finite_difference(f, x: float, h: float) -> float:
    """Central difference of f at x."""
    return (f(x + h) - f(x - h)) / (2 * h)
