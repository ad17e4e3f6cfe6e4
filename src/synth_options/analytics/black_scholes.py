"""
Black-Scholes analytical pricing formulas for European options.

Greeks scaling used throughout the package:

- vega and rho are reported per 1 percentage point move (raw derivative / 100)
- theta is reported per calendar day (annualized derivative / 365)

``bs_vega_raw`` returns the unscaled dV/dσ used by the implied volatility
solver.
"""

import math

from synth_options.analytics.types import Greeks, MarketParameters
from synth_options.validation import require_option_kind

VOL_POINT = 0.01
DAYS_PER_YEAR = 365.0

# Abramowitz & Stegun 7.1.26 coefficients
_AS_P = 0.3275911
_AS_A = (0.254829592, -0.284496736, 1.421413741, -1.453152027, 1.061405429)


def norm_cdf(x: float) -> float:
    """
    Cumulative distribution function for standard normal distribution.

    Uses math.erf for calculation without scipy dependency.

    Parameters
    ----------
    x : float
        Input value

    Returns
    -------
    float
        CDF value at x: P(Z <= x) where Z ~ N(0,1)
    """
    return 0.5 * (1.0 + math.erf(x / math.sqrt(2.0)))


def norm_cdf_approx(x: float) -> float:
    """
    Standard normal CDF via the Abramowitz & Stegun rational approximation.

    Absolute error is below 1.5e-7. Kept for numeric compatibility with
    dashboards that use the same fixed-coefficient form.
    """
    sign = -1.0 if x < 0 else 1.0
    z = abs(x) / math.sqrt(2.0)
    t = 1.0 / (1.0 + _AS_P * z)
    a1, a2, a3, a4, a5 = _AS_A
    poly = t * (a1 + t * (a2 + t * (a3 + t * (a4 + t * a5))))
    y = 1.0 - poly * math.exp(-z * z)
    return 0.5 * (1.0 + sign * y)


def norm_pdf(x: float) -> float:
    """
    Probability density function for standard normal distribution.

    Parameters
    ----------
    x : float
        Input value

    Returns
    -------
    float
        PDF value at x: φ(x) = exp(-x²/2)/√(2π)
    """
    return math.exp(-0.5 * x**2) / math.sqrt(2.0 * math.pi)


def d1_d2(params: MarketParameters) -> tuple[float, float]:
    """
    Return (d1, d2) for parameters with positive time and volatility.
    """
    S, K, T = params.spot, params.strike, params.time_to_expiry
    r, sigma = params.risk_free_rate, params.volatility
    sigma_sqrt_t = sigma * math.sqrt(T)
    d1 = (math.log(S / K) + (r + 0.5 * sigma**2) * T) / sigma_sqrt_t
    return d1, d1 - sigma_sqrt_t


def _is_degenerate(params: MarketParameters) -> bool:
    return params.time_to_expiry == 0 or params.volatility == 0


def bs_price(params: MarketParameters, option_kind: str) -> float:
    """
    Compute European option price using Black-Scholes formula.

    Parameters
    ----------
    params : MarketParameters
        Spot, strike, time, rate and volatility
    option_kind : str
        'call' or 'put'

    Returns
    -------
    float
        Option price

    Notes
    -----
    Edge cases:
    - T == 0: returns intrinsic value max(S - K, 0) for call or max(K - S, 0) for put
    - sigma == 0: returns discounted intrinsic based on forward price
    """
    require_option_kind(option_kind)
    S, K, T = params.spot, params.strike, params.time_to_expiry
    r, sigma = params.risk_free_rate, params.volatility

    if T == 0:
        if option_kind == "call":
            return max(S - K, 0.0)
        return max(K - S, 0.0)

    discount = math.exp(-r * T)

    if sigma == 0:
        forward = S * math.exp(r * T)
        if option_kind == "call":
            return max(forward - K, 0.0) * discount
        return max(K - forward, 0.0) * discount

    d1, d2 = d1_d2(params)
    if option_kind == "call":
        return S * norm_cdf(d1) - K * discount * norm_cdf(d2)
    return K * discount * norm_cdf(-d2) - S * norm_cdf(-d1)


def bs_delta(params: MarketParameters, option_kind: str) -> float:
    """
    Compute Delta = ∂V/∂S.

    At expiry delta is 1/0 for a call and -1/0 for a put, by strict
    comparison of spot against strike.
    """
    require_option_kind(option_kind)
    S, K = params.spot, params.strike

    if params.time_to_expiry == 0:
        if option_kind == "call":
            return 1.0 if S > K else 0.0
        return -1.0 if S < K else 0.0

    if params.volatility == 0:
        forward = S * math.exp(params.risk_free_rate * params.time_to_expiry)
        if option_kind == "call":
            return 1.0 if forward > K else 0.0
        return -1.0 if forward < K else 0.0

    d1, _ = d1_d2(params)
    if option_kind == "call":
        return norm_cdf(d1)
    return norm_cdf(d1) - 1.0


def bs_gamma(params: MarketParameters) -> float:
    """
    Compute Gamma = ∂²V/∂S² (same for calls and puts).

    Gamma = φ(d1) / (S * σ * √T), and 0 at expiry.
    """
    if _is_degenerate(params):
        return 0.0
    d1, _ = d1_d2(params)
    return norm_pdf(d1) / (params.spot * params.volatility * math.sqrt(params.time_to_expiry))


def bs_vega_raw(params: MarketParameters) -> float:
    """
    Compute unscaled Vega = ∂V/∂σ = S * φ(d1) * √T.
    """
    if _is_degenerate(params):
        return 0.0
    d1, _ = d1_d2(params)
    return params.spot * norm_pdf(d1) * math.sqrt(params.time_to_expiry)


def bs_vega(params: MarketParameters) -> float:
    """
    Compute Vega per 1 percentage point of volatility.
    """
    return bs_vega_raw(params) * VOL_POINT


def bs_theta(params: MarketParameters, option_kind: str) -> float:
    """
    Compute Theta per calendar day.

    Notes
    -----
    Annualized values before dividing by 365:
    For call: -[S*φ(d1)*σ/(2√T)] - r*K*exp(-rT)*N(d2)
    For put: -[S*φ(d1)*σ/(2√T)] + r*K*exp(-rT)*N(-d2)
    """
    require_option_kind(option_kind)
    S, K, T = params.spot, params.strike, params.time_to_expiry
    r, sigma = params.risk_free_rate, params.volatility

    if T == 0:
        return 0.0

    discount = math.exp(-r * T)

    if sigma == 0:
        # Only the carry on the discounted strike remains
        forward = S * math.exp(r * T)
        if option_kind == "call":
            annual = -r * K * discount if forward > K else 0.0
        else:
            annual = r * K * discount if forward < K else 0.0
        return annual / DAYS_PER_YEAR

    d1, d2 = d1_d2(params)
    decay = -(S * norm_pdf(d1) * sigma) / (2 * math.sqrt(T))
    if option_kind == "call":
        annual = decay - r * K * discount * norm_cdf(d2)
    else:
        annual = decay + r * K * discount * norm_cdf(-d2)
    return annual / DAYS_PER_YEAR


def bs_rho(params: MarketParameters, option_kind: str) -> float:
    """
    Compute Rho per 1 percentage point of the risk-free rate.

    Notes
    -----
    Unscaled values:
    For call: K*T*exp(-rT)*N(d2)
    For put: -K*T*exp(-rT)*N(-d2)
    """
    require_option_kind(option_kind)
    S, K, T = params.spot, params.strike, params.time_to_expiry
    r = params.risk_free_rate

    if T == 0:
        return 0.0

    discount = math.exp(-r * T)

    if params.volatility == 0:
        forward = S * math.exp(r * T)
        if option_kind == "call":
            raw = K * T * discount if forward > K else 0.0
        else:
            raw = -K * T * discount if forward < K else 0.0
        return raw * VOL_POINT

    _, d2 = d1_d2(params)
    if option_kind == "call":
        raw = K * T * discount * norm_cdf(d2)
    else:
        raw = -K * T * discount * norm_cdf(-d2)
    return raw * VOL_POINT


def bs_greeks(params: MarketParameters, option_kind: str) -> Greeks:
    """Compute all five Greeks with the package scaling convention."""
    return Greeks(
        delta=bs_delta(params, option_kind),
        gamma=bs_gamma(params),
        vega=bs_vega(params),
        theta=bs_theta(params, option_kind),
        rho=bs_rho(params, option_kind),
    )


def bs_probability_itm(params: MarketParameters, option_kind: str) -> float:
    """
    Risk-neutral probability of finishing in the money: N(d2) or N(-d2).

    Degenerate cases (expiry, zero volatility) compare the deterministic
    terminal price against the strike.
    """
    require_option_kind(option_kind)
    if _is_degenerate(params):
        terminal = params.spot * math.exp(params.risk_free_rate * params.time_to_expiry)
        if option_kind == "call":
            return 1.0 if terminal > params.strike else 0.0
        return 1.0 if terminal < params.strike else 0.0

    _, d2 = d1_d2(params)
    if option_kind == "call":
        return norm_cdf(d2)
    return norm_cdf(-d2)
