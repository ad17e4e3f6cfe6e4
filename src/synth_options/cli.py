#!/usr/bin/env python
"""
Command-line interface for the synth-options analytics library.

Example usage:
    synth-options price --spot 87420 --strike 87000 --days 7 --sigma 0.5
    synth-options price --spot 100 --strike 100 --T 1 --sigma 0.2 --market_price 10.45
    synth-options analyze btc_percentiles.json
    synth-options strategy btc_percentiles.json iron_condor.json --low 70000 --high 105000
    synth-options chain btc_percentiles.json --strikes 84000 87000 90000 --days 1 --sigma 0.52
"""

import argparse
import math
from dataclasses import asdict
from pathlib import Path

from synth_options.analytics.black_scholes import DAYS_PER_YEAR, bs_greeks, bs_price
from synth_options.analytics.implied_vol import solve_implied_vol
from synth_options.analytics.positions import years_to_expiry
from synth_options.analytics.types import MarketParameters
from synth_options.comparison import option_chain
from synth_options.config import AnalyticsConfig, load_config
from synth_options.distribution.metrics import strategy_metrics
from synth_options.distribution.shape import analyze_shape, classify_shape
from synth_options.errors import AnalyticsError
from synth_options.io import load_percentiles, load_strategy, save_results
from synth_options.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def _add_expiry_args(parser: argparse.ArgumentParser, required: bool) -> None:
    group = parser.add_mutually_exclusive_group(required=required)
    group.add_argument("--T", type=float, help="Time to expiry (years)")
    group.add_argument("--days", type=float, help="Time to expiry (calendar days)")
    group.add_argument("--expiry", type=str, help="Expiry date (YYYY-MM-DD, midnight UTC)")


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    args : list[str] | None
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Distribution-based option analytics vs Black-Scholes",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--config", type=Path, default=None, help="JSON config file")
    parser.add_argument("--log_level", type=str, default="WARNING", help="Logging level")
    parser.add_argument("--output", type=Path, default=None, help="Write results as JSON here")

    sub = parser.add_subparsers(dest="command", required=True)

    price = sub.add_parser("price", help="Black-Scholes price, Greeks and implied vol")
    price.add_argument("--spot", type=float, required=True, help="Spot price")
    price.add_argument("--strike", type=float, required=True, help="Strike price")
    _add_expiry_args(price, required=True)
    price.add_argument("--sigma", type=float, default=0.5, help="Volatility (annualized)")
    price.add_argument("--r", type=float, default=None, help="Risk-free rate (config default)")
    price.add_argument("--option_type", choices=["call", "put"], default="call")
    price.add_argument(
        "--market_price", type=float, default=None,
        help="Solve the implied volatility of this price",
    )

    analyze = sub.add_parser("analyze", help="Shape and tail statistics of a forecast")
    analyze.add_argument("percentiles", type=Path, help="Percentile payload JSON")

    strategy = sub.add_parser("strategy", help="Expected value and breakevens of a strategy")
    strategy.add_argument("percentiles", type=Path, help="Percentile payload JSON")
    strategy.add_argument("strategy", type=Path, help="Strategy JSON")
    strategy.add_argument("--low", type=float, default=None, help="Scan range low")
    strategy.add_argument("--high", type=float, default=None, help="Scan range high")
    strategy.add_argument("--sigma", type=float, default=None, help="Volatility for the BS probability")
    _add_expiry_args(strategy, required=False)

    chain = sub.add_parser("chain", help="Synth vs Black-Scholes option chain")
    chain.add_argument("percentiles", type=Path, help="Percentile payload JSON")
    chain.add_argument("--strikes", type=float, nargs="+", required=True)
    chain.add_argument("--sigma", type=float, required=True, help="Volatility (annualized)")
    chain.add_argument("--r", type=float, default=None, help="Risk-free rate (config default)")
    _add_expiry_args(chain, required=True)

    return parser.parse_args(args)


def _expiry_years(parsed: argparse.Namespace) -> float | None:
    if parsed.T is not None:
        return parsed.T
    if parsed.days is not None:
        return parsed.days / DAYS_PER_YEAR
    if parsed.expiry is not None:
        return years_to_expiry(parsed.expiry)
    return None


def _run_price(parsed: argparse.Namespace, config: AnalyticsConfig) -> dict:
    r = config.risk_free_rate if parsed.r is None else parsed.r
    params = MarketParameters(parsed.spot, parsed.strike, _expiry_years(parsed), r, parsed.sigma)
    value = bs_price(params, parsed.option_type)
    greeks = bs_greeks(params, parsed.option_type)

    print("=" * 70)
    print("Black-Scholes Pricing")
    print("=" * 70)
    print(f"  Spot Price (S):         {params.spot:,.2f}")
    print(f"  Strike Price (K):       {params.strike:,.2f}")
    print(f"  Time to Expiry (T):     {params.time_to_expiry:.6f} years")
    print(f"  Risk-free Rate (r):     {params.risk_free_rate:.4f}")
    print(f"  Volatility (σ):         {params.volatility:.4f}")
    print(f"  Option Type:            {parsed.option_type.upper()}")
    print(f"\n  Price:                  {value:,.6f}")
    print(f"  Delta:                  {greeks.delta:.6f}")
    print(f"  Gamma:                  {greeks.gamma:.8f}")
    print(f"  Vega (per 1 vol pt):    {greeks.vega:.6f}")
    print(f"  Theta (per day):        {greeks.theta:.6f}")
    print(f"  Rho (per 1 rate pt):    {greeks.rho:.6f}")

    result = {"price": value, "greeks": asdict(greeks)}

    if parsed.market_price is not None:
        iv = solve_implied_vol(parsed.market_price, params, parsed.option_type, **config.iv_options())
        status = "converged" if iv.converged else "NOT converged"
        print(f"\n  Implied Vol:            {iv.sigma:.6f} ({status}, {iv.iterations} iterations)")
        result["implied_vol"] = asdict(iv)

    return result


def _run_analyze(parsed: argparse.Namespace, config: AnalyticsConfig) -> dict:
    distribution, current_price = load_percentiles(parsed.percentiles, config.required_ranks)
    analysis = analyze_shape(distribution, current_price)
    profile = classify_shape(analysis)

    print("=" * 70)
    print(f"Distribution Shape ({len(distribution)} percentiles, current {current_price:,.2f})")
    print("=" * 70)
    print(f"  Skewness:               {analysis.skewness:.4f} ({profile.skew})")
    print(f"  Tail Ratio (p95/p5):    {analysis.tail_ratio:.4f}"
          f"{' (fat tails)' if profile.fat_tails else ''}")
    print(f"  Max Drawdown:           {analysis.max_drawdown * 100:.2f}%")
    print(f"  Max Upside:             {analysis.max_upside * 100:.2f}%")
    print(f"  IQR % of Median:        {analysis.iqr_pct * 100:.2f}%")
    print(f"  VaR 95:                 {analysis.var95 * 100:.2f}%")
    print(f"  CVaR 95:                {analysis.cvar95 * 100:.2f}%")

    return {"analysis": analysis.to_dict(), "skew": profile.skew, "fat_tails": profile.fat_tails}


def _run_strategy(parsed: argparse.Namespace, config: AnalyticsConfig) -> dict:
    distribution, current_price = load_percentiles(parsed.percentiles, config.required_ranks)
    strategy = load_strategy(parsed.strategy)

    low = parsed.low if parsed.low is not None else 0.5 * float(distribution.values[0])
    high = parsed.high if parsed.high is not None else 1.5 * float(distribution.values[-1])
    T = _expiry_years(parsed)

    metrics = strategy_metrics(
        strategy,
        distribution,
        (low, high),
        resolution=config.breakeven_resolution,
        spot=current_price if parsed.sigma is not None and T is not None else None,
        volatility=parsed.sigma,
        time_to_expiry=T,
        risk_free_rate=config.risk_free_rate,
    )

    print("=" * 70)
    print(f"Strategy: {strategy.name or 'custom'} ({len(strategy)} legs)")
    print("=" * 70)
    print(f"  Scan Range:             [{low:,.2f}, {high:,.2f}]")
    print(f"  Expected Value:         {metrics.expected_value:,.4f}")
    print(f"  Probability of Profit:  {metrics.probability_of_profit * 100:.2f}%")
    if metrics.bs_pop is not None:
        print(f"  BS Prob. of Profit:     {metrics.bs_pop * 100:.2f}%")
    print(f"  E[Profit | Profit]:     {metrics.expected_profit:,.4f}")
    print(f"  E[Loss | Loss]:         {metrics.expected_loss:,.4f}")
    print(f"  Max Profit:             {metrics.max_profit:,.4f}")
    print(f"  Max Loss:               {metrics.max_loss:,.4f}")
    rr = "unbounded" if math.isinf(metrics.risk_reward) else f"{metrics.risk_reward:.4f}"
    print(f"  Reward / Risk:          {rr}")
    breakevens = ", ".join(f"{b:,.2f}" for b in metrics.breakevens) or "none"
    print(f"  Breakevens:             {breakevens}")

    return {"strategy": strategy.to_dict(), "metrics": metrics.to_dict()}


def _run_chain(parsed: argparse.Namespace, config: AnalyticsConfig) -> dict:
    distribution, current_price = load_percentiles(parsed.percentiles, config.required_ranks)
    r = config.risk_free_rate if parsed.r is None else parsed.r
    params = MarketParameters(
        current_price, parsed.strikes[0], _expiry_years(parsed), r, parsed.sigma
    )
    rows = option_chain(
        distribution, params, parsed.strikes,
        edge_threshold=config.edge_threshold, iv_options=config.iv_options(),
    )

    print("=" * 70)
    print(f"Synth vs Black-Scholes (spot {current_price:,.2f})")
    print("=" * 70)
    print(f"{'Strike':>10} {'Call Synth':>11} {'Call BS':>10} {'P(ITM)':>7} {'Rec':>5} "
          f"{'Put Synth':>10} {'Put BS':>10} {'P(ITM)':>7} {'Rec':>5}")
    print("-" * 70)
    for row in rows:
        print(f"{row.strike:>10,.0f} {row.call.synth_price:>11,.2f} {row.call.bs_price:>10,.2f} "
              f"{row.call.synth_prob_itm:>7.2f} {row.call.recommendation:>5} "
              f"{row.put.synth_price:>10,.2f} {row.put.bs_price:>10,.2f} "
              f"{row.put.synth_prob_itm:>7.2f} {row.put.recommendation:>5}")

    return {"current_price": current_price, "rows": [row.to_dict() for row in rows]}


COMMANDS = {
    "price": _run_price,
    "analyze": _run_analyze,
    "strategy": _run_strategy,
    "chain": _run_chain,
}


def main(args: list[str] | None = None) -> int:
    """Main entry point for CLI.

    Parameters
    ----------
    args : list[str] | None
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    int
        Exit code (0 for success, non-zero for errors).
    """
    parsed = parse_args(args)
    try:
        setup_logging(parsed.log_level)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    try:
        config = load_config(parsed.config)
        result = COMMANDS[parsed.command](parsed, config)
    except (AnalyticsError, OSError) as e:
        logger.debug("Command %s failed", parsed.command, exc_info=True)
        print(f"Error: {e}")
        return 1

    if parsed.output is not None:
        out_path = save_results({"command": parsed.command, **result}, parsed.output)
        print(f"\nResults written to {out_path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
