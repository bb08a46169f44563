"""Performance metrics.

Ratios whose denominator is zero (flat equity, no losing trades) are reported
as NaN rather than raising.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from .types import Trade

TRADING_DAYS_PER_YEAR = 252


def simple_returns(equity: pd.Series) -> pd.Series:
    return equity.astype(float).pct_change().dropna()


def log_returns(equity: pd.Series) -> pd.Series:
    x = equity.astype(float)
    with np.errstate(invalid="ignore", divide="ignore"):
        return np.log(x / x.shift(1)).dropna()


def cumulative_return(equity: pd.Series) -> float:
    if len(equity) == 0:
        return float("nan")
    return float(equity.iloc[-1] / equity.iloc[0] - 1.0)


def annualized_return(equity: pd.Series, trading_days_per_year: int = TRADING_DAYS_PER_YEAR) -> float:
    """Geometric annualisation over the number of bar-to-bar returns."""
    n = len(equity) - 1
    if n <= 0:
        return float("nan")
    growth = 1.0 + cumulative_return(equity)
    if growth <= 0:
        return float("nan")
    return float(growth ** (trading_days_per_year / n) - 1.0)


def _std(returns: pd.Series) -> float:
    if len(returns) < 2:
        return float("nan")
    sd = float(returns.std(ddof=1))
    if not np.isfinite(sd) or np.isclose(sd, 0.0, rtol=0.0, atol=1e-12):
        return float("nan")
    return sd


def annualized_volatility(returns: pd.Series, trading_days_per_year: int = TRADING_DAYS_PER_YEAR) -> float:
    if len(returns) < 2:
        return float("nan")
    return float(returns.std(ddof=1) * np.sqrt(trading_days_per_year))


def sharpe_ratio(returns: pd.Series, trading_days_per_year: int = TRADING_DAYS_PER_YEAR) -> float:
    """Annualised Sharpe with a zero risk-free rate. NaN on zero variance."""
    sd = _std(returns)
    if not np.isfinite(sd):
        return float("nan")
    return float(returns.mean() / sd * np.sqrt(trading_days_per_year))


def drawdown_series(equity: pd.Series) -> pd.Series:
    """(running peak - current) / running peak, aligned to ``equity``."""
    x = equity.astype(float)
    peak = x.cummax()
    return (peak - x) / peak.where(peak > 0, np.finfo(float).tiny)


def max_drawdown(equity: pd.Series) -> float:
    """Maximum drawdown (as positive fraction)."""
    x = equity.astype(float).to_numpy()
    if len(x) == 0:
        return float("nan")
    peak = np.maximum.accumulate(x)
    dd = 1.0 - (x / np.maximum(peak, np.finfo(float).tiny))
    return float(max(0.0, np.nanmax(dd)))


def historical_var(returns: pd.Series, confidence: float = 0.95) -> float:
    """Empirical (1 - confidence) quantile of the returns.

    Reported as a return, so a loss shows up as a negative number.
    """
    r = returns.dropna()
    if len(r) == 0:
        return float("nan")
    return float(r.quantile(1.0 - confidence))


def expected_shortfall(returns: pd.Series, confidence: float = 0.95) -> float:
    """Mean of the returns at or below the historical VaR."""
    var = historical_var(returns, confidence)
    if not np.isfinite(var):
        return float("nan")
    r = returns.dropna()
    return float(r[r <= var].mean())


def trade_statistics(trades: Sequence[Trade]) -> dict[str, float]:
    """Per-trade summary in the spirit of a blotter's tradeStats table."""
    pnl = np.array([t.realized_pnl for t in trades], dtype=float)
    wins = pnl[pnl > 0]
    losses = pnl[pnl < 0]

    gross_profit = float(wins.sum())
    gross_loss = float(losses.sum())
    n = int(len(pnl))

    def _mean(x: np.ndarray) -> float:
        return float(x.mean()) if len(x) else float("nan")

    return {
        "num_trades": n,
        "num_winners": int(len(wins)),
        "num_losers": int(len(losses)),
        "win_rate": float(len(wins) / n) if n else float("nan"),
        "gross_profit": gross_profit,
        "gross_loss": gross_loss,
        "net_pnl": float(pnl.sum()),
        "avg_trade_pnl": _mean(pnl),
        "avg_win": _mean(wins),
        "avg_loss": _mean(losses),
        "largest_win": float(wins.max()) if len(wins) else float("nan"),
        "largest_loss": float(losses.min()) if len(losses) else float("nan"),
        "profit_factor": float(gross_profit / abs(gross_loss)) if len(losses) else float("nan"),
        "total_fees": float(sum(t.fees for t in trades)),
    }
