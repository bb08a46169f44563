"""Return and volatility statistics for exploratory analysis of a price series."""

from __future__ import annotations

import numpy as np
import pandas as pd
from scipy import stats

from .metrics import TRADING_DAYS_PER_YEAR, log_returns, simple_returns  # noqa: F401


def summary_statistics(series: pd.Series) -> pd.Series:
    """describe() plus skewness and excess kurtosis."""
    s = series.dropna().astype(float)
    out = s.describe()
    out["skew"] = float(s.skew()) if len(s) > 2 else float("nan")
    out["kurtosis"] = float(s.kurt()) if len(s) > 3 else float("nan")
    return out


def rolling_volatility(
    returns: pd.Series,
    window: int = 21,
    trading_days_per_year: int = TRADING_DAYS_PER_YEAR,
    annualize: bool = True,
) -> pd.Series:
    if window < 2:
        raise ValueError("window must be at least 2")
    vol = returns.rolling(window=window, min_periods=window).std()
    if annualize:
        vol = vol * np.sqrt(trading_days_per_year)
    return vol.rename("volatility")


def annual_volatility(returns: pd.Series, trading_days_per_year: int = TRADING_DAYS_PER_YEAR) -> pd.Series:
    """Annualised volatility per calendar year (years with < 2 returns are NaN)."""
    by_year = returns.groupby(returns.index.year).std()
    out = by_year * np.sqrt(trading_days_per_year)
    out.index.name = "Year"
    return out.rename("volatility")


def autocorrelation(returns: pd.Series, lags: int = 10) -> pd.Series:
    """Lag-k autocorrelation for k = 1..lags."""
    if lags < 1:
        raise ValueError("lags must be positive")
    values = {k: float(returns.autocorr(lag=k)) for k in range(1, lags + 1)}
    out = pd.Series(values, name="autocorr", dtype=float)
    out.index.name = "Lag"
    return out


def normality_test(returns: pd.Series) -> dict[str, float]:
    """Jarque-Bera test on the returns."""
    r = returns.dropna().to_numpy(dtype=float)
    if len(r) < 3:
        return {"jb_stat": float("nan"), "p_value": float("nan")}
    res = stats.jarque_bera(r)
    return {"jb_stat": float(res.statistic), "p_value": float(res.pvalue)}
