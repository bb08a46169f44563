"""Exploration and backtest charts, written as PNG files."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from scipy import stats

from .metrics import drawdown_series


def _save(fig, out: Path) -> Path:
    out.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(out, dpi=160)
    plt.close(fig)
    return out


def plot_price_history(close: pd.Series, out: Path, title: str = "Price History") -> Path:
    fig, ax = plt.subplots(figsize=(12, 5))
    ax.plot(close.index, close.to_numpy(dtype=float), linewidth=1.2)
    ax.set_title(title)
    ax.set_ylabel("Close")
    ax.grid(alpha=0.2)
    return _save(fig, out)


def plot_returns_histogram(returns: pd.Series, out: Path, bins: int = 60) -> Path:
    r = returns.dropna().to_numpy(dtype=float)
    fig, ax = plt.subplots(figsize=(10, 5))
    ax.hist(r, bins=bins, density=True, alpha=0.6, label="Log returns")
    if len(r) > 1 and np.std(r) > 0:
        x = np.linspace(r.min(), r.max(), 200)
        ax.plot(x, stats.norm.pdf(x, r.mean(), r.std(ddof=1)), color="#d62828", label="Normal fit")
    ax.set_title("Distribution of Returns")
    ax.legend()
    ax.grid(alpha=0.2)
    return _save(fig, out)


def plot_qq(returns: pd.Series, out: Path) -> Path:
    fig, ax = plt.subplots(figsize=(6, 6))
    stats.probplot(returns.dropna().to_numpy(dtype=float), dist="norm", plot=ax)
    ax.set_title("Q-Q Plot vs Normal")
    ax.grid(alpha=0.2)
    return _save(fig, out)


def plot_volatility_bars(vol: pd.Series, out: Path, title: str = "Annualised Volatility by Year") -> Path:
    fig, ax = plt.subplots(figsize=(10, 5))
    ax.bar([str(i) for i in vol.index], vol.to_numpy(dtype=float), color="#2a9d8f")
    ax.set_title(title)
    ax.set_ylabel("Volatility")
    ax.grid(alpha=0.2, axis="y")
    return _save(fig, out)


def plot_candlestick(df: pd.DataFrame, out: Path, last_n: int = 90) -> Path:
    """OHLC candles for the last ``last_n`` bars. Rows with missing OHLC are skipped."""
    d = df[["Open", "High", "Low", "Close"]].dropna().tail(last_n)
    fig, ax = plt.subplots(figsize=(12, 5))
    x = np.arange(len(d))
    o, h, l, c = (d[col].to_numpy(dtype=float) for col in ["Open", "High", "Low", "Close"])
    colors = np.where(c >= o, "#2a9d8f", "#d62828")
    ax.vlines(x, l, h, colors=colors, linewidth=0.8)
    ax.bar(x, np.abs(c - o), bottom=np.minimum(o, c), color=colors, width=0.6)
    step = max(1, len(d) // 10)
    ax.set_xticks(x[::step])
    ax.set_xticklabels([ts.strftime("%Y-%m-%d") for ts in d.index[::step]], rotation=45, ha="right")
    ax.set_title("Candlestick")
    ax.grid(alpha=0.2)
    return _save(fig, out)


def plot_equity_drawdown(equity: pd.Series, out: Path, signals: pd.DataFrame | None = None) -> Path:
    dd = drawdown_series(equity)
    n_panels = 3 if signals is not None else 2
    fig, axes = plt.subplots(n_panels, 1, figsize=(12, 3 * n_panels + 1), sharex=True)

    if signals is not None:
        ax0 = axes[0]
        ax0.plot(signals.index, signals["Close"], label="Close", linewidth=1.0)
        ax0.plot(signals.index, signals["smaFast"], label="SMA fast", linewidth=1.0)
        ax0.plot(signals.index, signals["smaSlow"], label="SMA slow", linewidth=1.0)
        ax0.set_title("Price and Moving Averages")
        ax0.legend()
        ax0.grid(alpha=0.2)

    ax1, ax2 = axes[-2], axes[-1]
    ax1.plot(equity.index, equity.to_numpy(dtype=float), linewidth=2)
    ax1.set_title("Equity Curve")
    ax1.grid(alpha=0.2)

    ax2.fill_between(dd.index, -dd.to_numpy(dtype=float), 0, color="#d62828", alpha=0.35)
    ax2.set_title("Drawdown")
    ax2.set_xlabel("Date")
    ax2.grid(alpha=0.2)
    return _save(fig, out)
