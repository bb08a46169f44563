"""Performance reporter: trade, performance and risk tables from a run."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Sequence

import pandas as pd

from . import metrics
from .config import ReportConfig
from .types import EquityPoint, Trade


@dataclass(frozen=True)
class PerformanceReport:
    initial_equity: float
    final_equity: float
    cumulative_return: float
    cumulative_log_return: float  # sum of per-bar log returns
    annualized_return: float
    annualized_volatility: float
    sharpe_ratio: float
    max_drawdown: float
    var: float
    expected_shortfall: float
    var_confidence: float
    trade_stats: dict

    def trade_table(self) -> pd.DataFrame:
        return _table(self.trade_stats)

    def performance_table(self) -> pd.DataFrame:
        return _table(
            {
                "initial_equity": self.initial_equity,
                "final_equity": self.final_equity,
                "cumulative_return": self.cumulative_return,
                "cumulative_log_return": self.cumulative_log_return,
                "annualized_return": self.annualized_return,
                "annualized_volatility": self.annualized_volatility,
                "sharpe_ratio": self.sharpe_ratio,
            }
        )

    def risk_table(self) -> pd.DataFrame:
        pct = int(round(self.var_confidence * 100))
        return _table(
            {
                "max_drawdown": self.max_drawdown,
                f"var_{pct}": self.var,
                f"expected_shortfall_{pct}": self.expected_shortfall,
            }
        )

    def to_frame(self) -> pd.DataFrame:
        """All three tables stacked, with a 'Section' column."""
        parts = []
        for name, table in [("trades", self.trade_table()), ("performance", self.performance_table()), ("risk", self.risk_table())]:
            t = table.copy()
            t.insert(0, "Section", name)
            parts.append(t)
        return pd.concat(parts)

    def to_dict(self) -> dict:
        return asdict(self)


def _table(values: dict) -> pd.DataFrame:
    df = pd.DataFrame({"Value": pd.Series(values, dtype=float)})
    df.index.name = "Stat"
    return df


def equity_series(points: Sequence[EquityPoint]) -> pd.Series:
    return pd.Series(
        [p.equity for p in points],
        index=pd.DatetimeIndex([p.date for p in points], name="Date"),
        name="Equity",
        dtype=float,
    )


def build_report(
    equity_curve: Sequence[EquityPoint] | pd.Series,
    trades: Sequence[Trade],
    report_cfg: ReportConfig = ReportConfig(),
) -> PerformanceReport:
    eq = equity_curve if isinstance(equity_curve, pd.Series) else equity_series(equity_curve)
    days = int(report_cfg.trading_days_per_year)
    conf = float(report_cfg.var_confidence)
    rets = metrics.simple_returns(eq)

    return PerformanceReport(
        initial_equity=float(eq.iloc[0]) if len(eq) else float("nan"),
        final_equity=float(eq.iloc[-1]) if len(eq) else float("nan"),
        cumulative_return=metrics.cumulative_return(eq),
        cumulative_log_return=float(metrics.log_returns(eq).sum()) if len(eq) > 1 else float("nan"),
        annualized_return=metrics.annualized_return(eq, days),
        annualized_volatility=metrics.annualized_volatility(rets, days),
        sharpe_ratio=metrics.sharpe_ratio(rets, days),
        max_drawdown=metrics.max_drawdown(eq),
        var=metrics.historical_var(rets, conf),
        expected_shortfall=metrics.expected_shortfall(rets, conf),
        var_confidence=conf,
        trade_stats=metrics.trade_statistics(trades),
    )
