"""Backtest runner utilities."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

import pandas as pd

from .config import BacktestConfig, CostConfig, IndicatorConfig, ReportConfig, StrategyConfig
from .data_manager import LuxorDataManager
from .data_provider import CsvProvider, OhlcvFrame, YfinanceProvider
from .report import PerformanceReport, build_report
from .trader import LuxorTrader
from .types import Trade, TradeEvent

logger = logging.getLogger(__name__)

TRADE_COLUMNS = ["entry_date", "exit_date", "quantity", "entry_price", "exit_price", "fees", "realized_pnl"]
EVENT_COLUMNS = list(TradeEvent.__dataclass_fields__)


@dataclass(frozen=True)
class BacktestResult:
    signals: pd.DataFrame  # Close, smaFast, smaSlow, signal
    equity: pd.DataFrame  # index Date; Cash, Equity
    trades: pd.DataFrame
    transactions: pd.DataFrame
    report: PerformanceReport


def _trades_frame(trades: list[Trade]) -> pd.DataFrame:
    return pd.DataFrame([asdict(x) for x in trades], columns=TRADE_COLUMNS)


def _events_frame(events: list[TradeEvent]) -> pd.DataFrame:
    return pd.DataFrame([asdict(x) for x in events], columns=EVENT_COLUMNS)


def run_backtest(
    frame: OhlcvFrame,
    ind_cfg: IndicatorConfig = IndicatorConfig(),
    strat_cfg: StrategyConfig = StrategyConfig(),
    cost_cfg: CostConfig = CostConfig(),
    bt_cfg: Optional[BacktestConfig] = None,
    report_cfg: ReportConfig = ReportConfig(),
    start_dt: Optional[pd.Timestamp] = None,
    end_dt: Optional[pd.Timestamp] = None,
) -> BacktestResult:
    """Run the Luxor rule over ``frame`` and collect every output in memory.

    When ``start_dt`` is given, bars before it only feed the moving averages:
    the trader stays flat through the first bar at or after ``start_dt``,
    which is the opening valuation of the window, and trades from the next
    bar on. Bars after ``end_dt`` are never simulated.
    """
    if bt_cfg is None:
        bt_cfg = BacktestConfig(symbol=frame.symbol)

    if end_dt is not None:
        frame = OhlcvFrame(df=frame.df.loc[frame.df.index <= end_dt], symbol=frame.symbol)

    warmup_until = None
    if start_dt is not None:
        in_window = frame.df.index[frame.df.index >= start_dt]
        if len(in_window):
            warmup_until = in_window[0].to_pydatetime()

    dm = LuxorDataManager(frame, ind_cfg)
    trader = LuxorTrader(dm=dm, strat_cfg=strat_cfg, cost_cfg=cost_cfg, bt_cfg=bt_cfg, warmup_until=warmup_until)
    trader.run_full_backtest()

    signals = dm.signal_frame()
    eq = pd.DataFrame(
        [(p.date, p.cash, p.equity) for p in trader.equity_curve],
        columns=["Date", "Cash", "Equity"],
    ).set_index("Date")
    trades = _trades_frame(trader.trades)
    events = _events_frame(trader.trade_log)

    # Trim to requested window (exclude indicator warmup segment). The trader
    # was flat through the warm-up, so trades and transactions need no trim.
    if start_dt is not None:
        signals = signals.loc[signals.index >= start_dt]
        eq = eq.loc[eq.index >= start_dt]

    report = build_report(eq["Equity"], trader.trades, report_cfg)
    logger.info(
        "%s: cumulative return %.4f, sharpe %.3f, max drawdown %.4f",
        frame.symbol,
        report.cumulative_return,
        report.sharpe_ratio,
        report.max_drawdown,
    )
    return BacktestResult(signals=signals, equity=eq, trades=trades, transactions=events, report=report)


def write_outputs(result: BacktestResult, symbol: str, output_dir: str | Path) -> dict[str, Path]:
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    tag = symbol.replace(".", "_").replace("=", "_")

    paths = {
        "equity": out_dir / f"equity_{tag}.csv",
        "trades": out_dir / f"trades_{tag}.csv",
        "transactions": out_dir / f"transactions_{tag}.csv",
        "stats": out_dir / f"stats_{tag}.csv",
    }
    result.equity.to_csv(paths["equity"], encoding="utf-8")
    result.trades.to_csv(paths["trades"], index=False, encoding="utf-8")
    result.transactions.to_csv(paths["transactions"], index=False, encoding="utf-8")
    result.report.to_frame().to_csv(paths["stats"], encoding="utf-8")
    return paths


def warmup_start_date(start_dt: pd.Timestamp, ind_cfg: IndicatorConfig) -> pd.Timestamp:
    """First date to download so both averages are defined at ``start_dt``.

    Daily bars only: warmup_bars trading bars are approximated by twice as
    many calendar days (weekends/holidays).
    """
    return start_dt - pd.Timedelta(days=int(ind_cfg.warmup_bars * 2))


def backtest_from_yfinance(
    symbol: str,
    start: str,
    end: str,
    interval: str = "1d",
    ind_cfg: IndicatorConfig = IndicatorConfig(),
    strat_cfg: StrategyConfig = StrategyConfig(),
    cost_cfg: CostConfig = CostConfig(),
    initial_equity: float = BacktestConfig.initial_equity,
    report_cfg: ReportConfig = ReportConfig(),
    auto_adjust: bool = False,
    include_warmup: bool = True,
) -> BacktestResult:
    """Download ``symbol`` with warm-up history and run the window start..end."""
    start_dt = pd.to_datetime(start)
    end_dt = pd.to_datetime(end)
    fetch_start = warmup_start_date(start_dt, ind_cfg) if include_warmup else start_dt

    frame = YfinanceProvider().fetch(
        symbol=symbol,
        start=str(fetch_start.date()),
        end=str(end_dt.date()),
        interval=interval,
        auto_adjust=auto_adjust,
    )
    bt_cfg = BacktestConfig(symbol=symbol, initial_equity=initial_equity)
    return run_backtest(frame, ind_cfg, strat_cfg, cost_cfg, bt_cfg, report_cfg, start_dt=start_dt, end_dt=end_dt)


def backtest_from_csv(
    csv_path: str | Path,
    symbol: str,
    ind_cfg: IndicatorConfig = IndicatorConfig(),
    strat_cfg: StrategyConfig = StrategyConfig(),
    cost_cfg: CostConfig = CostConfig(),
    initial_equity: float = BacktestConfig.initial_equity,
    report_cfg: ReportConfig = ReportConfig(),
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> BacktestResult:
    """Run over a CSV history; rows before ``start`` serve as warm-up."""
    frame = CsvProvider().fetch(csv_path=csv_path, symbol=symbol)
    bt_cfg = BacktestConfig(symbol=symbol, initial_equity=initial_equity)
    return run_backtest(
        frame,
        ind_cfg,
        strat_cfg,
        cost_cfg,
        bt_cfg,
        report_cfg,
        start_dt=pd.to_datetime(start) if start else None,
        end_dt=pd.to_datetime(end) if end else None,
    )


def run_luxor_from_yfinance(symbol: str, start: str, end: str, output_dir: str | Path = "outputs", **kwargs) -> dict[str, Path]:
    """Convenience runner using yfinance; writes CSV outputs and returns their paths."""
    result = backtest_from_yfinance(symbol, start, end, **kwargs)
    return write_outputs(result, symbol, output_dir)


def run_luxor_from_csv(csv_path: str | Path, symbol: str, output_dir: str | Path = "outputs", **kwargs) -> dict[str, Path]:
    result = backtest_from_csv(csv_path, symbol, **kwargs)
    return write_outputs(result, symbol, output_dir)
