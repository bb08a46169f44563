"""Run the Luxor SMA rule on one futures contract and write trade/performance/risk tables."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from luxor_bt.backtest import backtest_from_csv, backtest_from_yfinance, write_outputs
from luxor_bt.config import CostConfig, IndicatorConfig, ReportConfig, StrategyConfig


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--symbol", type=str, default="CL=F")
    p.add_argument("--start", type=str, default="2015-01-01")
    p.add_argument("--end", type=str, default="2020-12-31")
    p.add_argument("--output_dir", type=str, default="outputs")
    p.add_argument("--csv", type=str, default=None, help="OHLCV CSV path (Date,Open,High,Low,Close|Settle,Volume[,Change]).")
    p.add_argument("--csv_start", type=str, default=None, help="With --csv: first bar of the trading window (earlier rows are warm-up).")
    p.add_argument("--csv_end", type=str, default=None, help="With --csv: last bar of the trading window.")
    p.add_argument("--fast", type=int, default=10, help="Fast SMA window.")
    p.add_argument("--slow", type=int, default=30, help="Slow SMA window.")
    p.add_argument("--qty", type=int, default=100, help="Fixed order quantity.")
    p.add_argument("--fee", type=float, default=10.0, help="Flat fee per transaction.")
    p.add_argument("--initial_equity", type=float, default=100_000.0)
    p.add_argument("--var_confidence", type=float, default=0.95)
    p.add_argument("--close_at_end", action="store_true", help="Flatten the open position on the last bar.")
    p.add_argument("--plot", action="store_true", help="Save an equity/drawdown PNG next to outputs.")
    p.add_argument("--log_level", type=str, default="INFO")
    args = p.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    ind_cfg = IndicatorConfig(sma_fast=args.fast, sma_slow=args.slow)
    strat_cfg = StrategyConfig(order_qty=args.qty, close_at_end=args.close_at_end)
    cost_cfg = CostConfig(txn_fee=args.fee)
    report_cfg = ReportConfig(var_confidence=args.var_confidence)
    common = dict(
        ind_cfg=ind_cfg,
        strat_cfg=strat_cfg,
        cost_cfg=cost_cfg,
        initial_equity=args.initial_equity,
        report_cfg=report_cfg,
    )

    if args.csv:
        result = backtest_from_csv(args.csv, args.symbol, start=args.csv_start, end=args.csv_end, **common)
    else:
        result = backtest_from_yfinance(args.symbol, args.start, args.end, **common)
    paths = write_outputs(result, args.symbol, args.output_dir)

    print(result.report.trade_table().to_string())
    print(result.report.performance_table().to_string())
    print(result.report.risk_table().to_string())

    if args.plot:
        from luxor_bt.plots import plot_equity_drawdown

        tag = args.symbol.replace(".", "_").replace("=", "_")
        paths["plot"] = plot_equity_drawdown(
            result.equity["Equity"], Path(args.output_dir) / f"equity_{tag}.png", signals=result.signals
        )

    for path in paths.values():
        print(path)


if __name__ == "__main__":
    main()
