"""Exploratory analysis of a futures price history.

Downloads (or loads) daily bars, then writes summary statistics, per-year
volatility, return autocorrelation and the exploration charts.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pandas as pd

from luxor_bt import plots
from luxor_bt.data_provider import CsvProvider, YfinanceProvider
from luxor_bt.returns import (
    annual_volatility,
    autocorrelation,
    log_returns,
    normality_test,
    rolling_volatility,
    summary_statistics,
)


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--symbol", type=str, default="CL=F")
    p.add_argument("--start", type=str, default="2010-01-01")
    p.add_argument("--end", type=str, default="2020-12-31")
    p.add_argument("--csv", type=str, default=None, help="OHLCV CSV path instead of yfinance.")
    p.add_argument("--output_dir", type=str, default="outputs_explore")
    p.add_argument("--lags", type=int, default=10, help="Autocorrelation lags.")
    p.add_argument("--vol_window", type=int, default=21, help="Rolling volatility window (bars).")
    p.add_argument("--log_level", type=str, default="INFO")
    args = p.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.csv:
        frame = CsvProvider().fetch(csv_path=args.csv, symbol=args.symbol)
    else:
        frame = YfinanceProvider().fetch(symbol=args.symbol, start=args.start, end=args.end)

    out_dir = Path(args.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    tag = args.symbol.replace(".", "_").replace("=", "_")

    close = frame.closes()
    rets = log_returns(close)

    stats = pd.DataFrame({"close": summary_statistics(close), "log_return": summary_statistics(rets)})
    yearly = annual_volatility(rets)
    acf = autocorrelation(rets, lags=args.lags)
    rolling = rolling_volatility(rets, window=args.vol_window)
    jb = normality_test(rets)

    print(stats.to_string())
    print(yearly.to_string())
    print(acf.to_string())
    print(f"Jarque-Bera: stat={jb['jb_stat']:.3f} p={jb['p_value']:.4g}")

    outputs = [
        out_dir / f"summary_{tag}.csv",
        out_dir / f"volatility_by_year_{tag}.csv",
        out_dir / f"rolling_volatility_{tag}.csv",
        out_dir / f"autocorrelation_{tag}.csv",
    ]
    stats.to_csv(outputs[0], encoding="utf-8")
    yearly.to_csv(outputs[1], encoding="utf-8")
    rolling.to_csv(outputs[2], encoding="utf-8")
    acf.to_csv(outputs[3], encoding="utf-8")

    outputs += [
        plots.plot_price_history(close, out_dir / f"price_{tag}.png", title=f"{args.symbol} Close"),
        plots.plot_returns_histogram(rets, out_dir / f"returns_hist_{tag}.png"),
        plots.plot_qq(rets, out_dir / f"qq_{tag}.png"),
        plots.plot_volatility_bars(yearly, out_dir / f"volatility_{tag}.png"),
        plots.plot_candlestick(frame.df, out_dir / f"candles_{tag}.png"),
    ]
    for path in outputs:
        print(path)


if __name__ == "__main__":
    main()
