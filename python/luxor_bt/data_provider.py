"""Data providers (yfinance / CSV) and a standardized OHLCV schema."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd
import yfinance as yf

from .exceptions import DataFetchError
from .types import PricePoint

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["Open", "High", "Low", "Close", "Volume"]


@dataclass(frozen=True)
class OhlcvFrame:
    """Standard OHLCV dataframe wrapper."""

    df: pd.DataFrame  # columns: Open, High, Low, Close, Volume (+ Change); index: DatetimeIndex, ascending
    symbol: str

    def closes(self) -> pd.Series:
        return self.df["Close"]

    def points(self) -> list[PricePoint]:
        return [PricePoint(date=ts.to_pydatetime(), close=float(c)) for ts, c in self.df["Close"].items()]

    def __len__(self) -> int:
        return int(len(self.df))


def _standardize_ohlcv_columns(df: pd.DataFrame) -> pd.DataFrame:
    # yfinance can return MultiIndex columns depending on options/version.
    # We standardize to a simple 1-level column index.
    if isinstance(df.columns, pd.MultiIndex):
        df = df.copy()
        # Common yfinance layout: (field, ticker)
        tickers = list(dict.fromkeys(df.columns.get_level_values(-1)))
        if len(tickers) == 1:
            df.columns = df.columns.get_level_values(0)
        else:
            # multiple tickers → keep only the first ticker's fields
            df = df.xs(tickers[0], axis=1, level=-1, drop_level=True)

    rename_map = {}
    for col in df.columns:
        c = str(col).strip().lower()
        if c == "open":
            rename_map[col] = "Open"
        elif c == "high":
            rename_map[col] = "High"
        elif c == "low":
            rename_map[col] = "Low"
        elif c == "close":
            rename_map[col] = "Close"
        elif c in {"adj close", "adjclose"}:
            # Keep adjusted close separate to avoid duplicate "Close" columns.
            rename_map[col] = "AdjClose"
        elif c in {"settle", "last"}:
            # Futures exports (Quandl CHRIS style) carry Settle/Last instead of Close.
            rename_map[col] = c.capitalize()
        elif c == "volume":
            rename_map[col] = "Volume"
        elif c == "change":
            rename_map[col] = "Change"
    df = df.rename(columns=rename_map).copy()

    if "Close" not in df.columns:
        for alt in ["Settle", "Last", "AdjClose"]:
            if alt in df.columns:
                df = df.rename(columns={alt: "Close"})
                break

    if "Close" not in df.columns:
        raise ValueError("Missing required price column: Close (or Settle/Last/Adj Close)")

    # Only Close is mandatory; the other bar fields may be absent in some exports.
    for col in REQUIRED_COLUMNS:
        if col not in df.columns:
            df[col] = float("nan")

    keep = REQUIRED_COLUMNS + (["Change"] if "Change" in df.columns else [])
    df = df[keep].apply(pd.to_numeric, errors="coerce").astype(float)
    df = df[~df.index.duplicated(keep="last")].sort_index()
    return df


def clean_prices(df: pd.DataFrame) -> pd.DataFrame:
    """Drop rows with incomplete required fields.

    - rows with a missing Close are dropped
    - if a Change column exists, rows with a missing Change are dropped too
    - other NaN cells (Open/High/Low/Volume) are kept
    """
    subset = ["Close"] + (["Change"] if "Change" in df.columns else [])
    out = df.dropna(subset=subset)
    dropped = len(df) - len(out)
    if dropped:
        logger.info("Dropped %d rows with missing %s", dropped, "/".join(subset))
    return out


class YfinanceProvider:
    """Fetch data from yfinance.

    Notes:
    - futures use continuous tickers such as 'CL=F' or 'ES=F'
    - a failed or empty download is fatal; there is no retry
    """

    def fetch(
        self,
        symbol: str,
        start: str,
        end: str,
        interval: str = "1d",
        auto_adjust: bool = False,
    ) -> OhlcvFrame:
        logger.info("Downloading %s %s..%s (%s)", symbol, start, end, interval)
        try:
            df = yf.download(
                tickers=symbol,
                start=start,
                end=end,
                interval=interval,
                auto_adjust=auto_adjust,
                progress=False,
            )
        except Exception as exc:
            raise DataFetchError(f"yfinance download failed for symbol={symbol}: {exc}") from exc

        if df is None or len(df) == 0:
            raise DataFetchError(f"yfinance returned empty data for symbol={symbol}")

        df = clean_prices(_standardize_ohlcv_columns(df))
        logger.info("Loaded %d bars for %s", len(df), symbol)
        return OhlcvFrame(df=df, symbol=symbol)


class CsvProvider:
    """Load OHLCV data from a CSV file."""

    def fetch(self, csv_path: str | Path, symbol: str, datetime_col: str = "Date") -> OhlcvFrame:
        path = Path(csv_path)
        if not path.exists():
            raise FileNotFoundError(str(path))

        df = pd.read_csv(path)
        if datetime_col not in df.columns:
            # try common alternatives
            for cand in ["date", "Datetime", "datetime", "timestamp", "Time", "time"]:
                if cand in df.columns:
                    datetime_col = cand
                    break

        if datetime_col not in df.columns:
            raise ValueError(f"CSV must contain a datetime column. Tried '{datetime_col}' and common aliases.")

        df[datetime_col] = pd.to_datetime(df[datetime_col])
        df = df.set_index(datetime_col).sort_index()
        df.index.name = "Date"

        df = clean_prices(_standardize_ohlcv_columns(df))
        logger.info("Loaded %d bars for %s from %s", len(df), symbol, path)
        return OhlcvFrame(df=df, symbol=symbol)
