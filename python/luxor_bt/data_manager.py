"""Data manager: computes the Luxor indicators and signals for one symbol."""

from __future__ import annotations

import logging
from datetime import datetime

import pandas as pd

from .config import IndicatorConfig
from .data_provider import OhlcvFrame
from .indicators import sma
from .signals import crossover_signals
from .types import Direction

logger = logging.getLogger(__name__)


class LuxorDataManager:
    """Holds OHLCV, both moving averages and the signal series for a single symbol."""

    def __init__(self, frame: OhlcvFrame, ind_cfg: IndicatorConfig):
        self.symbol = frame.symbol
        self.df = frame.df.copy()
        self.ind_cfg = ind_cfg

        self._compute_indicators()

    def _compute_indicators(self) -> None:
        # ensure strictly increasing index before any rolling window
        self.df = self.df[~self.df.index.duplicated(keep="last")].sort_index()

        close = self.df["Close"]
        self.df["smaFast"] = sma(close, self.ind_cfg.sma_fast)
        self.df["smaSlow"] = sma(close, self.ind_cfg.sma_slow)
        self.df["signal"] = crossover_signals(self.df["smaFast"], self.df["smaSlow"])

        if len(self.df) <= self.ind_cfg.warmup_bars:
            logger.warning(
                "%s: only %d bars for windows %d/%d; no signal will be defined",
                self.symbol,
                len(self.df),
                self.ind_cfg.sma_fast,
                self.ind_cfg.sma_slow,
            )

    def __len__(self) -> int:
        return int(len(self.df))

    def get_bar_timestamp(self, i: int) -> datetime:
        return self.df.index[i].to_pydatetime()

    def get_close(self, i: int) -> float:
        return float(self.df["Close"].iloc[i])

    def get_signal(self, i: int) -> Direction:
        return self.df["signal"].iloc[i]

    def signal_frame(self) -> pd.DataFrame:
        """Close, both averages and the signal, one row per bar."""
        return self.df[["Close", "smaFast", "smaSlow", "signal"]].copy()
