"""Luxor signal rule: fast SMA vs slow SMA.

The rule is level-triggered: the direction is re-evaluated on every bar from
the current relative level of the two averages, not only on the bar where
they cross.
"""

from __future__ import annotations

from typing import Iterator

import numpy as np
import pandas as pd

from .types import Direction, Signal


def direction_at(fast: float, slow: float) -> Direction:
    """Direction for a single bar. NONE while either average is undefined."""
    if not (np.isfinite(fast) and np.isfinite(slow)):
        return Direction.NONE
    return Direction.LONG if fast >= slow else Direction.SHORT


def crossover_signals(fast_ma: pd.Series, slow_ma: pd.Series) -> pd.Series:
    """Series of :class:`Direction` aligned to the averages' index."""
    if not fast_ma.index.equals(slow_ma.index):
        raise ValueError("fast and slow averages must share the same index")
    fast = fast_ma.to_numpy(dtype=float)
    slow = slow_ma.to_numpy(dtype=float)
    defined = np.isfinite(fast) & np.isfinite(slow)
    out = np.full(len(fast), Direction.NONE, dtype=object)
    with np.errstate(invalid="ignore"):
        out[defined & (fast >= slow)] = Direction.LONG
        out[defined & (fast < slow)] = Direction.SHORT
    return pd.Series(out, index=fast_ma.index, name="signal", dtype=object)


def signal_records(signals: pd.Series) -> Iterator[Signal]:
    for ts, d in signals.items():
        yield Signal(date=ts.to_pydatetime(), direction=d)
