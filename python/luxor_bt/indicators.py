"""Indicator computation utilities.

Moving averages are computed on the CLOSE series and stay undefined (NaN)
until a full window is available.
"""

from __future__ import annotations

import pandas as pd

from .exceptions import InsufficientDataError


def sma(series: pd.Series, window: int, strict: bool = False) -> pd.Series:
    """Simple moving average of the trailing ``window`` observations.

    The first ``window - 1`` values are NaN. With fewer than ``window``
    observations the result is all NaN, unless ``strict`` is set, in which
    case :class:`InsufficientDataError` is raised.
    """
    if isinstance(window, bool) or not isinstance(window, int) or window <= 0:
        raise ValueError("window must be a positive integer")
    if strict and len(series) < window:
        raise InsufficientDataError(f"need at least {window} observations, got {len(series)}")
    return series.astype(float).rolling(window=window, min_periods=window).mean()
