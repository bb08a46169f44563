import numpy as np
import pandas as pd
import pytest

from luxor_bt.config import IndicatorConfig
from luxor_bt.data_manager import LuxorDataManager
from luxor_bt.indicators import sma
from luxor_bt.signals import crossover_signals, direction_at, signal_records
from luxor_bt.types import Direction

from conftest import make_frame


def test_slow_average_defined_only_from_index_29() -> None:
    close = pd.Series(np.arange(10, 40, dtype=float))
    fast = sma(close, 10)
    slow = sma(close, 30)
    sig = crossover_signals(fast, slow)

    assert slow.iloc[:29].isna().all()
    assert slow.iloc[29] == pytest.approx(24.5)
    assert all(d == Direction.NONE for d in sig.iloc[:29])
    assert sig.iloc[29] == Direction.LONG


def test_equal_averages_are_long() -> None:
    ma = pd.Series([5.0, 5.0, 5.0])
    sig = crossover_signals(ma, ma.copy())
    assert list(sig) == [Direction.LONG] * 3


def test_fast_below_slow_is_short() -> None:
    fast = pd.Series([np.nan, 1.0, 2.0, 3.0])
    slow = pd.Series([2.0, 2.0, 2.0, np.nan])
    sig = crossover_signals(fast, slow)
    assert list(sig) == [Direction.NONE, Direction.SHORT, Direction.LONG, Direction.NONE]


def test_level_triggered_repeats_every_bar() -> None:
    fast = pd.Series([3.0, 4.0, 5.0, 6.0])
    slow = pd.Series([1.0, 1.0, 1.0, 1.0])
    sig = crossover_signals(fast, slow)
    assert list(sig) == [Direction.LONG] * 4


def test_mismatched_index_raises() -> None:
    fast = pd.Series([1.0, 2.0], index=[0, 1])
    slow = pd.Series([1.0, 2.0], index=[1, 2])
    with pytest.raises(ValueError):
        crossover_signals(fast, slow)


def test_direction_at() -> None:
    assert direction_at(2.0, 2.0) is Direction.LONG
    assert direction_at(1.0, 2.0) is Direction.SHORT
    assert direction_at(float("nan"), 2.0) is Direction.NONE


def test_signal_series_matches_pointwise_rule(random_walk_frame) -> None:
    dm = LuxorDataManager(random_walk_frame, IndicatorConfig())
    df = dm.signal_frame()
    for fast, slow, sig in zip(df["smaFast"], df["smaSlow"], df["signal"]):
        assert sig == direction_at(fast, slow)


def test_signal_records() -> None:
    frame = make_frame([1.0, 2.0, 3.0])
    dm = LuxorDataManager(frame, IndicatorConfig(sma_fast=1, sma_slow=2))
    records = list(signal_records(dm.df["signal"]))
    assert [r.direction for r in records] == [Direction.NONE, Direction.LONG, Direction.LONG]
    assert records[0].date == frame.df.index[0].to_pydatetime()
