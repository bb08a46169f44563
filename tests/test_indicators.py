import numpy as np
import pandas as pd
import pytest

from luxor_bt.exceptions import InsufficientDataError
from luxor_bt.indicators import sma


def test_sma_is_trailing_mean() -> None:
    rng = np.random.default_rng(1)
    close = pd.Series(rng.uniform(50, 150, 60))
    n = 10
    out = sma(close, n)

    assert out.iloc[: n - 1].isna().all()
    for i in range(n - 1, len(close)):
        assert out.iloc[i] == pytest.approx(close.iloc[i - n + 1 : i + 1].mean())


def test_sma_keeps_index() -> None:
    idx = pd.bdate_range("2021-01-01", periods=5)
    close = pd.Series([1.0, 2.0, 3.0, 4.0, 5.0], index=idx)
    out = sma(close, 2)
    assert out.index.equals(idx)
    assert out.iloc[-1] == pytest.approx(4.5)


def test_sma_short_history_stays_undefined() -> None:
    out = sma(pd.Series([1.0, 2.0, 3.0]), 5)
    assert len(out) == 3
    assert out.isna().all()


def test_sma_strict_raises_on_short_history() -> None:
    with pytest.raises(InsufficientDataError):
        sma(pd.Series([1.0, 2.0, 3.0]), 5, strict=True)


def test_sma_strict_ok_with_enough_data() -> None:
    out = sma(pd.Series([1.0, 2.0, 3.0]), 3, strict=True)
    assert out.iloc[-1] == pytest.approx(2.0)


@pytest.mark.parametrize("window", [0, -3, 2.5, True])
def test_sma_rejects_bad_window(window) -> None:
    with pytest.raises(ValueError):
        sma(pd.Series([1.0, 2.0]), window)
