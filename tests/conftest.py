import numpy as np
import pandas as pd
import pytest

from luxor_bt.data_provider import OhlcvFrame


def make_frame(closes, symbol="TEST", start="2020-01-01"):
    closes = np.asarray(closes, dtype=float)
    idx = pd.bdate_range(start, periods=len(closes), name="Date")
    df = pd.DataFrame(
        {
            "Open": closes,
            "High": closes * 1.01,
            "Low": closes * 0.99,
            "Close": closes,
            "Volume": np.full(len(closes), 1000.0),
        },
        index=idx,
    )
    return OhlcvFrame(df=df, symbol=symbol)


@pytest.fixture
def random_walk_frame():
    rng = np.random.default_rng(7)
    closes = 50.0 + np.cumsum(rng.normal(0.0, 1.0, 400))
    return make_frame(closes, symbol="CL=F", start="2018-01-01")
