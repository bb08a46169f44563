from unittest.mock import patch

import numpy as np
import pandas as pd
import pytest

from luxor_bt.data_provider import CsvProvider, YfinanceProvider, _standardize_ohlcv_columns, clean_prices
from luxor_bt.exceptions import DataFetchError


def _yf_frame(n=5, multi=False):
    idx = pd.bdate_range("2020-01-01", periods=n, name="Date")
    data = {
        "Open": np.linspace(10, 14, n),
        "High": np.linspace(11, 15, n),
        "Low": np.linspace(9, 13, n),
        "Close": np.linspace(10.5, 14.5, n),
        "Adj Close": np.linspace(10.5, 14.5, n),
        "Volume": np.full(n, 100.0),
    }
    df = pd.DataFrame(data, index=idx)
    if multi:
        df.columns = pd.MultiIndex.from_tuples([(c, "CL=F") for c in df.columns])
    return df


class TestStandardize:
    def test_multiindex_single_ticker(self) -> None:
        df = _standardize_ohlcv_columns(_yf_frame(multi=True))
        assert list(df.columns) == ["Open", "High", "Low", "Close", "Volume"]

    def test_settle_used_as_close_and_change_kept(self) -> None:
        idx = pd.bdate_range("2020-01-01", periods=3)
        raw = pd.DataFrame(
            {"open": [1.0, 2.0, 3.0], "Settle": [1.5, 2.5, 3.5], "Change": [np.nan, 1.0, 1.0], "Volume": [1, 2, 3]},
            index=idx,
        )
        df = _standardize_ohlcv_columns(raw)
        assert list(df.columns) == ["Open", "High", "Low", "Close", "Volume", "Change"]
        assert list(df["Close"]) == [1.5, 2.5, 3.5]
        assert df["High"].isna().all()

    def test_missing_close_raises(self) -> None:
        raw = pd.DataFrame({"Open": [1.0]}, index=pd.bdate_range("2020-01-01", periods=1))
        with pytest.raises(ValueError):
            _standardize_ohlcv_columns(raw)

    def test_duplicates_dropped_and_sorted(self) -> None:
        idx = pd.to_datetime(["2020-01-03", "2020-01-02", "2020-01-03"])
        raw = pd.DataFrame({"Close": [3.0, 2.0, 4.0]}, index=idx)
        df = _standardize_ohlcv_columns(raw)
        assert df.index.is_monotonic_increasing
        assert list(df["Close"]) == [2.0, 4.0]


class TestCleanPrices:
    def test_drops_missing_close(self) -> None:
        df = pd.DataFrame({"Open": [np.nan, 2.0], "Close": [np.nan, 2.0]})
        assert len(clean_prices(df)) == 1

    def test_drops_missing_change_when_present(self) -> None:
        df = pd.DataFrame({"Close": [1.0, 2.0, 3.0], "Change": [np.nan, 1.0, 1.0]})
        out = clean_prices(df)
        assert list(out["Close"]) == [2.0, 3.0]

    def test_keeps_other_nan_cells(self) -> None:
        df = pd.DataFrame({"Open": [np.nan, 2.0], "Close": [1.0, 2.0]})
        assert len(clean_prices(df)) == 2


class TestYfinanceProvider:
    @patch("luxor_bt.data_provider.yf.download")
    def test_fetch_success(self, mock_download) -> None:
        mock_download.return_value = _yf_frame(multi=True)
        frame = YfinanceProvider().fetch("CL=F", "2020-01-01", "2020-02-01")

        assert frame.symbol == "CL=F"
        assert len(frame) == 5
        assert frame.points()[0].close == 10.5
        mock_download.assert_called_once_with(
            tickers="CL=F",
            start="2020-01-01",
            end="2020-02-01",
            interval="1d",
            auto_adjust=False,
            progress=False,
        )

    @patch("luxor_bt.data_provider.yf.download")
    def test_empty_download_is_fatal(self, mock_download) -> None:
        mock_download.return_value = pd.DataFrame()
        with pytest.raises(DataFetchError):
            YfinanceProvider().fetch("CL=F", "2020-01-01", "2020-02-01")

    @patch("luxor_bt.data_provider.yf.download")
    def test_network_error_is_wrapped(self, mock_download) -> None:
        mock_download.side_effect = ConnectionError("boom")
        with pytest.raises(DataFetchError):
            YfinanceProvider().fetch("CL=F", "2020-01-01", "2020-02-01")


class TestCsvProvider:
    def test_fetch(self, tmp_path) -> None:
        path = tmp_path / "cl.csv"
        pd.DataFrame(
            {
                "Date": ["2020-01-03", "2020-01-02", "2020-01-06"],
                "Open": [1.0, 2.0, 3.0],
                "High": [1.0, 2.0, 3.0],
                "Low": [1.0, 2.0, 3.0],
                "Last": [1.1, 2.1, np.nan],
                "Volume": [10, 20, 30],
            }
        ).to_csv(path, index=False)

        frame = CsvProvider().fetch(path, "CL")
        assert len(frame) == 2
        assert frame.df.index.is_monotonic_increasing
        assert list(frame.closes()) == [2.1, 1.1]

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            CsvProvider().fetch(tmp_path / "nope.csv", "CL")

    def test_missing_date_column(self, tmp_path) -> None:
        path = tmp_path / "bad.csv"
        pd.DataFrame({"Close": [1.0]}).to_csv(path, index=False)
        with pytest.raises(ValueError):
            CsvProvider().fetch(path, "CL")
