"""Configuration objects.

Style rules:
- keep signatures stable (no alias chaos)
- prefer explicit field names
- configs are passed explicitly; there is no global strategy/portfolio store
"""

from __future__ import annotations

from dataclasses import dataclass, fields


def _from_mapping(cls, d: dict, mapping: dict):
    """Build ``cls`` from a parameter dict. Unknown keys are ignored."""
    names = {f.name for f in fields(cls)}
    kwargs = {}
    for k, v in (d or {}).items():
        if k in mapping:
            kwargs[mapping[k]] = v
        elif k in names:
            kwargs[k] = v
    return cls(**kwargs)


@dataclass(frozen=True)
class IndicatorConfig:
    """Moving-average windows. Fixed for the lifetime of a run.

    fast < slow is the usual convention but is not enforced.
    """

    sma_fast: int = 10
    sma_slow: int = 30

    def __post_init__(self) -> None:
        for name in ("sma_fast", "sma_slow"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int) or v <= 0:
                raise ValueError(f"{name} must be a positive integer, got {v!r}")

    @property
    def warmup_bars(self) -> int:
        """Bars needed before both averages are defined."""
        return max(self.sma_fast, self.sma_slow) - 1

    @classmethod
    def from_params_dict(cls, d: dict) -> "IndicatorConfig":
        """Accepts the classic Luxor parameter names (nFast/nSlow)."""
        return _from_mapping(cls, d, {"nFast": "sma_fast", "nSlow": "sma_slow"})


@dataclass(frozen=True)
class StrategyConfig:
    """Luxor rule parameters."""

    order_qty: int = 100
    # Flatten any open position on the last bar so it shows up as a Trade.
    close_at_end: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.order_qty, bool) or not isinstance(self.order_qty, int) or self.order_qty <= 0:
            raise ValueError(f"order_qty must be a positive integer, got {self.order_qty!r}")

    @classmethod
    def from_params_dict(cls, d: dict) -> "StrategyConfig":
        return _from_mapping(cls, d, {"orderqty": "order_qty", "OrderQty": "order_qty"})


@dataclass(frozen=True)
class CostConfig:
    """Flat fee charged on every transaction (entry or exit)."""

    txn_fee: float = 10.0

    def __post_init__(self) -> None:
        if float(self.txn_fee) < 0:
            raise ValueError(f"txn_fee must be non-negative, got {self.txn_fee!r}")

    @classmethod
    def from_params_dict(cls, d: dict) -> "CostConfig":
        return _from_mapping(cls, d, {"txnfees": "txn_fee", "TxnFees": "txn_fee"})


@dataclass(frozen=True)
class BacktestConfig:
    """Backtest run configuration.

    Notes:
    - fills happen at the close of the signal bar
    - futures-style accounting: entries move cash by the fee only
    """

    symbol: str = "CL=F"
    initial_equity: float = 100_000.0

    def __post_init__(self) -> None:
        if float(self.initial_equity) <= 0:
            raise ValueError(f"initial_equity must be positive, got {self.initial_equity!r}")


@dataclass(frozen=True)
class ReportConfig:
    """Performance/risk statistic conventions."""

    trading_days_per_year: int = 252
    var_confidence: float = 0.95

    def __post_init__(self) -> None:
        if int(self.trading_days_per_year) <= 0:
            raise ValueError("trading_days_per_year must be positive")
        if not (0.0 < float(self.var_confidence) < 1.0):
            raise ValueError(f"var_confidence must be in (0, 1), got {self.var_confidence!r}")
