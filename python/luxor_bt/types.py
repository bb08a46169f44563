"""Shared types for the Luxor backtest.

The guiding principle is to keep the runtime objects small and explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Union


class Direction(str, Enum):
    """Signal direction. NONE while either moving average is undefined."""

    LONG = "long"
    SHORT = "short"
    NONE = "none"

    @property
    def sign(self) -> int:
        if self is Direction.LONG:
            return 1
        if self is Direction.SHORT:
            return -1
        return 0


@dataclass(frozen=True)
class PricePoint:
    """Single daily observation."""

    date: datetime
    close: float


@dataclass(frozen=True)
class Signal:
    date: datetime
    direction: Direction


@dataclass(frozen=True)
class Position:
    """Open position. quantity is signed: +long, -short."""

    quantity: int
    entry_price: float
    open_date: datetime
    entry_fee: float = 0.0

    @property
    def direction(self) -> Direction:
        return Direction.LONG if self.quantity > 0 else Direction.SHORT

    def unrealized_pnl(self, price: float) -> float:
        return (float(price) - self.entry_price) * self.quantity


@dataclass(frozen=True)
class Trade:
    """Closed round trip. fees = entry fee + exit fee."""

    entry_date: datetime
    exit_date: datetime
    quantity: int
    entry_price: float
    exit_price: float
    fees: float
    realized_pnl: float


@dataclass(frozen=True)
class EquityPoint:
    date: datetime
    cash: float
    equity: float  # cash + mark-to-market of the open position


@dataclass(frozen=True)
class TradeEvent:
    """A single executed transaction (blotter row)."""

    timestamp: datetime
    symbol: str
    side: str  # 'BUY'/'SELL'
    reason: str  # rule name, e.g. 'EnterLong'
    price: float
    qty: int  # signed quantity executed
    fee_paid: float
    position_after: int  # signed quantity held after the fill
    cash_after: float
    equity_after: float


# ---------------------------------------------------------------------------
# Rules
#
# Each signal bar expands into an ordered list of these. A reversal is
# [ExitLong, EnterShort] or [ExitShort, EnterLong].
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EnterLong:
    quantity: int
    fee: float


@dataclass(frozen=True)
class EnterShort:
    quantity: int
    fee: float


@dataclass(frozen=True)
class ExitLong:
    fee: float


@dataclass(frozen=True)
class ExitShort:
    fee: float


Rule = Union[EnterLong, EnterShort, ExitLong, ExitShort]
