"""Single-symbol Luxor trader.

State machine over {Flat, Long, Short}:
- Flat + long  -> EnterLong(Q)
- Flat + short -> EnterShort(Q)
- Long + short -> ExitLong, EnterShort (same bar, two fees)
- Short + long -> ExitShort, EnterLong (same bar, two fees)
- same direction or no signal -> hold

Fills happen at the close of the signal bar. Accounting is futures-style:
an entry moves cash by the fee only, an exit realises the price difference.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from .config import BacktestConfig, CostConfig, StrategyConfig
from .cost_model import FlatFeeCostModel
from .data_manager import LuxorDataManager
from .types import (
    Direction,
    EnterLong,
    EnterShort,
    EquityPoint,
    ExitLong,
    ExitShort,
    Position,
    Rule,
    Trade,
    TradeEvent,
)

logger = logging.getLogger(__name__)


class LuxorTrader:
    """Runs the Luxor rule bar by bar over a :class:`LuxorDataManager`."""

    def __init__(
        self,
        dm: LuxorDataManager,
        strat_cfg: StrategyConfig,
        cost_cfg: CostConfig,
        bt_cfg: BacktestConfig,
        warmup_until: Optional[datetime] = None,
    ):
        self.dm = dm
        # Bars at or before this timestamp only feed the averages; no orders.
        self.warmup_until = warmup_until
        self.symbol = bt_cfg.symbol
        self.bt_cfg = bt_cfg
        self.strat_cfg = strat_cfg
        self.cost_model = FlatFeeCostModel(cost_cfg)

        self.cash = float(bt_cfg.initial_equity)
        self.position: Optional[Position] = None

        self.trades: List[Trade] = []
        self.trade_log: List[TradeEvent] = []
        self.equity_curve: List[EquityPoint] = []

    @property
    def quantity(self) -> int:
        return self.position.quantity if self.position is not None else 0

    def equity_value(self, price: float) -> float:
        """Cash plus mark-to-market of the open position."""
        if self.position is None:
            return float(self.cash)
        return float(self.cash + self.position.unrealized_pnl(price))

    # ---------- public API ----------

    def run_full_backtest(self) -> None:
        """Run full history in the data manager."""
        for t in range(len(self.dm)):
            self.step(t)
        logger.info(
            "%s: %d bars, %d trades, final equity %.2f",
            self.symbol,
            len(self.equity_curve),
            len(self.trades),
            self.equity_curve[-1].equity if self.equity_curve else self.cash,
        )

    def step(self, t: int) -> None:
        """Process bar index t."""
        ts = self.dm.get_bar_timestamp(t)
        price = self.dm.get_close(t)

        if self.warmup_until is None or ts > self.warmup_until:
            for rule in self.rules_for(self.dm.get_signal(t)):
                self.apply(rule, ts, price)

        if self.strat_cfg.close_at_end and t == len(self.dm) - 1 and self.position is not None:
            self._close(ts, price, self.cost_model.transaction_fee(self.quantity), reason="CloseAtEnd")

        self.equity_curve.append(EquityPoint(date=ts, cash=float(self.cash), equity=self.equity_value(price)))

    def rules_for(self, signal: Direction) -> List[Rule]:
        """Ordered rules a signal triggers from the current state."""
        qty = int(self.strat_cfg.order_qty)
        fee = self.cost_model.transaction_fee(qty)
        held = Direction.NONE if self.position is None else self.position.direction

        if signal == Direction.NONE or signal == held:
            return []

        rules: List[Rule] = []
        if held == Direction.LONG:
            rules.append(ExitLong(fee=self.cost_model.transaction_fee(self.quantity)))
        elif held == Direction.SHORT:
            rules.append(ExitShort(fee=self.cost_model.transaction_fee(self.quantity)))

        if signal == Direction.LONG:
            rules.append(EnterLong(quantity=qty, fee=fee))
        else:
            rules.append(EnterShort(quantity=qty, fee=fee))
        return rules

    def apply(self, rule: Rule, ts: datetime, price: float) -> None:
        if isinstance(rule, (EnterLong, EnterShort)):
            if self.position is not None:
                raise RuntimeError(f"cannot enter while holding {self.position.quantity}")
            qty = rule.quantity if isinstance(rule, EnterLong) else -rule.quantity
            self._open(ts, price, qty, rule.fee, reason=type(rule).__name__)
        elif isinstance(rule, ExitLong):
            if self.quantity <= 0:
                raise RuntimeError("ExitLong without a long position")
            self._close(ts, price, rule.fee, reason="ExitLong")
        elif isinstance(rule, ExitShort):
            if self.quantity >= 0:
                raise RuntimeError("ExitShort without a short position")
            self._close(ts, price, rule.fee, reason="ExitShort")
        else:
            raise TypeError(f"unknown rule: {rule!r}")

    # ---------- execution/accounting ----------

    def _open(self, ts: datetime, price: float, qty: int, fee: float, reason: str) -> None:
        self.cash -= fee
        self.position = Position(quantity=int(qty), entry_price=float(price), open_date=ts, entry_fee=float(fee))
        logger.debug("%s %s %d @ %.4f on %s", self.symbol, reason, qty, price, ts.date())
        self._log_event(ts, side="BUY" if qty > 0 else "SELL", reason=reason, price=price, qty=qty, fee=fee)

    def _close(self, ts: datetime, price: float, fee: float, reason: str) -> None:
        pos = self.position
        gross = pos.unrealized_pnl(price)
        self.cash += gross - fee
        self.position = None

        fees = pos.entry_fee + fee
        self.trades.append(
            Trade(
                entry_date=pos.open_date,
                exit_date=ts,
                quantity=pos.quantity,
                entry_price=pos.entry_price,
                exit_price=float(price),
                fees=float(fees),
                realized_pnl=float(gross - fees),
            )
        )
        logger.debug("%s %s %d @ %.4f on %s (pnl %.2f)", self.symbol, reason, pos.quantity, price, ts.date(), gross - fees)
        self._log_event(ts, side="SELL" if pos.quantity > 0 else "BUY", reason=reason, price=price, qty=-pos.quantity, fee=fee)

    def _log_event(self, ts: datetime, side: str, reason: str, price: float, qty: int, fee: float) -> None:
        self.trade_log.append(
            TradeEvent(
                timestamp=ts,
                symbol=self.symbol,
                side=side,
                reason=reason,
                price=float(price),
                qty=int(qty),
                fee_paid=float(fee),
                position_after=self.quantity,
                cash_after=float(self.cash),
                equity_after=self.equity_value(price),
            )
        )
