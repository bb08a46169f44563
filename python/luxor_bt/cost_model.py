"""Flat per-transaction fee model."""

from __future__ import annotations

from .config import CostConfig


class FlatFeeCostModel:
    """Costs:
    - a fixed fee on every transaction (entry, exit), independent of size
    - no margin, borrow or slippage
    """

    def __init__(self, cfg: CostConfig):
        self.cfg = cfg

    def transaction_fee(self, qty: int) -> float:
        """Fee for one fill. Zero-quantity fills are free."""
        if qty == 0:
            return 0.0
        return float(self.cfg.txn_fee)
