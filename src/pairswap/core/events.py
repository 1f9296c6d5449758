"""Notifications emitted by the pool after a committed operation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

from ..state.balances import Amount, PubKey


@unique
class Event(Enum):
    LIQUIDITY_ADDED = "LiquidityAdded"
    SWAP_A_FOR_B = "SwapAforB"
    SWAP_B_FOR_A = "SwapBforA"
    LIQUIDITY_REMOVED = "LiquidityRemoved"


@dataclass(frozen=True)
class PoolEvent:
    """
    One emitted notification.

    Field meaning depends on `event`:
    - liquidity events: amount0 = amount A, amount1 = amount B
    - swaps: amount0 = amount in, amount1 = amount out
    """

    event: Event
    account: PubKey
    amount0: Amount
    amount1: Amount

    def as_dict(self) -> dict[str, object]:
        return {
            "event": self.event.value,
            "account": self.account,
            "amount0": self.amount0,
            "amount1": self.amount1,
        }
