"""
Asset ledger capability and an in-memory token ledger.

The pool consumes ledgers only through the `AssetLedger` protocol:
- `transfer_from` pulls tokens from a holder that pre-approved the spender,
- `transfer` moves tokens out of the caller's own balance,
- `snapshot` / `restore` let a caller discard every effect of a failed call.

Transfers are call-and-check: they return False when the ledger refuses the
movement (insufficient balance or allowance). Callers must treat False the
same as a raised exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Protocol, Tuple, runtime_checkable

from .allowances import AllowanceTable
from .balances import Amount, AssetId, BalanceTable, PubKey, require_amount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerSnapshot:
    """Immutable copy of a ledger's balances and allowances."""

    asset_id: AssetId
    balances: Dict[PubKey, Amount] = field(default_factory=dict)
    allowances: Dict[Tuple[PubKey, PubKey], Amount] = field(default_factory=dict)


@runtime_checkable
class AssetLedger(Protocol):
    asset_id: AssetId

    def balance_of(self, holder: PubKey) -> Amount: ...

    def transfer(self, sender: PubKey, recipient: PubKey, amount: Amount) -> bool: ...

    def transfer_from(
        self, spender: PubKey, holder: PubKey, recipient: PubKey, amount: Amount
    ) -> bool: ...

    def snapshot(self) -> LedgerSnapshot: ...

    def restore(self, snapshot: LedgerSnapshot) -> None: ...


class TokenLedger:
    """
    Fungible token ledger for one asset.

    Balances and allowances are integer-only; there is no decimals concept.
    `fail_next_transfers()` makes the next N transfer calls fail, either by
    returning False or by raising, to simulate a misbehaving token.
    """

    def __init__(self, asset_id: AssetId, symbol: str = "") -> None:
        if not isinstance(asset_id, str) or not asset_id:
            raise ValueError("asset_id must be a non-empty string")
        self.asset_id = asset_id
        self.symbol = symbol or asset_id
        self._balances = BalanceTable()
        self._allowances = AllowanceTable()
        self._fail_budget = 0
        self._fail_by_raising = False

    # -- reads ---------------------------------------------------------------

    @property
    def total_supply(self) -> Amount:
        return self._balances.total()

    def balance_of(self, holder: PubKey) -> Amount:
        return self._balances.get(holder)

    def allowance(self, holder: PubKey, spender: PubKey) -> Amount:
        return self._allowances.get(holder, spender)

    # -- admin ---------------------------------------------------------------

    def mint(self, holder: PubKey, amount: Amount) -> None:
        require_amount("amount", amount)
        if amount < 0:
            raise ValueError(f"mint amount must be non-negative: {amount}")
        self._balances.add(holder, amount)

    def approve(self, holder: PubKey, spender: PubKey, amount: Amount) -> bool:
        """Set (not increase) the amount `spender` may pull from `holder`."""
        self._allowances.set(holder, spender, amount)
        return True

    def fail_next_transfers(self, count: int = 1, *, raise_error: bool = False) -> None:
        if count < 0:
            raise ValueError("count must be non-negative")
        self._fail_budget = count
        self._fail_by_raising = raise_error

    # -- transfers -----------------------------------------------------------

    def transfer(self, sender: PubKey, recipient: PubKey, amount: Amount) -> bool:
        require_amount("amount", amount)
        if amount < 0:
            raise ValueError(f"transfer amount must be non-negative: {amount}")
        if self._consume_injected_failure():
            return False
        if self._balances.get(sender) < amount:
            logger.debug("%s: transfer refused, %s balance below %d", self.symbol, sender, amount)
            return False
        self._move(sender, recipient, amount)
        return True

    def transfer_from(
        self, spender: PubKey, holder: PubKey, recipient: PubKey, amount: Amount
    ) -> bool:
        require_amount("amount", amount)
        if amount < 0:
            raise ValueError(f"transfer amount must be non-negative: {amount}")
        if self._consume_injected_failure():
            return False
        if self._allowances.get(holder, spender) < amount:
            logger.debug(
                "%s: transfer_from refused, allowance %s->%s below %d",
                self.symbol, holder, spender, amount,
            )
            return False
        if self._balances.get(holder) < amount:
            logger.debug("%s: transfer_from refused, %s balance below %d", self.symbol, holder, amount)
            return False
        self._allowances.consume(holder, spender, amount)
        self._move(holder, recipient, amount)
        return True

    def _move(self, sender: PubKey, recipient: PubKey, amount: Amount) -> None:
        self._balances.subtract(sender, amount)
        self._balances.add(recipient, amount)

    def _consume_injected_failure(self) -> bool:
        if self._fail_budget <= 0:
            return False
        self._fail_budget -= 1
        if self._fail_by_raising:
            raise RuntimeError(f"{self.symbol}: injected transfer failure")
        return True

    # -- rollback support ----------------------------------------------------

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            asset_id=self.asset_id,
            balances=self._balances.get_all_balances(),
            allowances=self._allowances.get_all_allowances(),
        )

    def restore(self, snapshot: LedgerSnapshot) -> None:
        if snapshot.asset_id != self.asset_id:
            raise ValueError(
                f"snapshot belongs to {snapshot.asset_id}, not {self.asset_id}"
            )
        self._balances = BalanceTable(snapshot.balances)
        allowances = AllowanceTable()
        for (holder, spender), amount in snapshot.allowances.items():
            allowances.set(holder, spender, amount)
        self._allowances = allowances

    def __repr__(self) -> str:
        return f"TokenLedger({self.symbol!r}, supply={self.total_supply})"
