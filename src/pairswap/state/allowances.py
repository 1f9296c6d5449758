"""
Spending allowance tracking for asset ledgers.

An allowance lets `spender` move up to `amount` of `holder`'s balance via
`transfer_from`. Allowances are scoped to one ledger.
"""

from __future__ import annotations

from typing import Dict, Tuple

from .balances import Amount, PubKey, require_amount


class AllowanceTable:
    """
    Allowance table mapping (holder, spender) -> amount.

    Notes:
    - Allowances are always non-negative.
    - Zero allowances are omitted to keep the table sparse.
    """

    def __init__(self) -> None:
        self._allowances: Dict[Tuple[PubKey, PubKey], Amount] = {}

    def get(self, holder: PubKey, spender: PubKey) -> Amount:
        """Get allowance for (holder, spender). Returns 0 if not found."""
        return self._allowances.get((holder, spender), 0)

    def set(self, holder: PubKey, spender: PubKey, amount: Amount) -> None:
        require_amount("amount", amount)
        if amount < 0:
            raise ValueError(f"Allowance cannot be negative: {amount}")
        if amount == 0:
            self._allowances.pop((holder, spender), None)
        else:
            self._allowances[(holder, spender)] = amount

    def consume(self, holder: PubKey, spender: PubKey, amount: Amount) -> None:
        """Spend `amount` of an allowance."""
        current = self.get(holder, spender)
        if amount > current:
            raise ValueError(f"Insufficient allowance: {amount} > {current}")
        self.set(holder, spender, current - amount)

    def get_all_allowances(self) -> Dict[Tuple[PubKey, PubKey], Amount]:
        return dict(self._allowances)

    def __repr__(self) -> str:
        return f"AllowanceTable({len(self._allowances)} entries)"
