"""
Single-asset balance tracking.

Implements BalanceTable[PubKey] -> Amount for one asset ledger.
"""

from __future__ import annotations

from typing import Dict


# Type aliases
PubKey = str  # Opaque holder identity (account address, custody id, ...)
AssetId = str  # Hex string identifying an asset ledger (0x...)
Amount = int  # Non-negative integer (arbitrary precision)


def require_amount(name: str, value: Amount) -> None:
    """Reject non-int amounts (bool included) with TypeError."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


class BalanceTable:
    """
    Balance table mapping pubkey -> amount for a single asset.

    Note: balances live in a plain dict. Callers that need a stable order
    (snapshots, reports) should sort keys explicitly.
    """

    def __init__(self, initial: Dict[PubKey, Amount] | None = None):
        self._balances: Dict[PubKey, Amount] = {}
        for pubkey, amount in (initial or {}).items():
            self.set(pubkey, amount)

    def get(self, pubkey: PubKey) -> Amount:
        """Get balance for pubkey. Returns 0 if not found."""
        return self._balances.get(pubkey, 0)

    def set(self, pubkey: PubKey, amount: Amount) -> None:
        """
        Set balance for pubkey.

        Raises:
            ValueError: If amount is negative
        """
        require_amount("amount", amount)
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop(pubkey, None)
        else:
            self._balances[pubkey] = amount

    def add(self, pubkey: PubKey, delta: Amount) -> None:
        """
        Add delta to balance (delta may be negative for subtraction).

        Raises:
            ValueError: If resulting balance would be negative
        """
        current = self.get(pubkey)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(pubkey, new_balance)

    def subtract(self, pubkey: PubKey, delta: Amount) -> None:
        """Subtract a non-negative amount from a balance."""
        if delta < 0:
            raise ValueError(f"Delta must be non-negative: {delta}")
        self.add(pubkey, -delta)

    def total(self) -> Amount:
        return sum(self._balances.values())

    def get_all_balances(self) -> Dict[PubKey, Amount]:
        """Return a copy of all non-zero balances."""
        return dict(self._balances)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
