"""
Ledger-side state for pairswap pools
"""

from .allowances import AllowanceTable
from .balances import Amount, AssetId, BalanceTable, PubKey
from .ledger import AssetLedger, LedgerSnapshot, TokenLedger

__all__ = [
    "AllowanceTable",
    "Amount",
    "AssetId",
    "BalanceTable",
    "PubKey",
    "AssetLedger",
    "LedgerSnapshot",
    "TokenLedger",
]
