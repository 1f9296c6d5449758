"""
All-or-nothing execution over asset ledgers.

`ledger_transaction()` snapshots every ledger touched by an operation and
restores the snapshots if the wrapped block raises, so a failed call leaves
balances and allowances exactly as they were before it started.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from ..state.balances import Amount, PubKey
from ..state.ledger import AssetLedger
from .errors import TransferFailed

logger = logging.getLogger(__name__)


@contextmanager
def ledger_transaction(*ledgers: AssetLedger) -> Iterator[None]:
    snapshots = [ledger.snapshot() for ledger in ledgers]
    try:
        yield
    except BaseException:
        for ledger, snap in zip(ledgers, snapshots):
            ledger.restore(snap)
        logger.debug("rolled back %d ledger(s)", len(ledgers))
        raise


def pull(ledger: AssetLedger, *, spender: PubKey, holder: PubKey, recipient: PubKey, amount: Amount) -> None:
    """`transfer_from` that raises TransferFailed on a False result or ledger error."""
    try:
        ok = ledger.transfer_from(spender, holder, recipient, amount)
    except Exception as exc:
        raise TransferFailed(f"{ledger.asset_id}: transfer_from {holder} -> {recipient} errored: {exc}") from exc
    if not ok:
        raise TransferFailed(f"{ledger.asset_id}: transfer_from {holder} -> {recipient} of {amount} refused")


def push(ledger: AssetLedger, *, sender: PubKey, recipient: PubKey, amount: Amount) -> None:
    """`transfer` that raises TransferFailed on a False result or ledger error."""
    try:
        ok = ledger.transfer(sender, recipient, amount)
    except Exception as exc:
        raise TransferFailed(f"{ledger.asset_id}: transfer {sender} -> {recipient} errored: {exc}") from exc
    if not ok:
        raise TransferFailed(f"{ledger.asset_id}: transfer {sender} -> {recipient} of {amount} refused")
