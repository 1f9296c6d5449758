import pytest

from pairswap.state import AssetLedger, BalanceTable, TokenLedger


def test_token_ledger_satisfies_protocol() -> None:
    assert isinstance(TokenLedger("0xaa"), AssetLedger)


def test_balance_table_is_sparse_and_non_negative() -> None:
    t = BalanceTable()
    t.add("alice", 5)
    t.subtract("alice", 5)
    assert t.get_all_balances() == {}
    with pytest.raises(ValueError):
        t.subtract("alice", 1)
    with pytest.raises(ValueError):
        t.subtract("alice", -1)
    with pytest.raises(TypeError):
        t.set("alice", True)


def test_transfer_moves_balance() -> None:
    ledger = TokenLedger("0xaa", "TKA")
    ledger.mint("alice", 100)
    assert ledger.transfer("alice", "bob", 40) is True
    assert ledger.balance_of("alice") == 60
    assert ledger.balance_of("bob") == 40
    assert ledger.total_supply == 100


def test_transfer_refuses_overdraft() -> None:
    ledger = TokenLedger("0xaa")
    ledger.mint("alice", 10)
    assert ledger.transfer("alice", "bob", 11) is False
    assert ledger.balance_of("alice") == 10


def test_transfer_from_consumes_allowance() -> None:
    ledger = TokenLedger("0xaa")
    ledger.mint("alice", 100)
    ledger.approve("alice", "pool", 30)
    assert ledger.transfer_from("pool", "alice", "pool", 20) is True
    assert ledger.allowance("alice", "pool") == 10
    assert ledger.transfer_from("pool", "alice", "pool", 11) is False
    assert ledger.balance_of("pool") == 20


def test_transfer_from_refuses_without_balance() -> None:
    ledger = TokenLedger("0xaa")
    ledger.approve("alice", "pool", 30)
    assert ledger.transfer_from("pool", "alice", "pool", 1) is False
    assert ledger.allowance("alice", "pool") == 30


def test_negative_amounts_raise() -> None:
    ledger = TokenLedger("0xaa")
    with pytest.raises(ValueError):
        ledger.mint("alice", -1)
    with pytest.raises(ValueError):
        ledger.transfer("alice", "bob", -1)


def test_injected_failures() -> None:
    ledger = TokenLedger("0xaa")
    ledger.mint("alice", 10)
    ledger.fail_next_transfers(1)
    assert ledger.transfer("alice", "bob", 1) is False
    assert ledger.transfer("alice", "bob", 1) is True
    ledger.fail_next_transfers(1, raise_error=True)
    with pytest.raises(RuntimeError):
        ledger.transfer("alice", "bob", 1)


def test_snapshot_restore_round_trips_balances_and_allowances() -> None:
    ledger = TokenLedger("0xaa")
    ledger.mint("alice", 100)
    ledger.approve("alice", "pool", 50)
    snap = ledger.snapshot()
    ledger.transfer_from("pool", "alice", "pool", 50)
    ledger.mint("carol", 7)
    ledger.restore(snap)
    assert ledger.balance_of("alice") == 100
    assert ledger.balance_of("pool") == 0
    assert ledger.balance_of("carol") == 0
    assert ledger.allowance("alice", "pool") == 50
    assert ledger.snapshot() == snap


def test_restore_rejects_foreign_snapshot() -> None:
    with pytest.raises(ValueError):
        TokenLedger("0xaa").restore(TokenLedger("0xbb").snapshot())
