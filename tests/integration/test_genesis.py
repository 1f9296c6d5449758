from pathlib import Path

import pytest

from pairswap.core import PRICE_SCALE, TransferFailed
from pairswap.integration import GenesisError, build_genesis, load_genesis

ROOT = Path(__file__).resolve().parents[2]


def _doc(**overrides):
    doc = {
        "assets": [{"id": "0xaa", "symbol": "TKA"}, {"id": "0xbb", "symbol": "TKB"}],
        "owner": "alice",
        "balances": [
            {"holder": "alice", "asset": "0xaa", "amount": 5000},
            {"holder": "alice", "asset": "0xbb", "amount": 5000},
        ],
        "allowances": [
            {"holder": "alice", "spender": "pool", "asset": "0xaa", "amount": 5000},
            {"holder": "alice", "spender": "pool", "asset": "0xbb", "amount": 5000},
        ],
        "liquidity": {"amount_a": 1000, "amount_b": 2000},
    }
    doc.update(overrides)
    return doc


def test_build_genesis_seeds_pool() -> None:
    g = build_genesis(_doc())
    assert g.pool.owner == "alice"
    assert (g.pool.reserve_a, g.pool.reserve_b) == (1000, 2000)
    assert g.asset_a.balance_of(g.pool.custody) == 1000
    assert g.asset_a.allowance("alice", g.pool.custody) == 4000
    assert g.pool.get_price(g.asset_a) == 2 * PRICE_SCALE


def test_build_genesis_without_liquidity_leaves_pool_empty() -> None:
    doc = _doc()
    del doc["liquidity"]
    g = build_genesis(doc)
    assert (g.pool.reserve_a, g.pool.reserve_b) == (0, 0)


def test_explicit_custody() -> None:
    g = build_genesis(_doc(custody="vault"))
    assert g.pool.custody == "vault"
    assert g.asset_b.balance_of("vault") == 2000


@pytest.mark.parametrize(
    "overrides",
    [
        {"assets": [{"id": "0xaa"}]},
        {"assets": [{"id": "0xaa"}, {"id": "0xaa"}]},
        {"owner": ""},
        {"balances": [{"holder": "alice", "asset": "0xcc", "amount": 1}]},
        {"balances": [{"holder": "alice", "asset": "0xaa", "amount": -1}]},
        {"allowances": ["not-a-mapping"]},
        {"liquidity": [1, 2]},
    ],
)
def test_malformed_documents_raise(overrides) -> None:
    with pytest.raises(GenesisError):
        build_genesis(_doc(**overrides))


def test_load_genesis_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "genesis.yaml"
    path.write_text(
        "assets:\n"
        "  - {id: '0xaa'}\n"
        "  - {id: '0xbb'}\n"
        "owner: alice\n",
        encoding="utf-8",
    )
    g = load_genesis(path)
    assert g.asset_a.asset_id == "0xaa"
    assert g.pool.state.k == 0


def test_load_genesis_rejects_bad_yaml(tmp_path: Path) -> None:
    path = tmp_path / "genesis.yaml"
    path.write_text("assets: [unclosed", encoding="utf-8")
    with pytest.raises(GenesisError):
        load_genesis(path)


def test_example_genesis_file_loads() -> None:
    g = load_genesis(ROOT / "configs" / "genesis.example.yaml")
    assert (g.pool.reserve_a, g.pool.reserve_b) == (1000, 2000)
    assert g.asset_a.balance_of("bob") == 10000


@pytest.mark.parametrize(
    "liquidity",
    [
        {"amount_a": 0, "amount_b": 5},
        {"amount_a": 5, "amount_b": 0},
        {"amount_a": 5},
        {"amount_a": True, "amount_b": 5},
    ],
)
def test_non_positive_seed_amounts_raise_genesis_error(liquidity) -> None:
    with pytest.raises(GenesisError):
        build_genesis(_doc(liquidity=liquidity))


def test_seed_rejected_by_pool_raises_genesis_error() -> None:
    # Allowances cover only 5000, so pulling 6000 of asset A fails.
    with pytest.raises(GenesisError) as excinfo:
        build_genesis(_doc(liquidity={"amount_a": 6000, "amount_b": 10}))
    assert isinstance(excinfo.value.__cause__, TransferFailed)
    assert "TransferFailed" in str(excinfo.value)
