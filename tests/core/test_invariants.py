from pairswap.core.invariants import check_all
from pairswap.core.pool import PoolState


def test_clean_transitions_pass() -> None:
    assert check_all(PoolState(0, 0), PoolState(7, 13), "add_liquidity", (7, 13)) == []
    assert check_all(PoolState(100, 200), PoolState(150, 300), "add_liquidity", (50, 100)) == []
    assert check_all(PoolState(1000, 1000), PoolState(1100, 910), "swap_a_for_b", (100, 90)) == []


def test_detects_negative_reserve() -> None:
    assert check_all(PoolState(10, 20), PoolState(-1, 20), "remove_liquidity", (11, 0)) == [
        "reserve_a_nonneg",
        "ratio_preserved",
    ]


def test_detects_ratio_break() -> None:
    assert check_all(PoolState(100, 200), PoolState(150, 299), "add_liquidity", (50, 99)) == ["ratio_preserved"]


def test_detects_product_decrease() -> None:
    # Paying out 91 for 100 in breaks x*y >= k.
    assert check_all(PoolState(1000, 1000), PoolState(1100, 909), "swap_a_for_b", (100, 91)) == [
        "product_non_decreasing",
    ]
