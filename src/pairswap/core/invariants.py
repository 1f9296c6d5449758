"""Invariant checkers for pool transitions.

Each function takes the pre-state, the post-state and the amounts moved by the
operation, and returns True when the invariant holds. `check_all()` returns
the ids of violated invariants (empty = all pass).

Liquidity operations are checked for ratio preservation; swaps for a
non-decreasing reserve product.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from .cpmm import is_proportional

if TYPE_CHECKING:
    from .pool import PoolState

LIQUIDITY_OPS = frozenset({"add_liquidity", "remove_liquidity"})
SWAP_OPS = frozenset({"swap_a_for_b", "swap_b_for_a"})


def inv_reserve_a_nonneg(pre: PoolState, post: PoolState, op: str, amounts: tuple[int, int]) -> bool:
    return post.reserve_a >= 0


def inv_reserve_b_nonneg(pre: PoolState, post: PoolState, op: str, amounts: tuple[int, int]) -> bool:
    return post.reserve_b >= 0


def inv_ratio_preserved(pre: PoolState, post: PoolState, op: str, amounts: tuple[int, int]) -> bool:
    if op not in LIQUIDITY_OPS:
        return True
    if pre.reserve_a == 0 and pre.reserve_b == 0:
        # First deposit sets the ratio.
        return True
    amount_a, amount_b = amounts
    return is_proportional(pre.reserve_a, pre.reserve_b, amount_a, amount_b)


def inv_product_non_decreasing(pre: PoolState, post: PoolState, op: str, amounts: tuple[int, int]) -> bool:
    if op not in SWAP_OPS:
        return True
    return post.k >= pre.k


_ALL_INVARIANTS: list[tuple[str, Callable[..., bool]]] = [
    ("reserve_a_nonneg", inv_reserve_a_nonneg),
    ("reserve_b_nonneg", inv_reserve_b_nonneg),
    ("ratio_preserved", inv_ratio_preserved),
    ("product_non_decreasing", inv_product_non_decreasing),
]


def check_all(pre: PoolState, post: PoolState, op: str, amounts: tuple[int, int]) -> list[str]:
    """Return the list of violated invariant ids."""
    return [name for name, fn in _ALL_INVARIANTS if not fn(pre, post, op, amounts)]
