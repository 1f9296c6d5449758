"""
Constant Product Market Maker (CPMM) arithmetic.

Integer-only helpers used by the pool. Rounding is always floor, which biases
swap output toward the pool.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per operation
- Invariant: After each swap, x' * y' >= x * y
"""

from typing import Tuple

from ..state.balances import Amount, require_amount

# Fixed-point scale for prices: 1.0 == PRICE_SCALE
PRICE_SCALE = 10**18


def get_amount_out(reserve_in: Amount, reserve_out: Amount, amount_in: Amount) -> Amount:
    """
    Output amount for an exact-in swap with no fee.

        amount_out = floor(reserve_out * amount_in / (reserve_in + amount_in))

    The result may be 0 for dust inputs; callers decide how to treat that.

    Raises:
        TypeError: If any argument is not an int
        ValueError: If reserves are negative or amount_in is not positive
    """
    for name, v in (("reserve_in", reserve_in), ("reserve_out", reserve_out), ("amount_in", amount_in)):
        require_amount(name, v)
    if reserve_in < 0 or reserve_out < 0:
        raise ValueError(f"Reserves must be non-negative: ({reserve_in}, {reserve_out})")
    if amount_in <= 0:
        raise ValueError(f"amount_in must be positive: {amount_in}")
    return (reserve_out * amount_in) // (reserve_in + amount_in)


def swap_exact_in(
    reserve_in: Amount,
    reserve_out: Amount,
    amount_in: Amount,
) -> Tuple[Amount, Tuple[Amount, Amount]]:
    """
    Compute output amount and post-swap reserves for an exact-in swap.

    Post-swap reserves:
        new_reserve_in = reserve_in + amount_in
        new_reserve_out = reserve_out - amount_out

    Args:
        reserve_in: Current reserve of input asset
        reserve_out: Current reserve of output asset
        amount_in: Exact input amount

    Returns:
        Tuple of (amount_out, (new_reserve_in, new_reserve_out))

    Raises:
        ValueError: If inputs are invalid or would violate invariants
    """
    amount_out = get_amount_out(reserve_in, reserve_out, amount_in)
    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out

    k_before = reserve_in * reserve_out
    k_after = new_reserve_in * new_reserve_out
    if k_after < k_before:
        raise ValueError(f"Invariant violation: new_k ({k_after}) < old_k ({k_before})")

    return amount_out, (new_reserve_in, new_reserve_out)


def is_proportional(
    reserve_a: Amount,
    reserve_b: Amount,
    amount_a: Amount,
    amount_b: Amount,
) -> bool:
    """
    Exact ratio check: reserve_a * amount_b == reserve_b * amount_a.

    Cross-multiplication keeps the comparison in integers; there is no
    tolerance.
    """
    return reserve_a * amount_b == reserve_b * amount_a


def spot_price(reserve_base: Amount, reserve_quote: Amount) -> Amount:
    """
    Price of one unit of the base asset in quote units, scaled by PRICE_SCALE.

        price = floor(reserve_quote * 10**18 / reserve_base)
    """
    if reserve_base <= 0 or reserve_quote <= 0:
        raise ValueError(f"Reserves must be positive: ({reserve_base}, {reserve_quote})")
    return (reserve_quote * PRICE_SCALE) // reserve_base
