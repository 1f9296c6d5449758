from __future__ import annotations

import pytest

from pairswap.core.cpmm import PRICE_SCALE, get_amount_out, is_proportional, spot_price, swap_exact_in


def test_get_amount_out_matches_constant_product_example() -> None:
    assert get_amount_out(1000, 1000, 100) == 90


def test_get_amount_out_floors_dust_to_zero() -> None:
    # 1_000_000 * 1 / (1_000_000 + 1) < 1
    assert get_amount_out(1_000_000, 1, 1) == 0


def test_get_amount_out_rejects_non_positive_input() -> None:
    with pytest.raises(ValueError):
        get_amount_out(10, 10, 0)
    with pytest.raises(ValueError):
        get_amount_out(10, 10, -5)


def test_get_amount_out_rejects_bool_and_float() -> None:
    with pytest.raises(TypeError):
        get_amount_out(10, 10, True)
    with pytest.raises(TypeError):
        get_amount_out(10, 10.0, 1)


def test_swap_exact_in_updates_reserves_and_keeps_k() -> None:
    amount_out, (new_in, new_out) = swap_exact_in(reserve_in=1000, reserve_out=1000, amount_in=100)
    assert amount_out == 90
    assert (new_in, new_out) == (1100, 910)
    assert new_in * new_out == 1_001_000
    assert new_in * new_out >= 1000 * 1000


def test_swap_exact_in_handles_values_beyond_256_bits() -> None:
    big = (1 << 300) + 7
    amount_out, (new_in, new_out) = swap_exact_in(reserve_in=big, reserve_out=big, amount_in=big)
    # Equal reserves and input: out = floor(big / 2)
    assert amount_out == big // 2
    assert new_in * new_out >= big * big


def test_is_proportional_exact_cross_multiplication() -> None:
    assert is_proportional(100, 200, 50, 100)
    assert not is_proportional(100, 200, 50, 99)
    assert not is_proportional(100, 200, 51, 100)


def test_spot_price_fixed_point() -> None:
    assert spot_price(100, 200) == 2 * PRICE_SCALE
    assert spot_price(200, 100) == PRICE_SCALE // 2
    # 1/3 truncates
    assert spot_price(3, 1) == 333_333_333_333_333_333


def test_spot_price_requires_positive_reserves() -> None:
    with pytest.raises(ValueError):
        spot_price(0, 100)
