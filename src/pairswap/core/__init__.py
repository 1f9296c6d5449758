"""
Constant-product pool core
"""

from .atomic import ledger_transaction
from .cpmm import PRICE_SCALE, get_amount_out, is_proportional, spot_price, swap_exact_in
from .errors import (
    InsufficientLiquidity,
    InsufficientReserves,
    InvalidAmount,
    PoolError,
    PoolInvariantError,
    ProportionMismatch,
    TransferFailed,
    Unauthorized,
    UnsupportedToken,
    ZeroOutput,
)
from .events import Event, PoolEvent
from .pool import Direction, Pool, PoolCommand, PoolConfig, PoolState, PoolStepResult, compute_custody_id
from .pool import step as pool_step

__all__ = [
    "ledger_transaction",
    "PRICE_SCALE",
    "get_amount_out",
    "is_proportional",
    "spot_price",
    "swap_exact_in",
    "InsufficientLiquidity",
    "InsufficientReserves",
    "InvalidAmount",
    "PoolError",
    "PoolInvariantError",
    "ProportionMismatch",
    "TransferFailed",
    "Unauthorized",
    "UnsupportedToken",
    "ZeroOutput",
    "Event",
    "PoolEvent",
    "Direction",
    "Pool",
    "PoolCommand",
    "PoolConfig",
    "PoolState",
    "PoolStepResult",
    "compute_custody_id",
    "pool_step",
]
