"""
pairswap: single-pair constant-product liquidity pool over pluggable asset ledgers.
"""

from .core import Direction, Pool, PoolConfig, PoolError
from .state import TokenLedger

__version__ = "0.1.0"

__all__ = ["Direction", "Pool", "PoolConfig", "PoolError", "TokenLedger", "__version__"]
