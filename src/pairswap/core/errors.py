"""Exception types for pool operations.

Every `PoolError` carries a `code` equal to its class name so that
``step()`` can report a discriminated reason without inspecting messages.
"""

from __future__ import annotations


class PoolError(Exception):
    """Base class for rejected pool operations."""

    code = "PoolError"

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls.code = cls.__name__


class Unauthorized(PoolError):
    """Raised when a non-owner calls an owner-gated operation."""


class InvalidAmount(PoolError):
    """Raised when an amount is zero or negative."""


class ProportionMismatch(PoolError):
    """Raised when a liquidity change does not match the reserve ratio exactly."""


class InsufficientLiquidity(PoolError):
    """Raised when the pool has an empty reserve."""


class InsufficientReserves(PoolError):
    """Raised when a withdrawal exceeds current reserves."""


class ZeroOutput(PoolError):
    """Raised when a swap would pay out nothing."""


class TransferFailed(PoolError):
    """Raised when an asset ledger refuses or errors on a transfer."""


class UnsupportedToken(PoolError):
    """Raised when a price is requested for an asset outside the pair."""


class PoolInvariantError(PoolError):
    """Raised when a post-state violates one or more pool invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")
