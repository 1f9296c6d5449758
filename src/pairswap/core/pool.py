"""
Two-asset constant-product pool.

The pool mirrors its custody balances in two reserve counters and mutates
them only through four operations:
- add_liquidity / remove_liquidity (owner only, exact reserve ratio),
- swap_a_for_b / swap_b_for_a (anyone, floor-rounded x*y=k pricing, no fee).

Each state-changing call runs inside `ledger_transaction()`: on any failure
both ledgers are restored and the reserves are left untouched. Reserves are
the sole source of truth for pricing; the pool never reconciles them against
ledger balances (see `custody_drift()`).
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Any, Callable, Mapping, Optional

from ..state.balances import Amount, AssetId, PubKey, require_amount
from ..state.ledger import AssetLedger
from .atomic import ledger_transaction, pull, push
from .cpmm import get_amount_out, is_proportional, spot_price, swap_exact_in
from .errors import (
    InsufficientLiquidity,
    InsufficientReserves,
    InvalidAmount,
    PoolError,
    PoolInvariantError,
    ProportionMismatch,
    Unauthorized,
    UnsupportedToken,
    ZeroOutput,
)
from .events import Event, PoolEvent
from .invariants import check_all

logger = logging.getLogger(__name__)

EventListener = Callable[[PoolEvent], None]


@unique
class Direction(Enum):
    A_TO_B = "AtoB"
    B_TO_A = "BtoA"


def compute_custody_id(asset_a: AssetId, asset_b: AssetId, owner: PubKey) -> PubKey:
    """
    Deterministic custody identity for a pool:
        custody = H("PairSwapPool" || asset_a || asset_b || owner)
    """
    data = (
        b"PairSwapPool"
        + asset_a.encode("utf-8")
        + asset_b.encode("utf-8")
        + owner.encode("utf-8")
    )
    return "0x" + hashlib.sha256(data).hexdigest()


@dataclass(frozen=True)
class PoolConfig:
    """Construction-time pool configuration. Never changes after deployment."""

    owner: PubKey
    asset_a: AssetLedger
    asset_b: AssetLedger
    # Account holding the pool's tokens on both ledgers; derived when omitted.
    custody: Optional[PubKey] = None

    def __post_init__(self) -> None:
        if not isinstance(self.owner, str) or not self.owner:
            raise ValueError("owner must be a non-empty string")
        if self.asset_a is self.asset_b or self.asset_a.asset_id == self.asset_b.asset_id:
            raise ValueError(f"pool assets must differ: {self.asset_a.asset_id}")
        if self.custody is None:
            object.__setattr__(
                self,
                "custody",
                compute_custody_id(self.asset_a.asset_id, self.asset_b.asset_id, self.owner),
            )
        elif not isinstance(self.custody, str) or not self.custody:
            raise ValueError("custody must be a non-empty string")
        if self.custody == self.owner:
            raise ValueError("custody account must differ from owner")


@dataclass(frozen=True)
class PoolState:
    reserve_a: Amount = 0
    reserve_b: Amount = 0

    @property
    def k(self) -> Amount:
        return self.reserve_a * self.reserve_b

    @property
    def is_seeded(self) -> bool:
        return self.reserve_a > 0 and self.reserve_b > 0


class Pool:
    """Single-pair, single-provider constant-product pool."""

    def __init__(self, config: PoolConfig) -> None:
        self._config = config
        self._state = PoolState()
        self._events: list[PoolEvent] = []
        self._listeners: list[EventListener] = []

    # -- read surface --------------------------------------------------------

    @property
    def config(self) -> PoolConfig:
        return self._config

    @property
    def owner(self) -> PubKey:
        return self._config.owner

    @property
    def custody(self) -> PubKey:
        return self._config.custody  # type: ignore[return-value]

    @property
    def asset_a(self) -> AssetLedger:
        return self._config.asset_a

    @property
    def asset_b(self) -> AssetLedger:
        return self._config.asset_b

    @property
    def state(self) -> PoolState:
        return self._state

    @property
    def reserve_a(self) -> Amount:
        return self._state.reserve_a

    @property
    def reserve_b(self) -> Amount:
        return self._state.reserve_b

    @property
    def events(self) -> tuple[PoolEvent, ...]:
        """Every event emitted since construction, oldest first.

        This is an unbounded in-process session log; long-running hosts should
        consume events through `subscribe()` instead.
        """
        return tuple(self._events)

    def subscribe(self, listener: EventListener) -> None:
        """Register a callback invoked with each event after its operation commits."""
        self._listeners.append(listener)

    # -- liquidity -----------------------------------------------------------

    def add_liquidity(self, caller: PubKey, amount_a: Amount, amount_b: Amount) -> PoolEvent:
        """
        Deposit both assets from the owner into custody.

        The first deposit into an empty pool accepts any positive pair and
        fixes the initial price. Later deposits must match the reserve ratio
        exactly.

        Raises:
            Unauthorized, InvalidAmount, ProportionMismatch, TransferFailed
        """
        self._require_owner(caller, "add_liquidity")
        _require_positive(amount_a=amount_a, amount_b=amount_b)

        pre = self._state
        first_deposit = pre.reserve_a == 0 and pre.reserve_b == 0
        if not first_deposit and not is_proportional(pre.reserve_a, pre.reserve_b, amount_a, amount_b):
            raise ProportionMismatch(
                f"deposit ({amount_a}, {amount_b}) does not match reserves ({pre.reserve_a}, {pre.reserve_b})"
            )

        with ledger_transaction(self.asset_a, self.asset_b):
            pull(self.asset_a, spender=self.custody, holder=caller, recipient=self.custody, amount=amount_a)
            pull(self.asset_b, spender=self.custody, holder=caller, recipient=self.custody, amount=amount_b)
            post = PoolState(pre.reserve_a + amount_a, pre.reserve_b + amount_b)
            self._commit("add_liquidity", pre, post, (amount_a, amount_b))

        logger.info("liquidity added by %s: (%d, %d) -> reserves (%d, %d)",
                    caller, amount_a, amount_b, post.reserve_a, post.reserve_b)
        return self._emit(PoolEvent(Event.LIQUIDITY_ADDED, caller, amount_a, amount_b))

    def remove_liquidity(self, caller: PubKey, amount_a: Amount, amount_b: Amount) -> PoolEvent:
        """
        Withdraw both assets from custody to the owner, in the reserve ratio.

        Raises:
            Unauthorized, InvalidAmount, InsufficientReserves,
            ProportionMismatch, TransferFailed
        """
        self._require_owner(caller, "remove_liquidity")
        _require_positive(amount_a=amount_a, amount_b=amount_b)

        pre = self._state
        if amount_a > pre.reserve_a or amount_b > pre.reserve_b:
            raise InsufficientReserves(
                f"withdrawal ({amount_a}, {amount_b}) exceeds reserves ({pre.reserve_a}, {pre.reserve_b})"
            )
        if not is_proportional(pre.reserve_a, pre.reserve_b, amount_a, amount_b):
            raise ProportionMismatch(
                f"withdrawal ({amount_a}, {amount_b}) does not match reserves ({pre.reserve_a}, {pre.reserve_b})"
            )

        with ledger_transaction(self.asset_a, self.asset_b):
            push(self.asset_a, sender=self.custody, recipient=caller, amount=amount_a)
            push(self.asset_b, sender=self.custody, recipient=caller, amount=amount_b)
            post = PoolState(pre.reserve_a - amount_a, pre.reserve_b - amount_b)
            self._commit("remove_liquidity", pre, post, (amount_a, amount_b))

        logger.info("liquidity removed by %s: (%d, %d) -> reserves (%d, %d)",
                    caller, amount_a, amount_b, post.reserve_a, post.reserve_b)
        return self._emit(PoolEvent(Event.LIQUIDITY_REMOVED, caller, amount_a, amount_b))

    # -- swaps ---------------------------------------------------------------

    def swap_a_for_b(self, caller: PubKey, amount_in: Amount) -> PoolEvent:
        """Sell `amount_in` of asset A for asset B. See `swap()`."""
        return self.swap(caller, amount_in, Direction.A_TO_B)

    def swap_b_for_a(self, caller: PubKey, amount_in: Amount) -> PoolEvent:
        """Sell `amount_in` of asset B for asset A. See `swap()`."""
        return self.swap(caller, amount_in, Direction.B_TO_A)

    def swap(self, caller: PubKey, amount_in: Amount, direction: Direction) -> PoolEvent:
        """
        Exact-in swap against the pool.

            amount_out = floor(reserve_out * amount_in / (reserve_in + amount_in))

        The input is pulled before the output is priced; a zero output or a
        failed payout rolls the pulled input back.

        Returns:
            The emitted swap event (amount0 = amount in, amount1 = amount out)

        Raises:
            InvalidAmount, InsufficientLiquidity, ZeroOutput, TransferFailed
        """
        direction = Direction(direction)
        _require_positive(amount_in=amount_in)
        pre = self._state
        if not pre.is_seeded:
            raise InsufficientLiquidity(f"pool is not seeded: ({pre.reserve_a}, {pre.reserve_b})")

        if direction is Direction.A_TO_B:
            ledger_in, ledger_out = self.asset_a, self.asset_b
            reserve_in, reserve_out = pre.reserve_a, pre.reserve_b
            op, event = "swap_a_for_b", Event.SWAP_A_FOR_B
        else:
            ledger_in, ledger_out = self.asset_b, self.asset_a
            reserve_in, reserve_out = pre.reserve_b, pre.reserve_a
            op, event = "swap_b_for_a", Event.SWAP_B_FOR_A

        with ledger_transaction(ledger_in, ledger_out):
            pull(ledger_in, spender=self.custody, holder=caller, recipient=self.custody, amount=amount_in)
            amount_out, (new_in, new_out) = swap_exact_in(reserve_in, reserve_out, amount_in)
            if amount_out == 0:
                raise ZeroOutput(f"{op}: input {amount_in} against reserves ({reserve_in}, {reserve_out}) yields 0")
            push(ledger_out, sender=self.custody, recipient=caller, amount=amount_out)

            if direction is Direction.A_TO_B:
                post = PoolState(new_in, new_out)
            else:
                post = PoolState(new_out, new_in)
            self._commit(op, pre, post, (amount_in, amount_out))

        logger.info("%s by %s: in=%d out=%d -> reserves (%d, %d)",
                    op, caller, amount_in, amount_out, post.reserve_a, post.reserve_b)
        return self._emit(PoolEvent(event, caller, amount_in, amount_out))

    def quote(self, amount_in: Amount, direction: Direction) -> Amount:
        """Read-only preview of `swap()` output. Applies the same guards."""
        direction = Direction(direction)
        _require_positive(amount_in=amount_in)
        pre = self._state
        if not pre.is_seeded:
            raise InsufficientLiquidity(f"pool is not seeded: ({pre.reserve_a}, {pre.reserve_b})")
        if direction is Direction.A_TO_B:
            amount_out = get_amount_out(pre.reserve_a, pre.reserve_b, amount_in)
        else:
            amount_out = get_amount_out(pre.reserve_b, pre.reserve_a, amount_in)
        if amount_out == 0:
            raise ZeroOutput(f"input {amount_in} yields 0 output")
        return amount_out

    # -- pricing -------------------------------------------------------------

    def get_price(self, token: AssetLedger | AssetId) -> Amount:
        """
        Price of one unit of `token` in units of the other asset, scaled by 10**18.

        `token` may be one of the pool's ledgers or its asset id.

        Raises:
            InsufficientLiquidity: If either reserve is zero
            UnsupportedToken: If token is not one of the pair
        """
        pre = self._state
        if not pre.is_seeded:
            raise InsufficientLiquidity(f"pool is not seeded: ({pre.reserve_a}, {pre.reserve_b})")
        if self._matches(token, self.asset_a):
            return spot_price(pre.reserve_a, pre.reserve_b)
        if self._matches(token, self.asset_b):
            return spot_price(pre.reserve_b, pre.reserve_a)
        raise UnsupportedToken(f"token {getattr(token, 'asset_id', token)!r} is not part of this pool")

    @staticmethod
    def _matches(token: Any, ledger: AssetLedger) -> bool:
        if token is ledger:
            return True
        return isinstance(token, str) and token == ledger.asset_id

    # -- diagnostics ---------------------------------------------------------

    def custody_drift(self) -> tuple[int, int]:
        """
        Difference between custody ledger balances and mirrored reserves.

        Non-zero drift means tokens reached custody outside the pool's
        operations. The pool keeps pricing on its reserves regardless.
        """
        drift_a = self.asset_a.balance_of(self.custody) - self._state.reserve_a
        drift_b = self.asset_b.balance_of(self.custody) - self._state.reserve_b
        if drift_a or drift_b:
            logger.warning("custody drift detected for %s: (%d, %d)", self.custody, drift_a, drift_b)
        return drift_a, drift_b

    # -- internals -----------------------------------------------------------

    def _require_owner(self, caller: PubKey, op: str) -> None:
        if caller != self._config.owner:
            raise Unauthorized(f"{op} is restricted to the pool owner")

    def _commit(self, op: str, pre: PoolState, post: PoolState, amounts: tuple[int, int]) -> None:
        violations = check_all(pre, post, op, amounts)
        if violations:
            raise PoolInvariantError(violations)
        self._state = post

    def _emit(self, event: PoolEvent) -> PoolEvent:
        # Runs after commit; listener failures are logged, never raised.
        self._events.append(event)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("listener %r failed on %s", listener, event.event.value)
        return event

    def __repr__(self) -> str:
        return (
            f"Pool({self.asset_a.asset_id}/{self.asset_b.asset_id}, "
            f"reserves=({self._state.reserve_a}, {self._state.reserve_b}))"
        )


def _require_positive(**amounts: Amount) -> None:
    for name, value in amounts.items():
        require_amount(name, value)
        if value <= 0:
            raise InvalidAmount(f"{name} must be positive: {value}")


# ---------------------------------------------------------------------------
# Command dispatch (result-type entry point)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PoolCommand:
    tag: str
    caller: PubKey = ""
    args: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PoolStepResult:
    ok: bool
    state: Optional[PoolState] = None
    effects: Optional[Mapping[str, Any]] = None
    error: Optional[str] = None
    code: Optional[str] = None


def _cmd_add_liquidity(pool: Pool, cmd: PoolCommand) -> Mapping[str, Any]:
    event = pool.add_liquidity(cmd.caller, cmd.args.get("amount_a"), cmd.args.get("amount_b"))
    return {"event": event}


def _cmd_remove_liquidity(pool: Pool, cmd: PoolCommand) -> Mapping[str, Any]:
    event = pool.remove_liquidity(cmd.caller, cmd.args.get("amount_a"), cmd.args.get("amount_b"))
    return {"event": event}


def _cmd_swap_a_for_b(pool: Pool, cmd: PoolCommand) -> Mapping[str, Any]:
    event = pool.swap_a_for_b(cmd.caller, cmd.args.get("amount_in"))
    return {"event": event, "amount_out": event.amount1}


def _cmd_swap_b_for_a(pool: Pool, cmd: PoolCommand) -> Mapping[str, Any]:
    event = pool.swap_b_for_a(cmd.caller, cmd.args.get("amount_in"))
    return {"event": event, "amount_out": event.amount1}


def _cmd_get_price(pool: Pool, cmd: PoolCommand) -> Mapping[str, Any]:
    return {"price": pool.get_price(cmd.args.get("token"))}


def _cmd_quote(pool: Pool, cmd: PoolCommand) -> Mapping[str, Any]:
    return {"amount_out": pool.quote(cmd.args.get("amount_in"), cmd.args.get("direction"))}


_DISPATCH: dict[str, Callable[[Pool, PoolCommand], Mapping[str, Any]]] = {
    "add_liquidity": _cmd_add_liquidity,
    "remove_liquidity": _cmd_remove_liquidity,
    "swap_a_for_b": _cmd_swap_a_for_b,
    "swap_b_for_a": _cmd_swap_b_for_a,
    "get_price": _cmd_get_price,
    "quote": _cmd_quote,
}


def step(pool: Pool, cmd: PoolCommand) -> PoolStepResult:
    """
    Execute one command against `pool` and report the outcome as a value.

    Rejections never raise; they come back with `ok=False` and a `code`
    naming the error class.
    """
    handler = _DISPATCH.get(cmd.tag)
    if handler is None:
        return PoolStepResult(ok=False, error=f"unknown command: {cmd.tag}", code="UnknownCommand")
    try:
        effects = handler(pool, cmd)
    except PoolError as exc:
        logger.debug("%s rejected: %s (%s)", cmd.tag, exc.code, exc)
        return PoolStepResult(ok=False, error=str(exc), code=exc.code)
    except (TypeError, ValueError) as exc:
        logger.debug("%s rejected: %s", cmd.tag, exc)
        return PoolStepResult(ok=False, error=str(exc), code=type(exc).__name__)
    return PoolStepResult(ok=True, state=pool.state, effects=effects)
