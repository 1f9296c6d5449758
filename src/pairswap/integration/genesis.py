"""
Genesis loading: build ledgers and a pool from a YAML document.

Document shape::

    assets:
      - {id: "0xaaaa", symbol: TKA}
      - {id: "0xbbbb", symbol: TKB}
    owner: alice
    custody: pool-custody          # optional, derived when omitted
    balances:
      - {holder: alice, asset: "0xaaaa", amount: 1000000}
    allowances:
      - {holder: alice, spender: pool, asset: "0xaaaa", amount: 1000000}
    liquidity:                     # optional first deposit by the owner
      amount_a: 1000
      amount_b: 2000

The spender/holder alias ``pool`` resolves to the pool's custody account.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..core.errors import PoolError
from ..core.pool import Pool, PoolConfig
from ..state.ledger import TokenLedger

logger = logging.getLogger(__name__)

POOL_ALIAS = "pool"


class GenesisError(ValueError):
    """Raised when a genesis document is malformed."""


@dataclass(frozen=True)
class Genesis:
    pool: Pool
    asset_a: TokenLedger
    asset_b: TokenLedger


def _require_mapping(obj: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(obj, Mapping):
        raise GenesisError(f"{what} must be a mapping")
    return obj


def _require_str(obj: Mapping[str, Any], key: str, what: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str) or not value:
        raise GenesisError(f"{what}.{key} must be a non-empty string")
    return value


def _require_nonneg_int(obj: Mapping[str, Any], key: str, what: str) -> int:
    value = obj.get(key)
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise GenesisError(f"{what}.{key} must be a non-negative int")
    return value


def _require_positive_int(obj: Mapping[str, Any], key: str, what: str) -> int:
    value = obj.get(key)
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise GenesisError(f"{what}.{key} must be a positive int")
    return value


def build_genesis(doc: Any) -> Genesis:
    """Build ledgers and a pool from an already-parsed genesis mapping."""
    doc = _require_mapping(doc, "genesis")

    assets = doc.get("assets")
    if not isinstance(assets, list) or len(assets) != 2:
        raise GenesisError("genesis.assets must list exactly two assets")
    ledgers: list[TokenLedger] = []
    for i, raw in enumerate(assets):
        entry = _require_mapping(raw, f"assets[{i}]")
        asset_id = _require_str(entry, "id", f"assets[{i}]")
        symbol = entry.get("symbol") or ""
        if not isinstance(symbol, str):
            raise GenesisError(f"assets[{i}].symbol must be a string")
        ledgers.append(TokenLedger(asset_id, symbol))
    asset_a, asset_b = ledgers
    by_id = {ledger.asset_id: ledger for ledger in ledgers}

    owner = _require_str(doc, "owner", "genesis")
    custody = doc.get("custody")
    if custody is not None and (not isinstance(custody, str) or not custody):
        raise GenesisError("genesis.custody must be a non-empty string")
    try:
        pool = Pool(PoolConfig(owner=owner, asset_a=asset_a, asset_b=asset_b, custody=custody))
    except ValueError as exc:
        raise GenesisError(str(exc)) from exc

    def resolve(name: str) -> str:
        return pool.custody if name == POOL_ALIAS else name

    def ledger_for(entry: Mapping[str, Any], what: str) -> TokenLedger:
        asset_id = _require_str(entry, "asset", what)
        if asset_id not in by_id:
            raise GenesisError(f"{what}.asset {asset_id!r} is not a genesis asset")
        return by_id[asset_id]

    for i, raw in enumerate(doc.get("balances") or []):
        what = f"balances[{i}]"
        entry = _require_mapping(raw, what)
        ledger_for(entry, what).mint(
            resolve(_require_str(entry, "holder", what)),
            _require_nonneg_int(entry, "amount", what),
        )

    for i, raw in enumerate(doc.get("allowances") or []):
        what = f"allowances[{i}]"
        entry = _require_mapping(raw, what)
        ledger_for(entry, what).approve(
            resolve(_require_str(entry, "holder", what)),
            resolve(_require_str(entry, "spender", what)),
            _require_nonneg_int(entry, "amount", what),
        )

    liquidity = doc.get("liquidity")
    if liquidity is not None:
        liquidity = _require_mapping(liquidity, "liquidity")
        amount_a = _require_positive_int(liquidity, "amount_a", "liquidity")
        amount_b = _require_positive_int(liquidity, "amount_b", "liquidity")
        try:
            pool.add_liquidity(owner, amount_a, amount_b)
        except PoolError as exc:
            raise GenesisError(f"liquidity seed rejected: {exc.code}: {exc}") from exc

    logger.info("genesis pool %r with custody %s", pool, pool.custody)
    return Genesis(pool=pool, asset_a=asset_a, asset_b=asset_b)


def load_genesis(path: str | Path) -> Genesis:
    """Read a YAML genesis file and build the pool it describes."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise GenesisError(f"invalid YAML in {path}: {exc}") from exc
    return build_genesis(doc)
