#!/usr/bin/env python3

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from pairswap.core.pool import PoolCommand, step
from pairswap.integration.genesis import load_genesis


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Seed a pool from a genesis file and run one swap offline.")
    ap.add_argument("--genesis", default=str(ROOT / "configs" / "genesis.example.yaml"))
    ap.add_argument("--trader", default="bob")
    ap.add_argument("--amount-in", type=int, default=100)
    ap.add_argument("--direction", choices=["AtoB", "BtoA"], default="AtoB")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    genesis = load_genesis(args.genesis)
    pool = genesis.pool
    ledger_in, ledger_out = (
        (genesis.asset_a, genesis.asset_b) if args.direction == "AtoB" else (genesis.asset_b, genesis.asset_a)
    )
    print(f"[offline-demo] custody={pool.custody}")
    print(f"[offline-demo] pool reserves after genesis: reserve_a={pool.reserve_a} reserve_b={pool.reserve_b}")

    before_in = ledger_in.balance_of(args.trader)
    before_out = ledger_out.balance_of(args.trader)
    print(f"[offline-demo] balances before swap: in={before_in} out={before_out}")

    tag = "swap_a_for_b" if args.direction == "AtoB" else "swap_b_for_a"
    res = step(pool, PoolCommand(tag=tag, caller=args.trader, args={"amount_in": args.amount_in}))
    if not res.ok:
        print(f"[offline-demo] FAIL (swap): {res.code}: {res.error}")
        return 1

    print(f"[offline-demo] pool reserves after swap:   reserve_a={pool.reserve_a} reserve_b={pool.reserve_b}")
    after_in = ledger_in.balance_of(args.trader)
    after_out = ledger_out.balance_of(args.trader)
    print(f"[offline-demo] balances after swap:  in={after_in} out={after_out}")
    print(f"[offline-demo] deltas: d_in={after_in - before_in} d_out={after_out - before_out}")
    print(f"[offline-demo] price_a={pool.get_price(genesis.asset_a)} price_b={pool.get_price(genesis.asset_b)}")
    print("[offline-demo] events: " + json.dumps([e.as_dict() for e in pool.events]))
    print("[offline-demo] OK: swap executed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
