#!/usr/bin/env python3
"""
Microbench for LruMap policy combinations (deterministic workload).

Usage:
  python3 scripts/bench_lru.py [--capacity N] [--ops N] [--keys N] [--seed S] [--json]

Every combination runs the same seeded mix of insert/find/erase calls; per-call
latencies are collected and summarized (p50/p90/p99/mean, in nanoseconds)
so the cost of each selected policy can be compared to the all-none baseline.
"""
from __future__ import annotations

import argparse
import json
import os
import sys
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

# Ensure the project root (parent of scripts/) is importable when run directly
try:
    from lrumap import (  # type: ignore
        EventMux,
        HitCountEnabled,
        LockExclusive,
        LogEventAll,
        LruMap,
        TimestampAll,
    )
except ModuleNotFoundError:
    HERE = os.path.abspath(os.path.dirname(__file__))
    ROOT = os.path.abspath(os.path.join(HERE, ".."))
    if ROOT not in sys.path:
        sys.path.insert(0, ROOT)
    from lrumap import (  # type: ignore
        EventMux,
        HitCountEnabled,
        LockExclusive,
        LogEventAll,
        LruMap,
        TimestampAll,
    )

# op codes in the workload array
OP_INSERT, OP_FIND, OP_ERASE = 0, 1, 2


COMBOS = ("none", "locking", "timestamps", "hit_count", "events", "all")


def _policies(name: str) -> Dict[str, Any]:
    """Fresh policy instances (and event buffers) for a single run."""
    return dict(_combos())[name]


def _combos() -> List[Tuple[str, Dict[str, Any]]]:
    return [
        ("none", {}),
        ("locking", {"locking": LockExclusive()}),
        ("timestamps", {"timestamps": TimestampAll()}),
        ("hit_count", {"hit_count": HitCountEnabled()}),
        # Buffer sink: measures the policy, not a logging backend.
        ("events", {"events": LogEventAll(sink=EventMux())}),
        (
            "all",
            {
                "locking": LockExclusive(),
                "timestamps": TimestampAll(),
                "hit_count": HitCountEnabled(),
                "events": LogEventAll(sink=EventMux()),
            },
        ),
    ]


def build_workload(ops: int, keys: int, seed: int) -> Tuple[np.ndarray, np.ndarray]:
    """Seeded (op_codes, keys) arrays: 30% insert, 60% find, 10% erase."""
    rng = np.random.default_rng(seed)
    codes = rng.choice(
        np.array([OP_INSERT, OP_FIND, OP_ERASE], dtype=np.int8), size=ops, p=[0.3, 0.6, 0.1]
    )
    ks = rng.integers(0, max(1, keys), size=ops, dtype=np.int64)
    return codes, ks


def run_combo(cache: LruMap, codes: np.ndarray, ks: np.ndarray) -> np.ndarray:
    """Run the workload once; return per-call latencies in ns."""
    lat = np.empty(codes.shape[0], dtype=np.int64)
    insert, find, erase = cache.insert, cache.find, cache.erase
    clock = time.perf_counter_ns
    for i, (op, k) in enumerate(zip(codes.tolist(), ks.tolist())):
        t0 = clock()
        if op == OP_INSERT:
            insert(k, k * 5)
        elif op == OP_FIND:
            find(k)
        else:
            erase(k)
        lat[i] = clock() - t0
    return lat


def summarize(lat: np.ndarray) -> Dict[str, float]:
    if lat.size == 0:
        return {"p50_ns": 0.0, "p90_ns": 0.0, "p99_ns": 0.0, "mean_ns": 0.0}
    p50, p90, p99 = np.percentile(lat, [50, 90, 99])
    return {
        "p50_ns": round(float(p50), 1),
        "p90_ns": round(float(p90), 1),
        "p99_ns": round(float(p99), 1),
        "mean_ns": round(float(lat.mean()), 1),
    }


def _stable_json(data: Dict[str, Any], pretty: bool = False) -> str:
    if pretty:
        return json.dumps(data, sort_keys=True, indent=2, ensure_ascii=True)
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        prog="bench_lru",
        description="Microbench for LruMap policy combinations (deterministic workload).",
    )
    ap.add_argument("--capacity", type=int, default=256, help="Cache capacity (default: 256)")
    ap.add_argument("--ops", type=int, default=20000, help="Calls per combination (default: 20000)")
    ap.add_argument("--keys", type=int, default=512, help="Distinct key range (default: 512)")
    ap.add_argument("--seed", type=int, default=1337, help="Workload seed (default: 1337)")
    ap.add_argument(
        "--warmup", type=int, default=1, help="Warmup runs before timing (default: 1)"
    )
    ap.add_argument("--json", action="store_true", help="Emit a single stable JSON line")
    args = ap.parse_args(argv)

    if args.capacity < 1 or args.ops < 0 or args.keys < 1:
        print("bench_lru: --capacity and --keys must be >= 1, --ops >= 0", file=sys.stderr)
        return 2

    codes, ks = build_workload(args.ops, args.keys, args.seed)

    results: Dict[str, Any] = {}
    for name in COMBOS:
        for _ in range(max(0, args.warmup)):
            run_combo(LruMap(args.capacity, **_policies(name)), codes, ks)
        cache = LruMap(args.capacity, **_policies(name))
        lat = run_combo(cache, codes, ks)
        row: Dict[str, Any] = summarize(lat)
        row["stats"] = cache.stats().as_dict()
        results[name] = row

    out: Dict[str, Any] = {
        "capacity": args.capacity,
        "ops": args.ops,
        "keys": args.keys,
        "seed": args.seed,
        "results": results,
    }

    if args.json:
        print(_stable_json(out, pretty=False))
    else:
        print(
            f"LruMap bench: capacity={out['capacity']} ops={out['ops']} "
            f"keys={out['keys']} seed={out['seed']}"
        )
        base = results["none"]["mean_ns"] or 1.0
        for name, row in results.items():
            print(
                f"{name:>10}: p50={row['p50_ns']}ns p90={row['p90_ns']}ns "
                f"p99={row['p99_ns']}ns mean={row['mean_ns']}ns "
                f"(x{row['mean_ns'] / base:.2f})"
            )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
