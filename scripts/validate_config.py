#!/usr/bin/env python3
"""
Validate an lrumap config file.

Usage:
  python3 scripts/validate_config.py [--strict] [path/to/config.yaml]
  # If omitted, defaults to configs/config.yaml
  # Use '-' to read from STDIN

Exit codes:
  0 = OK
  1 = Validation errors (or warnings when --strict)
  2 = Load/parse errors or bad usage
"""
from __future__ import annotations

import argparse
import os
import sys
from typing import Any, Dict, List, Optional

import yaml

# Ensure the project root (parent of scripts/) is importable when run directly
try:
    from configs.validate import validate_config_verbose
except ModuleNotFoundError:
    HERE = os.path.abspath(os.path.dirname(__file__))
    ROOT = os.path.abspath(os.path.join(HERE, ".."))
    if ROOT not in sys.path:
        sys.path.insert(0, ROOT)
    from configs.validate import validate_config_verbose

from lrumap.errors import ConfigError, format_error


def _eprint(*args: Any) -> None:
    print(*args, file=sys.stderr)


USAGE = (
    "usage: python3 scripts/validate_config.py [--strict] [config.yaml | -]\n"
    "       (defaults to configs/config.yaml)"
)


def _load_config(path: str) -> Dict[str, Any]:
    """Load YAML; '-' reads from stdin."""
    if path == "-":
        text = sys.stdin.read()
    else:
        if not os.path.exists(path):
            raise FileNotFoundError(path)
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    if not text.strip():
        return {}
    data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("top-level YAML must be a mapping")
    return data


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        prog="validate_config.py",
        description="Validate lrumap configuration",
    )
    ap.add_argument("path", nargs="?", default=os.path.join("configs", "config.yaml"),
                    help="Path to config file (YAML). Use '-' for STDIN.")
    ap.add_argument("--strict", action="store_true",
                    help="Treat warnings as errors (non-zero exit if warnings present).")
    args = ap.parse_args(argv)

    path = args.path

    try:
        cfg = _load_config(path)
    except FileNotFoundError:
        _eprint(f"error: config file not found: {path}")
        _eprint(USAGE)
        return 2
    except (yaml.YAMLError, ConfigError, OSError) as ex:
        _eprint(f"error: failed to load config: {ex}")
        return 2

    try:
        normalized, warnings = validate_config_verbose(cfg)
    except ConfigError as ce:
        print("CONFIG INVALID\n" + str(ce))
        _eprint(format_error(ConfigError("validation failed")))
        return 1

    if args.strict and warnings:
        print("CONFIG WARNINGS (treated as errors due to --strict)")
        for w in sorted(warnings):
            print(w)
        return 1

    lru = normalized["lru"]
    pol = lru["policies"]
    print("OK")
    print(
        "lru: capacity={cap} sink={sink} log_file={lf}".format(
            cap=lru["capacity"], sink=lru["sink"], lf=lru["log_file"]
        )
    )
    print(
        "lru.policies: locking={lk} timestamps={ts} hit_count={hc} events={ev}".format(
            lk=pol["locking"], ts=pol["timestamps"], hc=pol["hit_count"], ev=pol["events"]
        )
    )
    for w in sorted(warnings):
        print(w)
    return 0


if __name__ == "__main__":
    sys.exit(main())
