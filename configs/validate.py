"""
Lightweight configuration validation and normalization for lrumap.

Public API:
    validate_config(cfg: dict) -> dict
    validate_config_verbose(cfg: dict) -> (dict, list[str])
    validate_config_api(cfg: dict) -> (ok, errors, dict | None)

- Raises ConfigError with clear messages (field paths + constraints) on invalid input.
- Returns a **new** normalized dict; the input is not mutated.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from lrumap.engine.policy import DEFAULT_POLICY_NAMES, POLICIES
from lrumap.errors import ConfigError

__all__ = ["CONFIG_VERSION", "DEFAULTS", "validate_config", "validate_config_verbose", "validate_config_api"]

CONFIG_VERSION = "v1"


# ------------------------------
# Utilities
# ------------------------------

def _ensure_dict(x: Any) -> Dict[str, Any]:
    if isinstance(x, dict):
        return dict(x)
    return {}


def _coerce_int(v: Any) -> Optional[int]:
    """Return int(v) for ints and integral strings; None when not an integer."""
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float) and v.is_integer():
        return int(v)
    if isinstance(v, str):
        try:
            return int(v.strip())
        except ValueError:
            return None
    return None


def _coerce_choice(v: Any) -> str:
    # YAML reads bare `on`/`off`/`none` variants into bools/None; map them back.
    if v is None:
        return "none"
    if v is True:
        return "true"
    if v is False:
        return "false"
    return str(v).strip().lower()


def _lev(a: str, b: str) -> int:
    """Tiny Levenshtein distance (edit distance) for did-you-mean suggestions."""
    la, lb = len(a), len(b)
    dp = list(range(lb + 1))
    for i, ca in enumerate(a, 1):
        prev = dp[0]
        dp[0] = i
        for j, cb in enumerate(b, 1):
            ins = dp[j] + 1
            dele = dp[j - 1] + 1
            sub = prev + (0 if ca == cb else 1)
            prev, dp[j] = dp[j], min(ins, dele, sub)
    return dp[-1]


def _suggest_key(bad: str, allowed: set[str]) -> str | None:
    """Return closest allowed key within distance ≤2, else None."""
    best_key, best_dist = None, 99
    for k in sorted(allowed):
        d = _lev(bad, k)
        if d < best_dist:
            best_key, best_dist = k, d
    return best_key if best_dist <= 2 else None


def _err(errors: List[str], path: str, msg: str) -> None:
    errors.append(f"{path} {msg}")


def _unknown_keys(errors: List[str], prefix: str, section: Dict[str, Any], allowed: set[str]) -> None:
    for k in section:
        if k in allowed:
            continue
        sug = _suggest_key(str(k), allowed)
        hint = f" (did you mean '{sug}')" if sug else ""
        path = f"{prefix}.{k}" if prefix else str(k)
        _err(errors, path, f"unknown key{hint}")


# ------------------------------
# Defaults
# ------------------------------

DEFAULTS: Dict[str, Any] = {
    "version": CONFIG_VERSION,
    "lru": {
        "capacity": 1024,
        "policies": dict(DEFAULT_POLICY_NAMES),
        "sink": "logger",             # logger | jsonl | buffer
        "log_file": "lru_events.jsonl",
    },
}

ALLOWED_TOP = {"version", "lru"}
ALLOWED_LRU = {"capacity", "policies", "sink", "log_file"}
# Policy names come from the engine registry; see lrumap.engine.policy.
ALLOWED_POLICIES = {kind: set(variants) for kind, variants in POLICIES.items()}
ALLOWED_SINKS = {"logger", "jsonl", "buffer"}


# ------------------------------
# Main validator
# ------------------------------

def _validate_config_normalize_impl(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate and normalize a configuration dictionary.

    Returns a NEW dict with defaults merged and fields coerced.
    Raises ConfigError listing every problem found (stable order).
    """
    if cfg is not None and not isinstance(cfg, dict):
        raise ConfigError(f"config must be a mapping (got {type(cfg).__name__})")
    cfg_in = _ensure_dict(cfg)
    errors: List[str] = []

    _unknown_keys(errors, "", cfg_in, ALLOWED_TOP)

    version = cfg_in.get("version", CONFIG_VERSION)
    if str(version) != CONFIG_VERSION:
        _err(errors, "version", f"must be '{CONFIG_VERSION}' (got {version!r})")

    raw_lru = cfg_in.get("lru", {})
    if raw_lru is None:
        raw_lru = {}
    if not isinstance(raw_lru, dict):
        _err(errors, "lru", "must be a mapping")
        raw_lru = {}
    _unknown_keys(errors, "lru", raw_lru, ALLOWED_LRU)

    d_lru = DEFAULTS["lru"]
    out_lru: Dict[str, Any] = {}

    # capacity
    cap_raw = raw_lru.get("capacity", d_lru["capacity"])
    cap = _coerce_int(cap_raw)
    if cap is None or cap < 1:
        _err(errors, "lru.capacity", f"must be an integer >= 1 (got {cap_raw!r})")
        cap = d_lru["capacity"]
    out_lru["capacity"] = cap

    # policies
    raw_pol = raw_lru.get("policies", {})
    if raw_pol is None:
        raw_pol = {}
    if not isinstance(raw_pol, dict):
        _err(errors, "lru.policies", "must be a mapping")
        raw_pol = {}
    _unknown_keys(errors, "lru.policies", raw_pol, set(ALLOWED_POLICIES))
    out_pol: Dict[str, str] = {}
    for kind, allowed in ALLOWED_POLICIES.items():
        default = d_lru["policies"][kind]
        name = _coerce_choice(raw_pol.get(kind, default))
        if name not in allowed:
            _err(errors, f"lru.policies.{kind}", f"must be one of {sorted(allowed)} (got {raw_pol.get(kind)!r})")
            name = default
        out_pol[kind] = name
    out_lru["policies"] = out_pol

    # sink
    sink = _coerce_choice(raw_lru.get("sink", d_lru["sink"]))
    if sink not in ALLOWED_SINKS:
        _err(errors, "lru.sink", f"must be one of {sorted(ALLOWED_SINKS)} (got {raw_lru.get('sink')!r})")
        sink = d_lru["sink"]
    out_lru["sink"] = sink

    log_file = raw_lru.get("log_file", d_lru["log_file"])
    if not isinstance(log_file, str) or not log_file.strip():
        _err(errors, "lru.log_file", "must be a non-empty string")
        log_file = d_lru["log_file"]
    out_lru["log_file"] = log_file.strip()

    if errors:
        raise ConfigError("\n".join(errors))

    return {"version": CONFIG_VERSION, "lru": out_lru}


def validate_config_verbose(cfg: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize configuration, returning (normalized_cfg, warnings).

    Warnings currently include:
    - A sink or log file configured while events logging is off (no effect).
    - A jsonl log file configured while the sink is not jsonl (no effect).
    """
    normalized = _validate_config_normalize_impl(cfg)

    warnings: List[str] = []
    raw_lru = _ensure_dict(_ensure_dict(cfg).get("lru"))
    lru = normalized["lru"]
    if lru["policies"]["events"] == "none":
        if "sink" in raw_lru or "log_file" in raw_lru:
            warnings.append("W[lru.sink]: sink configured while lru.policies.events=none; no events are emitted.")
    elif "log_file" in raw_lru and lru["sink"] != "jsonl":
        warnings.append(f"W[lru.log_file]: log_file is only used by the jsonl sink (sink={lru['sink']}).")
    return normalized, warnings


def validate_config_api(cfg: Dict[str, Any]):
    """Stable, test-friendly API.

    Returns a tuple: (ok: bool, errs: list[str], cfg_or_none).
    - On success: (True, [], normalized_cfg)
    - On validation error: (False, [messages...], None)
    Does not raise.
    """
    try:
        normalized = _validate_config_normalize_impl(cfg)
        return True, [], normalized
    except ConfigError as e:
        msg = str(e).strip()
        errs = msg.split("\n") if msg else ["invalid configuration"]
        return False, errs, None


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Return the normalized config dict; raises ConfigError on errors."""
    return _validate_config_normalize_impl(cfg)
