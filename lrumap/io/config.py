from __future__ import annotations

import os
from typing import Any, Dict

import yaml

from configs.validate import validate_config

from ..errors import ConfigError


# ---- small helpers --------------------------------------------------------

def _apply_env_overrides(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge env overrides into the raw config (no effect if env vars absent).
    Supported:
      - LRUMAP_CAPACITY=<int>   -> lru.capacity
    The value is validated together with the rest of the config.
    """
    cap = os.getenv("LRUMAP_CAPACITY")
    if cap is None or not cap.strip():
        return cfg
    out = dict(cfg)
    lru = dict(out.get("lru") or {})
    lru["capacity"] = cap.strip()
    out["lru"] = lru
    return out


# ---- loader ---------------------------------------------------------------

def load_config(path: str | None = None) -> Dict[str, Any]:
    """
    Load a YAML config and return it validated and normalized.
    Behavior:
      * No path, or a path that does not exist, yields the defaults.
      * Env override LRUMAP_CAPACITY is applied before validation.
      * YAML syntax errors and invalid values raise ConfigError.
    """
    data: Dict[str, Any] = {}
    if path and os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"{path}: cannot parse YAML: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"{path}: top-level YAML must be a mapping")
        data = loaded
    return validate_config(_apply_env_overrides(data))
