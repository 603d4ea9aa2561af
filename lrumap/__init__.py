"""lrumap: bounded LRU map with pluggable, pay-for-what-you-use policies.

Public import roots are `lrumap` and `lrumap.errors`. This module also resolves
`__version__` deterministically across installs.
"""
from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version
from typing import Any as _Any

from . import errors as errors  # re-export for star-import; noqa: F401
from .engine.lru_map import LruMap
from .engine.policy import (
    HitCountDisabled,
    HitCountEnabled,
    LockExclusive,
    LockNone,
    LogEventAll,
    LogEventNone,
    LogEventOverflow,
    TimestampAll,
    TimestampNone,
    resolve_policy,
)
from .engine.stats import LruMapStats
from .engine.util.clock import FixedStepClock, monotonic_usecs
from .engine.util.logmux import EventMux, use_mux
from .io.log import JsonlSink, logger_sink


def _version_from_resource() -> str | None:
    try:
        from importlib.resources import files

        p = files(__package__).joinpath("VERSION")
        return p.read_text(encoding="utf-8").strip()
    except (FileNotFoundError, ModuleNotFoundError, OSError):
        return None


def _version_from_metadata() -> str | None:
    try:
        return _pkg_version("lrumap")
    except PackageNotFoundError:
        return None


__version__ = _version_from_resource() or _version_from_metadata() or "0+unknown"


def __getattr__(name: str) -> _Any:  # PEP 562 lazy exports to avoid import-time cycles
    if name in ("validate_config", "CONFIG_VERSION"):
        # `configs` is a top-level package, not `lrumap.configs`
        from configs.validate import CONFIG_VERSION as _CONFIG_VERSION
        from configs.validate import validate_config as _validate_config

        _g = globals()
        _g.update({"validate_config": _validate_config, "CONFIG_VERSION": _CONFIG_VERSION})
        return _g[name]
    if name == "load_config":
        from .io.config import load_config as _load_config

        globals()["load_config"] = _load_config
        return _load_config
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


# Star-export surface (deterministic ordering).
__all__ = sorted(
    [
        "CONFIG_VERSION",
        "EventMux",
        "FixedStepClock",
        "HitCountDisabled",
        "HitCountEnabled",
        "JsonlSink",
        "LockExclusive",
        "LockNone",
        "LogEventAll",
        "LogEventNone",
        "LogEventOverflow",
        "LruMap",
        "LruMapStats",
        "TimestampAll",
        "TimestampNone",
        "__version__",
        "errors",
        "load_config",
        "logger_sink",
        "monotonic_usecs",
        "resolve_policy",
        "use_mux",
        "validate_config",
    ]
)
