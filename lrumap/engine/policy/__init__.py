"""Policy registry for the LRU engine.

Four orthogonal kinds, each with a "none" variant that is the default:

    locking     none | exclusive
    timestamps  none | all
    hit_count   disabled | enabled
    events      none | overflow | all
"""
from __future__ import annotations

from typing import Any, Dict, Mapping

from ...errors import PolicyError
from .events import LogEventAll, LogEventNone, LogEventOverflow
from .hit_count import HitCountDisabled, HitCountEnabled
from .locking import LockExclusive, LockNone
from .timestamps import TimestampAll, TimestampNone

__all__ = [
    "POLICIES",
    "DEFAULT_POLICY_NAMES",
    "resolve_policy",
    "LockNone",
    "LockExclusive",
    "TimestampNone",
    "TimestampAll",
    "HitCountDisabled",
    "HitCountEnabled",
    "LogEventNone",
    "LogEventOverflow",
    "LogEventAll",
]

POLICIES: Dict[str, Dict[str, type]] = {
    "locking": {"none": LockNone, "exclusive": LockExclusive},
    "timestamps": {"none": TimestampNone, "all": TimestampAll},
    "hit_count": {"disabled": HitCountDisabled, "enabled": HitCountEnabled},
    "events": {"none": LogEventNone, "overflow": LogEventOverflow, "all": LogEventAll},
}

DEFAULT_POLICY_NAMES: Mapping[str, str] = {
    "locking": "none",
    "timestamps": "none",
    "hit_count": "disabled",
    "events": "none",
}


def resolve_policy(kind: str, name: str, **kwargs: Any) -> Any:
    """Instantiate the policy `name` of `kind`; kwargs go to its constructor.

    Raises PolicyError for an unknown kind or name.
    """
    variants = POLICIES.get(kind)
    if variants is None:
        raise PolicyError(f"unknown policy kind {kind!r}; expected one of {sorted(POLICIES)}")
    cls = variants.get(str(name).strip().lower())
    if cls is None:
        raise PolicyError(f"unknown {kind} policy {name!r}; expected one of {sorted(variants)}")
    return cls(**kwargs)
