from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict

__all__ = ["LruMapStats"]


@dataclass
class LruMapStats:
    """Cumulative lifetime counters of an LruMap; they persist across clear()."""

    num_insert: int = 0    # calls to insert
    num_overflow: int = 0  # inserts that pushed out the LRU entry
    num_find: int = 0      # calls to find, hit or miss
    num_find_ok: int = 0   # calls to find that hit
    num_erase: int = 0     # calls to erase, present or not
    num_clear: int = 0     # calls to clear

    def as_dict(self) -> Dict[str, int]:
        return {k: int(v) for k, v in asdict(self).items()}

    def to_string(self) -> str:
        return ", ".join(f"{k} = {v}" for k, v in self.as_dict().items())

    __str__ = to_string
