from __future__ import annotations

from typing import Any, Tuple

__all__ = ["HitCountDisabled", "HitCountEnabled"]


class HitCountDisabled:
    name = "disabled"
    entry_fields: Tuple[str, ...] = ()

    def on_find_hit(self, entry: Any) -> None:
        return None

    @staticmethod
    def render(entry: Any) -> str:
        return ""

    def __repr__(self) -> str:
        return "HitCountDisabled()"


class HitCountEnabled:
    """Count successful finds per entry; an overwrite keeps the count."""

    name = "enabled"
    entry_fields: Tuple[str, ...] = ("hit_count",)

    def on_find_hit(self, entry: Any) -> None:
        entry.hit_count += 1

    @staticmethod
    def render(entry: Any) -> str:
        return f"| hit_count = {entry.hit_count}"

    def __repr__(self) -> str:
        return "HitCountEnabled()"
