"""Keyed diff between the previously rendered scene and the next one."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from radarcard.core.radar_scene import ScenePrimitive


@dataclass(frozen=True)
class SceneDiff:
    enter: tuple[str, ...] = ()
    update: tuple[str, ...] = ()
    exit: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.enter or self.exit)


def reconcile(previous: Mapping[str, object], nxt: Iterable[ScenePrimitive]) -> SceneDiff:
    """Split keys into enter (new), update (kept) and exit (gone).

    Enter and update keep the order of `nxt`; exit keeps the order of `previous`.
    """

    next_keys: list[str] = []
    seen: set[str] = set()
    for primitive in nxt:
        if primitive.key in seen:
            raise ValueError(f"duplicate primitive key: {primitive.key}")
        seen.add(primitive.key)
        next_keys.append(primitive.key)

    enter = tuple(k for k in next_keys if k not in previous)
    update = tuple(k for k in next_keys if k in previous)
    exit_ = tuple(k for k in previous if k not in seen)
    return SceneDiff(enter=enter, update=update, exit=exit_)
