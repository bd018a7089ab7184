"""Data anchor — plain Python structures that hold all dependency state.

target_map is keyed by id(target) rather than by the target itself: dicts
and lists are neither hashable nor weakly referenceable, so a
WeakKeyDictionary cannot hold them.

Targets that support weak references get a finalizer that drops their
entry when they are collected. The rest are pinned in ``pinned`` so their
id cannot be recycled by another object while the entry exists; those
entries live until release() is called.
"""

from __future__ import annotations

import weakref

# id(target) -> key -> ordered subscriber set (dict with None values)
target_map: dict[int, dict[object, dict]] = {}

# id(target) -> target, for targets that cannot be weakly referenced
pinned: dict[int, object] = {}


def lookup(target: object) -> dict[object, dict] | None:
    return target_map.get(id(target))


def deps_for(target: object) -> dict[object, dict]:
    """Return the key registry for target, creating it on first use."""
    tid = id(target)
    deps = target_map.get(tid)
    if deps is None:
        deps = target_map[tid] = {}
        try:
            weakref.finalize(target, target_map.pop, tid, None)
        except TypeError:
            pinned[tid] = target
    return deps


def drop(target: object) -> bool:
    tid = id(target)
    pinned.pop(tid, None)
    return target_map.pop(tid, None) is not None


def reset() -> None:
    """Forget every registration. Used between tests."""
    target_map.clear()
    pinned.clear()
