"""Dependency tracking engine — the heart of reactivity.

Uses a contextvar to hold the observer currently running inside effect().
Reads of reactive state call track(), which registers that observer under
the (target, key) pair being read. Writes call trigger(), which re-invokes
every observer registered under the pair, synchronously and in the order
they were registered.

Observers re-invoked by trigger() run with whatever observer was active
when trigger() was called (normally none), so their reads are not tracked
again: an observer's dependencies are the ones it read on its first run.
"""

from __future__ import annotations

import contextvars
import enum
import functools
import logging
import math
import types
from typing import Callable

from reactivity import _anchor

logger = logging.getLogger("reactivity.tracking")

Observer = Callable[[], object]

# The observer currently running inside effect().
# When set, every tracked read registers it as a subscriber.
active_effect: contextvars.ContextVar[Observer | None] = contextvars.ContextVar(
    "active_effect", default=None
)

# Values with a __dict__ that are still never wrapped.
_OPAQUE = (
    type,
    types.ModuleType,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    functools.partial,
    enum.Enum,
)


def has_shape(value: object) -> bool:
    """Is value structured data: a dict, a list or an instance with a __dict__?"""
    if isinstance(value, (dict, list)):
        return True
    if isinstance(value, _OPAQUE):
        return False
    return hasattr(value, "__dict__")


def track(target: object, key: object) -> None:
    """Register the active observer as a subscriber of (target, key)."""
    observer = active_effect.get()
    if observer is None:
        return
    deps = _anchor.deps_for(target)
    dep = deps.get(key)
    if dep is None:
        dep = deps[key] = {}
    dep[observer] = None


def trigger(target: object, key: object) -> None:
    """Re-invoke every subscriber of (target, key)."""
    deps = _anchor.lookup(target)
    if deps is None:
        return
    dep = deps.get(key)
    if not dep:
        return
    # Snapshot — subscribers may register new ones or trigger recursively.
    subscribers = list(dep)
    logger.debug(
        "trigger %s[%r]: %d subscriber(s)", type(target).__name__, key, len(subscribers)
    )
    for subscriber in subscribers:
        subscriber()


def release(target: object) -> bool:
    """Drop every registration held for target and the data nested in it.

    Entries for dicts and lists are not released automatically when the
    target is garbage collected, because they cannot be weakly referenced.
    Call this once such a target is no longer needed. Every dict, list and
    object reachable from target is released as well; a nested value that
    is about to be replaced has to be released on its own first, since it
    is no longer reachable afterwards. Accepts a reactive wrapper as well
    as the raw target. Returns whether anything was held.
    """
    from reactivity.reactive import to_raw

    released = False
    seen: set[int] = set()
    stack = [to_raw(target)]
    while stack:
        value = stack.pop()
        if id(value) in seen:
            continue
        seen.add(id(value))
        released = _anchor.drop(value) or released
        if isinstance(value, dict):
            children = value.values()
        elif isinstance(value, list):
            children = value
        else:
            children = vars(value).values()
        stack.extend(child for child in children if has_shape(child))
    return released


def get_active_effect() -> Observer | None:
    """The observer currently running inside effect(). Useful for testing."""
    return active_effect.get()


def has_changed(old: object, new: object) -> bool:
    """Strict inequality: identity for structured values, type and value otherwise.

    NaN never equals NaN, not even the same float object.
    """
    if old is new:
        return isinstance(new, float) and math.isnan(new)
    if has_shape(old) or has_shape(new) or type(old) is not type(new):
        return True
    try:
        return bool(old != new)
    except (TypeError, ValueError):
        # Element-wise comparisons (arrays) have no single truth value.
        return True
