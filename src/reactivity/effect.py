"""effect() — run an observer and record what it reads.

The callback runs once, immediately, with itself installed as the active
observer. Every reactive read it performs subscribes it to that
(target, key) pair; a later write to any of them calls the same callback
again, directly.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from reactivity._tracking import active_effect

logger = logging.getLogger("reactivity.effect")

F = TypeVar("F", bound=Callable[[], object])


def effect(fn: F) -> F:
    """Run fn now, subscribing it to every reactive value it reads.

    The previously active observer is restored when fn returns or raises,
    so a nested effect() does not stop tracking for the rest of the outer
    observer. Exceptions from fn propagate unchanged.

    Returns fn, so effect also works as a decorator.

    Usage:
        state = reactive({"count": 0})
        log = []

        @effect
        def render():
            log.append(state["count"])
        # log == [0] — ran immediately

        state["count"] = 1
        # log == [0, 1] — re-ran because count changed
    """
    logger.debug("effect %s: first run", getattr(fn, "__name__", fn))
    token = active_effect.set(fn)
    try:
        fn()
    finally:
        active_effect.reset(token)
    return fn
