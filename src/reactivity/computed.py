"""Computed values — refs derived from other reactive state.

computed(getter) runs getter once inside effect() and stores the result in
a Ref. The closure that performs that assignment is the subscriber
registered on everything getter read, so a later write to any of those
re-runs it and updates the Ref, which in turn notifies the Ref's own
subscribers.

Dependencies are discovered on the first run only. A value read behind a
branch that was not taken then is never tracked, and changing it later
does not update the result.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from reactivity.effect import effect
from reactivity.ref import Ref, ref

T = TypeVar("T")


def computed(getter: Callable[[], T]) -> Ref[T]:
    """Create a Ref kept equal to getter().

    The result is an ordinary Ref: assigning to its value is allowed, and
    holds until one of getter's dependencies changes.

    Usage:
        a, b = ref(1), ref(2)
        total = computed(lambda: a.value + b.value)
        total.value  # 3
        a.value = 5
        total.value  # 7
    """
    result = ref()

    def derive() -> None:
        result.value = getter()

    effect(derive)
    return result
