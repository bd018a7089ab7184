"""Refs — single reactive values.

A Ref boxes one value behind a ``value`` property. Reads track and writes
trigger under the key "value" scoped to the Ref instance, so two Refs
never share subscribers even when they hold equal values. Structured
values are stored wrapped, so reads through ``ref.value`` are tracked on
the underlying target as well.

All state lives on the instance; Refs are weakly referenceable so the
dependency store forgets them once they are collected.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from reactivity._tracking import has_changed, track, trigger
from reactivity.reactive import reactive, to_raw

logger = logging.getLogger("reactivity.ref")

T = TypeVar("T")


def _by_item(source: Any) -> bool:
    """Is source a container addressed by item rather than by attribute?"""
    return isinstance(source, (Mapping, Sequence)) and not isinstance(source, (str, bytes))


class _RefBase:
    __slots__ = ()


class Ref(_RefBase, Generic[T]):
    """A single reactive value."""

    __slots__ = ("_raw", "_value", "__weakref__")

    def __init__(self, raw: T | None = None) -> None:
        raw = to_raw(raw)
        self._raw = raw
        self._value = reactive(raw)

    @property
    def value(self) -> T:
        """Read the value. Inside an effect, registers the dependency."""
        track(self, "value")
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        new_value = to_raw(new_value)
        if has_changed(self._raw, new_value):
            self._raw = new_value
            self._value = reactive(new_value)
            trigger(self, "value")

    def __repr__(self) -> str:
        return f"Ref({self._raw!r})"


class PropertyRef(_RefBase):
    """A Ref view onto one key of a reactive container.

    Holds no dependency state of its own: reads and writes go through the
    container, so they are tracked on the container's target.
    """

    __slots__ = ("_source", "_key", "_by_attribute")

    def __init__(self, source: Any, key: Any) -> None:
        self._source = source
        self._key = key
        self._by_attribute = not _by_item(source)

    @property
    def value(self) -> Any:
        if self._by_attribute:
            return getattr(self._source, self._key)
        return self._source[self._key]

    @value.setter
    def value(self, new_value: Any) -> None:
        if self._by_attribute:
            setattr(self._source, self._key, new_value)
        else:
            self._source[self._key] = new_value

    def __repr__(self) -> str:
        return f"PropertyRef({self._key!r})"


def is_ref(value: object) -> bool:
    return isinstance(value, _RefBase)


def ref(raw: Any = None) -> Ref | None:
    """Create a Ref holding raw.

    Passing something that is already a ref returns None rather than the
    ref itself.

    Usage:
        count = ref(0)
        log = []
        effect(lambda: log.append(count.value))
        count.value = 1
        # log == [0, 1]
    """
    if is_ref(raw):
        logger.debug("ref() called with a ref, returning None")
        return None
    return Ref(raw)


def to_refs(proxy: Any) -> list[PropertyRef] | dict[Any, PropertyRef]:
    """Split a reactive container into one PropertyRef per key.

    Returns a list of the same length for sequences and a dict otherwise
    (keyed by attribute name for objects). The refs and the container stay
    in sync both ways.

    Usage:
        state = reactive({"x": 1, "y": 2})
        refs = to_refs(state)
        refs["x"].value = 10
        # state["x"] == 10
    """
    raw = to_raw(proxy)
    if not _by_item(proxy):
        return {name: PropertyRef(proxy, name) for name in vars(raw)}
    if isinstance(proxy, Mapping):
        return {key: PropertyRef(proxy, key) for key in raw}
    return [PropertyRef(proxy, i) for i in range(len(raw))]
