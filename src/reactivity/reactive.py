"""Reactive wrappers — plain data that tracks its readers.

reactive(target) returns a wrapper with the same shape as target: a
ReactiveDict for dicts, a ReactiveList for lists, and a ReactiveObject for
other instances carrying a __dict__. Reads through the wrapper call
track(); writes and deletes that change something call trigger(). Nested
structured values are wrapped on the way out, so tracking reaches as deep
as the caller reads.

Wrappers are not cached: every reactive() call and every read of a nested
value builds a fresh wrapper around the same target. Dependencies are
keyed on the target, so this is invisible to tracking, but two reads of
the same nested value are not ``is``-identical. set_proxy_cache(True)
makes live wrappers reusable.

Values written through a wrapper are unwrapped first; targets only ever
hold raw data.
"""

from __future__ import annotations

import operator
import weakref
from collections.abc import Iterator, Mapping, MutableMapping, MutableSequence
from typing import Any

from reactivity._tracking import has_changed, has_shape, track, trigger

# Tracking key for a list's length.
LENGTH = "length"

_MISSING = object()

# ─── Wrapper cache ───────────────────────────────────────────────────────────
_proxy_cache_enabled = False
_proxy_cache: weakref.WeakValueDictionary[int, _ReactiveProxy] = weakref.WeakValueDictionary()


def set_proxy_cache(enabled: bool) -> None:
    """Reuse the live wrapper of a target instead of building a new one.

    Off by default. While on, reactive(target) and nested reads return the
    same wrapper for as long as some caller still holds it. Turning it off
    empties the cache.
    """
    global _proxy_cache_enabled
    _proxy_cache_enabled = enabled
    if not enabled:
        _proxy_cache.clear()


def reactive(target: Any) -> Any:
    """Wrap target so reads are tracked and writes notify.

    Scalars (numbers, strings, None, tuples, sets, slotted objects) and
    values that are already reactive are returned unchanged.

    Usage:
        state = reactive({"user": {"name": "Ada"}})
        log = []
        effect(lambda: log.append(state["user"]["name"]))
        state["user"]["name"] = "Grace"
        # log == ["Ada", "Grace"]
    """
    if not _is_structured(target):
        return target
    if _proxy_cache_enabled:
        proxy = _proxy_cache.get(id(target))
        if proxy is not None and proxy._raw_target is target:
            return proxy
    if isinstance(target, dict):
        proxy = ReactiveDict(target)
    elif isinstance(target, list):
        proxy = ReactiveList(target)
    else:
        proxy = ReactiveObject(target)
    if _proxy_cache_enabled:
        _proxy_cache[id(target)] = proxy
    return proxy


def is_reactive(value: object) -> bool:
    return isinstance(value, _ReactiveProxy)


def to_raw(value: Any) -> Any:
    """Return the target behind a reactive wrapper, or value itself."""
    if isinstance(value, _ReactiveProxy):
        return value._raw_target
    return value


def _is_structured(value: object) -> bool:
    return not isinstance(value, _ReactiveProxy) and has_shape(value)


class _ReactiveProxy:
    """Common base: holds the wrapped target."""

    __slots__ = ("_raw_target", "__weakref__")

    def __init__(self, target: Any) -> None:
        object.__setattr__(self, "_raw_target", target)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._raw_target!r})"


class ReactiveDict(_ReactiveProxy, MutableMapping):
    """Reactive view of a dict. Each key is tracked separately.

    Iteration, len() and keys() read the target without tracking. get(),
    items(), values(), copy(), | and ``in`` go through __getitem__ and
    track per key.
    """

    __slots__ = ()

    def __getitem__(self, key: Any) -> Any:
        target = self._raw_target
        track(target, key)
        return reactive(target[key])

    def __setitem__(self, key: Any, value: Any) -> None:
        target = self._raw_target
        value = to_raw(value)
        old = target.get(key, _MISSING)
        if has_changed(old, value):
            target[key] = value
            trigger(target, key)

    def __delitem__(self, key: Any) -> None:
        target = self._raw_target
        had_key = key in target
        del target[key]
        if had_key:
            trigger(target, key)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._raw_target)

    def __len__(self) -> int:
        return len(self._raw_target)

    def copy(self) -> dict:
        """Shallow copy of the target as a plain dict. Tracks every key."""
        return {key: to_raw(self[key]) for key in self}

    def __or__(self, other: object) -> dict:
        if not isinstance(other, Mapping):
            return NotImplemented
        result = self.copy()
        result.update(to_raw(other))
        return result

    def __ror__(self, other: object) -> dict:
        if not isinstance(other, Mapping):
            return NotImplemented
        result = dict(to_raw(other))
        result.update(self.copy())
        return result

    def __ior__(self, other: Any) -> ReactiveDict:
        self.update(to_raw(other))
        return self


class ReactiveList(_ReactiveProxy, MutableSequence):
    """Reactive view of a list.

    Indices are tracked individually (negative indices are normalized) and
    len() tracks LENGTH. Any structural change notifies every index whose
    element changed, then LENGTH if the length changed. append, extend,
    pop, remove, reverse and += are the MutableSequence mixins and go
    through the same paths; sort and *= snapshot the target the same way.
    copy, + and * return plain lists.
    """

    __slots__ = ()

    def _index(self, index: Any) -> int:
        index = operator.index(index)
        if index < 0:
            index += len(self._raw_target)
        return index

    def __getitem__(self, index: Any) -> Any:
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        target = self._raw_target
        index = self._index(index)
        track(target, index)
        if index < 0:
            raise IndexError("list index out of range")
        return reactive(target[index])

    def __setitem__(self, index: Any, value: Any) -> None:
        target = self._raw_target
        if isinstance(index, slice):
            before = target[:]
            target[index] = [to_raw(v) for v in value]
            self._trigger_changes(before)
            return
        index = self._index(index)
        if index < 0:
            raise IndexError("list assignment index out of range")
        value = to_raw(value)
        if has_changed(target[index], value):
            target[index] = value
            trigger(target, index)

    def __delitem__(self, index: Any) -> None:
        target = self._raw_target
        before = target[:]
        del target[index]
        self._trigger_changes(before)

    def __len__(self) -> int:
        target = self._raw_target
        track(target, LENGTH)
        return len(target)

    def __iter__(self) -> Iterator[Any]:
        for i in range(len(self)):
            yield self[i]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (list, ReactiveList)):
            return list(self) == list(other)
        return NotImplemented

    def copy(self) -> list:
        """Shallow copy of the target as a plain list. Tracks every index."""
        return [to_raw(item) for item in self]

    def __add__(self, other: object) -> list:
        if not isinstance(other, (list, ReactiveList)):
            return NotImplemented
        return self.copy() + to_raw(other)

    def __radd__(self, other: object) -> list:
        if not isinstance(other, list):
            return NotImplemented
        return other + self.copy()

    def __mul__(self, count: int) -> list:
        return self.copy() * count

    __rmul__ = __mul__

    def __imul__(self, count: int) -> ReactiveList:
        target = self._raw_target
        before = target[:]
        target *= count
        self._trigger_changes(before)
        return self

    def sort(self, *, key: Any = None, reverse: bool = False) -> None:
        target = self._raw_target
        before = target[:]
        target.sort(key=key, reverse=reverse)
        self._trigger_changes(before)

    def insert(self, index: int, value: Any) -> None:
        target = self._raw_target
        before = target[:]
        target.insert(index, to_raw(value))
        self._trigger_changes(before)

    def _trigger_changes(self, before: list) -> None:
        target = self._raw_target
        after = target[:]
        for i in range(max(len(before), len(after))):
            old = before[i] if i < len(before) else _MISSING
            new = after[i] if i < len(after) else _MISSING
            if has_changed(old, new):
                trigger(target, i)
        if len(before) != len(after):
            trigger(target, LENGTH)


class ReactiveObject(_ReactiveProxy):
    """Reactive view of an instance. Each attribute name is tracked separately.

    Methods fetched through the wrapper are bound to the raw target, so
    mutations they make do not notify.
    """

    __slots__ = ()

    def __getattr__(self, name: str) -> Any:
        target = object.__getattribute__(self, "_raw_target")
        track(target, name)
        return reactive(getattr(target, name))

    def __setattr__(self, name: str, value: Any) -> None:
        target = self._raw_target
        value = to_raw(value)
        old = getattr(target, name, _MISSING)
        if has_changed(old, value):
            setattr(target, name, value)
            trigger(target, name)

    def __delattr__(self, name: str) -> None:
        target = self._raw_target
        had_key = name in vars(target)
        delattr(target, name)
        if had_key:
            trigger(target, name)

    def __dir__(self) -> list[str]:
        return dir(self._raw_target)
