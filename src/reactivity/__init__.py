"""reactivity: transparent dependency tracking for plain Python data."""

from importlib.metadata import version as _version

__version__ = _version("reactivity")

from reactivity._tracking import track, trigger, release, get_active_effect, has_changed
from reactivity.reactive import (
    ReactiveDict,
    ReactiveList,
    ReactiveObject,
    reactive,
    is_reactive,
    to_raw,
    set_proxy_cache,
)
from reactivity.effect import effect
from reactivity.ref import Ref, PropertyRef, ref, is_ref, to_refs
from reactivity.computed import computed
# textual NOT auto-imported — opt-in only

__all__ = [
    "reactive",
    "is_reactive",
    "to_raw",
    "set_proxy_cache",
    "ReactiveDict",
    "ReactiveList",
    "ReactiveObject",
    "effect",
    "track",
    "trigger",
    "release",
    "get_active_effect",
    "has_changed",
    "Ref",
    "PropertyRef",
    "ref",
    "is_ref",
    "to_refs",
    "computed",
]
