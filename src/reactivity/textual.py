"""Textual integration for reactivity. Opt-in — requires textual.

Guard + NoMatches + thread-marshal are enforced here, not at callsites.
Textual coupling is isolated in this module; the core stays agnostic.
_pause_depth has a single owner (this module): an app id maps to how many
pause() blocks are currently open for it, and is absent at depth zero.
"""

import logging
import threading
from contextlib import contextmanager, suppress

from textual.css.query import NoMatches

from reactivity.effect import effect

logger = logging.getLogger("reactivity.textual")

# id(app) -> number of open pause() blocks; several apps can coexist.
_pause_depth: dict[int, int] = {}


@contextmanager
def pause(app):
    """Suspend bridged re-renders during widget replacement.

    Blocks nest: re-renders resume when the outermost one exits.
    """
    key = id(app)
    _pause_depth[key] = _pause_depth.get(key, 0) + 1
    try:
        yield
    finally:
        depth = _pause_depth.pop(key) - 1
        if depth:
            _pause_depth[key] = depth


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _pause_depth


def render_effect(app, fn):
    """effect() that safely bridges re-renders to Textual widgets.

    The first run always happens, immediately, so fn's dependencies are
    recorded. Later re-renders are skipped while the app is paused or not
    running, are marshaled via call_from_thread when a write happens on
    another thread, and ignore NoMatches from widget queries.

    Returns the subscriber that was registered.
    """
    _main = threading.get_ident()
    first_run = True

    def _guarded():
        nonlocal first_run
        if first_run:
            first_run = False
            _safe()
            return
        if not is_safe(app):
            logger.debug("skipping re-render of %s: app not safe", fn)
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe)
        else:
            _safe()

    def _safe():
        # Widgets may be mid-replacement.
        with suppress(NoMatches):
            fn()

    return effect(_guarded)
