"""Textual integration for watchfx. Opt-in — requires textual.

Guard + NoMatches + thread-marshal are enforced here, not at callsites.
Textual coupling is isolated in this module; the core stays agnostic.
_pause_depth has a single owner (this module): an app's id is present
exactly while at least one pause() context for it is open.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

# id(app) -> number of open pause() scopes; never stored on the app itself.
_pause_depth: dict[int, int] = {}


@contextmanager
def pause(app):
    """Hold back edit cycles while the app rebuilds its inspector widgets.

    Scopes nest: cycles resume when the outermost pause() exits.
    """
    key = id(app)
    _pause_depth[key] = _pause_depth.get(key, 0) + 1
    try:
        yield
    finally:
        remaining = _pause_depth.pop(key) - 1
        if remaining:
            _pause_depth[key] = remaining


def is_safe(app) -> bool:
    """Can handlers run now? The app must be running and not paused."""
    return app.is_running and id(app) not in _pause_depth


def bind(app, inspector):
    """Return cycle(objects=None): on_edit_cycle_completed() that safely bridges to Textual.

    Skips the cycle while paused or not running; snapshots are left alone, so
    the changes are picked up by the next safe cycle. Calls from a background
    thread go through call_from_thread. NoMatches raised by handlers querying
    widgets is swallowed; other exceptions propagate.

    Like on_edit_cycle_completed(), cycle() returns the number of handler
    calls: 0 when skipped or when a handler hit NoMatches.

    Usage:
        cycle = stx.bind(app, inspector)

        def on_input_changed(self, event):
            self.target.name = event.value
            cycle()
    """
    _main = threading.get_ident()

    def cycle(objects=None):
        if not is_safe(app):
            return 0
        if threading.get_ident() != _main:
            return app.call_from_thread(_safe, objects)
        return _safe(objects)

    def _safe(objects):
        try:
            return inspector.on_edit_cycle_completed(objects)
        except NoMatches:
            return 0

    return cycle
