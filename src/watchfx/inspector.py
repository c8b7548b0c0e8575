"""Inspector — the session a host editor drives.

The host reports two things: the selection changed, and an edit cycle was
committed. After each cycle every inspected object is checked for changed
fields and its handlers are called.

Batching: edits made inside `with inspector.edit():` (nested or not) end in a
single cycle when the outermost scope exits.

Errors: a handler exception aborts the rest of that object's handlers, but
the remaining objects are still processed. The first failure is then
re-raised to the caller; any others are logged.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterable

from watchfx.dispatch import Dispatcher
from watchfx.registry import HandlerRegistry, default_registry
from watchfx.snapshot import SnapshotStore, ValueProvider

logger = logging.getLogger("watchfx.inspector")


def _unique(objects: Iterable[Any]) -> tuple:
    seen = set()
    result = []
    for obj in objects:
        if id(obj) not in seen:
            seen.add(id(obj))
            result.append(obj)
    return tuple(result)


class Inspector:
    """Change detection and handler dispatch over a set of inspected objects.

    Usage:
        inspector = Inspector()
        inspector.on_selection_changed([light])

        light.intensity = 2.0
        inspector.on_edit_cycle_completed()   # light.refresh() runs

        with inspector.edit():
            light.intensity = 3.0
            light.color = "red"
        # light.refresh() runs once, after both edits
    """

    def __init__(
        self,
        value_provider: ValueProvider | None = None,
        *,
        registry: HandlerRegistry | None = None,
        propagate_errors: bool = True,
    ) -> None:
        self._registry = registry if registry is not None else default_registry
        self._store = SnapshotStore(value_provider)
        self._dispatcher = Dispatcher(self._store, self._registry)
        self._propagate_errors = propagate_errors
        self._selection: tuple = ()
        self._edit_depth = 0
        self._dispatching = False
        self._pending: list[tuple | None] = []

    @property
    def selection(self) -> tuple:
        return self._selection

    @property
    def snapshots(self) -> SnapshotStore:
        return self._store

    def tracked_fields(self, obj: Any) -> tuple[str, ...]:
        return self._registry.tracked_fields(type(obj))

    # --- Inbound notifications ---

    def on_selection_changed(self, objects: Iterable[Any]) -> None:
        """Replace the inspected set. All baselines are recaptured; nothing fires."""
        self._store.clear()
        self._selection = _unique(objects)
        for obj in self._selection:
            self._dispatcher.baseline(obj)
        logger.info("Selection changed: %d object(s)", len(self._selection))

    def on_edit_cycle_completed(self, objects: Iterable[Any] | None = None) -> int:
        """Detect changes on objects (default: the selection) and call handlers.

        Returns the number of handler calls made. A call made from inside a
        handler is queued and runs after the current cycle.
        """
        targets = _unique(objects) if objects is not None else None
        if self._dispatching:
            self._pending.append(targets)
            return 0

        self._dispatching = True
        try:
            count = self._run_cycle(targets)
            while self._pending:
                count += self._run_cycle(self._pending.pop(0))
        finally:
            self._dispatching = False
            self._pending.clear()
        return count

    def invalidate(self, obj: Any) -> None:
        """Forget obj's baseline. Its next cycle is a first observation."""
        self._store.reset(obj)

    # --- Batching ---

    @contextmanager
    def edit(self):
        """Context manager: one edit cycle for everything done inside.

        Nested scopes are supported; the cycle runs when the outermost exits.
        """
        self._edit_depth += 1
        try:
            yield self
        finally:
            self._edit_depth -= 1
            if self._edit_depth == 0:
                self.on_edit_cycle_completed()

    # --- Internals ---

    def _run_cycle(self, targets: tuple | None) -> int:
        if targets is None:
            targets = self._selection

        count = 0
        failures: list[BaseException] = []
        for obj in targets:
            try:
                count += self._dispatcher.dispatch(obj)
            except Exception as exc:
                failures.append(exc)
                if self._propagate_errors and len(failures) == 1:
                    continue  # re-raised below
                logger.exception("Handler failed on %s", type(obj).__name__)

        if failures and self._propagate_errors:
            raise failures[0]
        return count

    def __repr__(self) -> str:
        return f"Inspector({len(self._selection)} selected, {len(self._store)} snapshot(s))"
