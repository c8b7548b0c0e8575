"""Change detection — compare fresh values against an object's snapshot.

Detection is edge-triggered: every change found overwrites the baseline, so a
value that changes and later changes back is reported both times.
"""

from __future__ import annotations

from typing import Any, Mapping

from watchfx.snapshot import MISSING, SnapshotStore, capture


def values_equal(old: Any, new: Any) -> bool:
    """Identity first, then ==. A comparison that raises counts as unequal."""
    if old is new:
        return True
    try:
        return bool(old == new)
    except (TypeError, ValueError):
        # e.g. array-likes whose == is element-wise
        return False


def detect_changes(store: SnapshotStore, obj: Any, fresh_values: Mapping[str, Any]) -> set[str]:
    """Names whose value differs from the snapshot; the snapshot is updated.

    With no snapshot yet, fresh_values becomes the baseline and nothing is reported.
    """
    baseline = store.get(obj)
    if baseline is None:
        store.init_from(obj, fresh_values)
        return set()

    changed = set()
    for name, old in baseline.items():
        new = fresh_values.get(name, MISSING)
        if new is MISSING:
            continue
        if not values_equal(old, new):
            baseline[name] = capture(new)
            changed.add(name)
    return changed
