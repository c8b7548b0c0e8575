"""Data anchor — plain Python structures that hold process-lifetime state.

Handler discovery is done once per type and never invalidated, so its results
live here rather than on any session object. Snapshots are session-scoped and
live on the Inspector, not here.
"""

# Resolved handlers for the default registry
handler_cache: dict[type, tuple] = {}  # cls -> tuple[HandlerDescriptor, ...]

# Explicit registration table: annotations recorded without a decorator
registrations: dict[type, dict[str, list[tuple[str, ...]]]] = {}  # cls -> method -> [fields, ...]
