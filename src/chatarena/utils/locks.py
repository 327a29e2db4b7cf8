"""Per-key mutual exclusion for battle resolution.

Battles for unrelated accounts and combatants run in parallel; two requests
that touch the same account or combatant are serialized. Multi-key holds take
their locks in sorted key order so two battles over the same pair of
combatants can never deadlock.

A key's lock only lives while some thread holds or waits for it, so the
registry stays as small as the set of battles in flight.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable, Iterator
from contextlib import ExitStack, contextmanager


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.users = 0


class KeyedLocks:
    """Registry handing out one re-entrant lock per key."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[Hashable, _Entry] = {}

    @contextmanager
    def hold(self, *keys: Hashable) -> Iterator[None]:
        """Hold the locks for every distinct key until the block exits."""
        ordered = sorted(set(keys), key=repr)
        with ExitStack() as stack:
            for key in ordered:
                stack.enter_context(self._hold_one(key))
            yield

    @contextmanager
    def _hold_one(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


def account_key(account_id: str) -> tuple[str, str]:
    return ("account", account_id)


def combatant_key(combatant_id: int) -> tuple[str, int]:
    return ("combatant", combatant_id)
