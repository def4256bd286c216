"""Dep — the per-property registry of subscribed watchers.

Every reactive property owns exactly one Dep. Reading the property while a
watcher evaluates subscribes that watcher; writing it notifies them all.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tinybind._tracking import current_watcher, schedule_all

if TYPE_CHECKING:
    from tinybind.watcher import Watcher


class Dep:
    """Insertion-ordered set of watchers interested in one property."""

    __slots__ = ("_subscribers",)

    def __init__(self) -> None:
        self._subscribers: dict[Watcher, None] = {}

    @property
    def subscribers(self) -> tuple[Watcher, ...]:
        return tuple(self._subscribers)

    def add_subscriber(self, watcher: Watcher) -> None:
        """Subscribe a watcher. Subscribing twice is a no-op."""
        self._subscribers[watcher] = None

    def remove_subscriber(self, watcher: Watcher) -> None:
        self._subscribers.pop(watcher, None)

    def depend(self) -> None:
        """Subscribe the currently-evaluating watcher, if any."""
        watcher = current_watcher.get()
        if watcher is not None:
            self.add_subscriber(watcher)
            watcher._dependencies.add(self)

    def notify(self) -> None:
        """Schedule every subscriber for re-evaluation.

        Every subscriber runs even if one of them raises; the first error is
        re-raised afterwards.
        """
        # Snapshot: subscribers re-subscribe while they run.
        error = schedule_all(list(self._subscribers))
        if error is not None:
            raise error

    def __len__(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"Dep({len(self._subscribers)} subscribers)"
