"""Dependency tracking engine — the heart of tinybind.

Uses a contextvar to record which watcher is currently evaluating. Every
reactive property read while it is set subscribes that watcher to the
property's Dep, building the dependency graph automatically.

Batching: writes inside an @action or `with transaction()` accumulate
notified watchers and run each of them once at the end.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from tinybind.watcher import Watcher

# The currently-evaluating watcher.
# When set, any reactive property read registers the watcher as a subscriber.
current_watcher: contextvars.ContextVar[Watcher | None] = contextvars.ContextVar(
    "current_watcher", default=None
)

# Batch depth counter. When > 0, watcher runs are deferred.
_batch_depth: int = 0

# Watchers notified during a batch, awaiting flush. Dict keys keep insertion order.
_pending: dict[Watcher, None] = {}


class ReentrantEvaluationError(RuntimeError):
    """A watcher started evaluating while another one was still collecting dependencies."""


@contextmanager
def evaluating(watcher: Watcher) -> Iterator[None]:
    """Install watcher as the current one for the duration of the block.

    Evaluations never nest: entering while another watcher is current raises
    ReentrantEvaluationError. The previous pointer is restored on every exit.
    """
    running = current_watcher.get()
    if running is not None:
        raise ReentrantEvaluationError(
            f"cannot evaluate {watcher!r} while {running!r} is evaluating"
        )
    token = current_watcher.set(watcher)
    try:
        yield
    finally:
        current_watcher.reset(token)


def begin_batch() -> None:
    """Enter a batching scope. Nested batches are supported."""
    global _batch_depth
    _batch_depth += 1


def end_batch() -> None:
    """Exit a batching scope. When the outermost scope exits, flush pending watchers."""
    global _batch_depth
    _batch_depth -= 1
    if _batch_depth == 0:
        _flush_pending()


def schedule(watcher: Watcher) -> None:
    """Schedule a watcher for re-evaluation.

    If inside a batch, defers. Otherwise, runs immediately.
    """
    if _batch_depth > 0:
        _pending[watcher] = None
    else:
        watcher._run()


def _flush_pending() -> None:
    """Run all pending watchers. Handles watchers scheduled during flush.

    A failing watcher does not stop the others; the first error is raised
    once every pending watcher has run.
    """
    error: BaseException | None = None
    while _pending:
        # Snapshot and clear — watchers may write and schedule new ones during run.
        batch = list(_pending)
        _pending.clear()
        error = schedule_all(batch, error)
    if error is not None:
        raise error


def schedule_all(watchers: list[Watcher], error: BaseException | None = None) -> BaseException | None:
    """Schedule every watcher, even after one fails. Returns the first error, or the one passed in."""
    for watcher in watchers:
        try:
            schedule(watcher)
        except Exception as exc:
            if error is None:
                error = exc
    return error


def get_pending_count() -> int:
    """Number of watchers waiting to run. Useful for testing."""
    return len(_pending)
