"""Batched writes.

Writes inside `with transaction()` or an @action defer every watcher run
until the outermost scope exits. A binding that reads several of the written
properties then re-renders once, with all of the new values.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Callable, Iterator, ParamSpec, TypeVar

from tinybind._tracking import begin_batch, end_batch

P = ParamSpec("P")
R = TypeVar("R")


@contextmanager
def transaction() -> Iterator[None]:
    """Batch the writes made inside the block. Nestable.

    Usage:
        with transaction():
            data.a = 1
            data.b = 2
        # "{{a}}-{{b}}" renders "1-2" once, here
    """
    begin_batch()
    try:
        yield
    finally:
        end_batch()


def action(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator: run fn inside a transaction.

    Usage:
        @action
        def rename(first, last):
            data.first = first
            data.last = last
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        with transaction():
            return fn(*args, **kwargs)

    return wrapper
