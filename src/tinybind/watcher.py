"""Watchers — live bindings that re-render when what they read changes.

A Watcher owns one evaluation function over a data context. Evaluating it
installs the watcher as the current one, so every reactive property read
during the evaluation subscribes it. When any of those properties is
written, the watcher re-evaluates and calls its callback if the value
changed.

Subscriptions are rebuilt on every evaluation: a watcher only stays
subscribed to what it read last time.
"""

from __future__ import annotations

import functools
from typing import Any, Callable

from tinybind._tracking import evaluating
from tinybind.compiler import compile_evaluator
from tinybind.dep import Dep
from tinybind.reactive import same_value

_UNSET = object()


class Watcher:
    """One binding: an expression, its data context and a change callback.

    ``expression`` is either expression text (see compiler.parse_template)
    or a callable receiving the context. The watcher evaluates once on
    construction and calls the callback with the initial value.

    Usage:
        data = observe({"a": 1, "b": 2})
        w = Watcher("a + b", data, print)   # prints 3
        data.a = 10                         # prints 12
        w.teardown()
    """

    def __init__(
        self,
        expression: str | Callable[[Any], Any],
        context: Any = None,
        callback: Callable[[Any], None] | None = None,
    ) -> None:
        if callable(expression):
            self._getter = functools.partial(expression, context)
            self.expression = getattr(expression, "__name__", repr(expression))
        else:
            self._getter = compile_evaluator(expression, context)
            self.expression = expression
        self.context = context
        self.callback = callback
        self._value: Any = _UNSET
        self._dependencies: set[Dep] = set()
        self._active = True
        try:
            self.update()
        except BaseException:
            # Drop whatever the failed first evaluation subscribed to.
            self.teardown()
            raise

    @property
    def value(self) -> Any:
        """The value computed by the last evaluation."""
        return None if self._value is _UNSET else self._value

    @property
    def dependencies(self) -> frozenset[Dep]:
        return frozenset(self._dependencies)

    @property
    def active(self) -> bool:
        return self._active

    def evaluate(self) -> Any:
        """Run the getter with this watcher installed, collecting dependencies."""
        with evaluating(self):
            self._unsubscribe()
            return self._getter()

    def update(self) -> None:
        """Re-evaluate; call the callback if the value changed."""
        if not self._active:
            return
        new_value = self.evaluate()
        if same_value(new_value, self._value):
            return
        self._value = new_value
        if self.callback is not None:
            self.callback(new_value)

    def _run(self) -> None:
        """Called by the scheduler when a dependency changed."""
        self.update()

    def teardown(self) -> None:
        """Stop this watcher. Disconnects from all dependencies."""
        self._active = False
        self._unsubscribe()

    def _unsubscribe(self) -> None:
        for dep in self._dependencies:
            dep.remove_subscriber(self)
        self._dependencies.clear()

    def __repr__(self) -> str:
        state = "active" if self._active else "torn down"
        return f"Watcher({self.expression!r}, {state})"
