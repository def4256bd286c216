"""Template compiler — turns ``{{ }}`` interpolation text into evaluators.

parse_template() rewrites a template into one Python expression: literal
text becomes string literals, each marker becomes a formatted value, and the
parts are joined with ``+``. compile_evaluator() compiles that expression
once and returns a zero-argument function evaluating it against a data
context, where the context's keys are plain names.

Usage:
    expression = parse_template("say: {{ message }}")
    # "'say: ' + __render__(( message ))"
    render = compile_evaluator(expression, observe({"message": "hi"}))
    render()  # "say: hi"
"""

from __future__ import annotations

import builtins
import re
from collections.abc import Mapping
from typing import Any, Callable, Iterator

from tinybind._tracking import ReentrantEvaluationError
from tinybind.reactive import ReactiveRecord

# Non-nested, non-greedy, single line. The group keeps markers in re.split output.
_MARKER = re.compile(r"(\{\{.+?\}\})")

# Formats each marker value. Reserved: never resolved from the data context.
_RENDER = "__render__"

# The only builtins an expression can reach.
_SAFE_BUILTINS = {
    name: getattr(builtins, name)
    for name in (
        "abs", "all", "any", "bool", "dict", "float", "format", "int", "len",
        "list", "max", "min", "repr", "round", "sorted", "str", "sum", "tuple",
    )
}


class TemplateError(Exception):
    """Base class for template compilation and evaluation failures."""


class EvaluationError(TemplateError):
    """An interpolation expression failed to evaluate."""

    def __init__(self, expression: str, cause: BaseException) -> None:
        self.expression = expression
        self.cause = cause
        super().__init__(f"{type(cause).__name__} in {expression!r}: {cause}")


class TemplateSyntaxError(EvaluationError):
    """An interpolation expression is not valid Python.

    ``offset`` is the 1-based column in the compiled expression text, or in
    the template text for a blank marker.
    """

    def __init__(self, expression: str, cause: SyntaxError) -> None:
        self.offset = cause.offset
        super().__init__(expression, cause)


class Scope(Mapping):
    """Read-only name lookup table over a data context.

    Records and mappings resolve names as keys, other objects as attributes.
    Reads go through the context, so reactive properties track.
    """

    __slots__ = ("_context",)

    def __init__(self, context: Any) -> None:
        self._context = context

    def __getitem__(self, name: str) -> Any:
        if name == _RENDER:
            raise KeyError(name)
        context = self._context
        if isinstance(context, (ReactiveRecord, Mapping)):
            return context[name]
        try:
            return getattr(context, name)
        except AttributeError:
            raise KeyError(name) from None

    def __iter__(self) -> Iterator[str]:
        if isinstance(self._context, (ReactiveRecord, Mapping)):
            return iter(self._context)
        return iter(())

    def __len__(self) -> int:
        return sum(1 for _ in self)


def has_markers(text: str) -> bool:
    return _MARKER.search(text) is not None


def parse_template(text: str) -> str:
    """Rewrite template text into a single Python expression.

    A template without markers becomes one string literal. A blank marker
    such as ``{{ }}`` raises TemplateSyntaxError.
    """
    parts = []
    position = 0
    for index, fragment in enumerate(_MARKER.split(text)):
        if index % 2:
            inner = fragment[2:-2]
            if not inner.strip():
                error = SyntaxError("empty interpolation", ("<template>", 1, position + 1, text))
                raise TemplateSyntaxError(text, error)
            parts.append(f"{_RENDER}(({inner}))")
        elif fragment:
            parts.append(repr(fragment))
        position += len(fragment)
    return " + ".join(parts) or "''"


def compile_evaluator(expression: str, context: Any) -> Callable[[], Any]:
    """Compile expression and bind it to context.

    Raises TemplateSyntaxError immediately for invalid expressions. The
    returned function raises EvaluationError when evaluation fails.
    """
    try:
        code = compile(expression, "<template>", "eval")
    except SyntaxError as exc:
        raise TemplateSyntaxError(expression, exc) from exc

    namespace = {"__builtins__": _SAFE_BUILTINS, _RENDER: format}
    scope = Scope(context)

    def evaluate() -> Any:
        try:
            return eval(code, namespace, scope)
        except (ReentrantEvaluationError, TemplateError):
            raise
        except Exception as exc:
            raise EvaluationError(expression, exc) from exc

    evaluate.__name__ = f"evaluate({expression})"
    return evaluate
