"""View binder — walks a view tree and binds every text leaf.

Any tree works as long as its nodes expose either ``children`` (recursed
into) or a settable ``text_content`` (bound). Each text leaf gets one
Watcher whose callback writes the rendered text back into the node.

Binding fails fast: the first template that does not evaluate raises
EvaluationError to the caller, leaves its node untouched and tears down the
bindings already created by the same walk.
"""

from __future__ import annotations

import logging
from typing import Any

from tinybind.compiler import parse_template
from tinybind.watcher import Watcher

logger = logging.getLogger("tinybind.binder")


def compile_node(el: Any, data: Any) -> list[Watcher]:
    """Bind every text leaf under el against data. Returns the watchers in tree order."""
    watchers: list[Watcher] = []
    try:
        _walk(el, data, watchers)
    except Exception:
        for watcher in watchers:
            watcher.teardown()
        raise
    logger.debug("Compiled %r: %d bindings", el, len(watchers))
    return watchers


def _walk(el: Any, data: Any, watchers: list[Watcher]) -> None:
    for node in list(el.children):
        if getattr(node, "children", None) is not None:
            _walk(node, data, watchers)
        elif hasattr(node, "text_content"):
            watchers.append(compile_text(node, data))


def compile_text(node: Any, data: Any) -> Watcher:
    """Bind one text leaf. Its current text is the template."""
    template = node.text_content
    expression = parse_template(template)

    def render(value: Any) -> None:
        node.text_content = str(value)

    try:
        watcher = Watcher(expression, data, render)
    except Exception:
        logger.debug("Failed to bind %r", template, exc_info=True)
        raise
    logger.debug("Bound %r as %s", template, expression)
    return watcher
