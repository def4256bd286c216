"""Textual integration for tinybind. Opt-in — requires textual.

Binds Interpolated widgets (or any widget carrying a ``template``) instead
of the in-memory view tree. Textual coupling stays in this module; the core
never imports textual.
"""

import logging
import threading
from contextlib import contextmanager

from rich.text import Text
from textual.css.query import NoMatches
from textual.widgets import Static

from tinybind.compiler import parse_template
from tinybind.watcher import Watcher

logger = logging.getLogger("tinybind.textual")

# Module-owned pause state — keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


class Interpolated(Static):
    """A Static rendering a ``{{ }}`` template against reactive data."""

    def __init__(self, template: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.template = template


@contextmanager
def pause(app):
    """Suspend binding updates during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a state where widgets can be updated?"""
    return app.is_running and id(app) not in _paused_apps


def bind(app, data, selector="Screen"):
    """Bind every templated widget under app.query_one(selector) to data.

    Call from on_mount. Returns the watchers; tear them down on unmount.
    Updates are guarded like the rest of the adapter: skipped while unsafe,
    marshaled via call_from_thread off the main thread, NoMatches ignored.
    """
    root = app.query_one(selector)
    watchers = []
    try:
        _walk(app, root, data, watchers)
    except Exception:
        for watcher in watchers:
            watcher.teardown()
        raise
    logger.debug("Bound %d widgets under %r", len(watchers), selector)
    return watchers


def _walk(app, widget, data, watchers):
    for child in list(widget.children):
        if getattr(child, "template", None) is not None:
            watchers.append(bind_widget(app, child, data))
        else:
            _walk(app, child, data, watchers)


def bind_widget(app, widget, data):
    """Bind one widget's template. The widget must provide update(renderable).

    Rendered values are passed as rich Text, so they are never parsed as markup.
    """
    _main = threading.get_ident()

    def _guarded(value):
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, value)
        else:
            _safe(value)

    def _safe(value):
        try:
            widget.update(Text(str(value)))
        except NoMatches:
            pass

    return Watcher(parse_template(widget.template), data, _guarded)
