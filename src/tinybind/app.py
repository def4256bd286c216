"""ViewModel — the construction surface tying data and view together."""

from __future__ import annotations

import logging
from typing import Any

from tinybind.binder import compile_node
from tinybind.reactive import observe
from tinybind.watcher import Watcher

logger = logging.getLogger("tinybind.app")


class ViewModel:
    """Reactive data bound to a view subtree.

    ``data`` is made reactive and exposed as ``vm.data``. ``el`` is the view
    root, either a node or an ``"#id"`` looked up in ``document``. Without
    ``el`` the view model stays unmounted until mount() is called.

    Usage:
        page = Element("div", Element("p", "say: {{ message }}", id="app"))
        vm = ViewModel(data={"message": "hi"}, el="#app", document=page)
        vm.data.message = "bye"   # the <p> text is now "say: bye"
    """

    def __init__(self, data: Any = None, el: Any = None, *, document: Any = None) -> None:
        self.data = observe(data if data is not None else {})
        self.el: Any = None
        self.watchers: list[Watcher] = []
        if el is not None:
            self.mount(el, document=document)

    @property
    def mounted(self) -> bool:
        return self.el is not None

    def mount(self, el: Any, document: Any = None) -> ViewModel:
        """Bind the view subtree located by el."""
        if self.el is not None:
            raise RuntimeError(f"{self!r} is already mounted")
        root = _locate(el, document)
        self.watchers = compile_node(root, self.data)
        self.el = root
        logger.debug("Mounted on %r with %d bindings", root, len(self.watchers))
        return self

    def teardown(self) -> None:
        """Tear down every binding. The view keeps its last rendered text."""
        for watcher in self.watchers:
            watcher.teardown()
        logger.debug("Tore down %d bindings", len(self.watchers))
        self.watchers = []
        self.el = None

    def __repr__(self) -> str:
        state = f"mounted on {self.el!r}" if self.el is not None else "unmounted"
        return f"ViewModel({state})"


def _locate(el: Any, document: Any) -> Any:
    if not isinstance(el, str):
        return el
    if document is None:
        raise LookupError(f"cannot resolve {el!r} without a document")
    node = document.find(el.removeprefix("#"))
    if node is None:
        raise LookupError(f"no element matches {el!r}")
    return node
