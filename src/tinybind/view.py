"""A minimal in-memory view tree.

The binder only needs nodes that either have ``children`` to recurse into
or a settable ``text_content``. Element and Text are the smallest tree
satisfying that, for hosts without a toolkit of their own and for tests.
"""

from __future__ import annotations

from typing import Iterator


class Text:
    """A text leaf."""

    __slots__ = ("text_content",)

    def __init__(self, text: str = "") -> None:
        self.text_content = text

    def __repr__(self) -> str:
        return f"Text({self.text_content!r})"


class Element:
    """A node with an ordered list of children."""

    def __init__(self, tag: str, *children: Element | Text | str, id: str | None = None) -> None:
        self.tag = tag
        self.id = id
        self.children: list[Element | Text] = []
        for child in children:
            self.append(child)

    def append(self, child: Element | Text | str) -> Element | Text:
        """Append a child. Strings become Text leaves."""
        if isinstance(child, str):
            child = Text(child)
        self.children.append(child)
        return child

    def iter(self) -> Iterator[Element | Text]:
        """Depth-first iteration over this element and its descendants."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter()
            else:
                yield child

    def find(self, id: str) -> Element | None:
        """The first element in this subtree with the given id."""
        for node in self.iter():
            if isinstance(node, Element) and node.id == id:
                return node
        return None

    @property
    def text_content(self) -> str:
        return "".join(
            node.text_content for node in self.iter() if isinstance(node, Text)
        )

    def __repr__(self) -> str:
        ident = f"#{self.id}" if self.id else ""
        return f"Element({self.tag}{ident}, {len(self.children)} children)"
