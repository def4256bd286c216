"""Reactive records — plain dicts converted into state that tracks its readers.

observe() walks a nested dict depth-first and wraps every record in a
ReactiveRecord. Each key is backed by a ReactiveProperty cell holding the
value and its own Dep. Reading a key inside a watcher evaluation subscribes
the watcher; writing a different value re-observes it and notifies.

Only dicts are converted. Lists, primitives and other objects are stored as
they are, and already-reactive records are never wrapped twice.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterator

from tinybind.dep import Dep


class ReactiveProperty:
    """One reactive key: the stored value plus the Dep of its readers."""

    __slots__ = ("key", "_value", "_dep")

    def __init__(self, key: Hashable, value: Any) -> None:
        self.key = key
        self._dep = Dep()
        self._value = observe(value)

    @property
    def dep(self) -> Dep:
        return self._dep

    def get(self) -> Any:
        """Read the value. If inside a watcher evaluation, registers the dependency."""
        self._dep.depend()
        return self._value

    def peek(self) -> Any:
        """Read the value without tracking."""
        return self._value

    def set(self, value: Any) -> None:
        """Write a new value. Equal values are ignored; dicts are made reactive."""
        if same_value(value, self._value):
            return
        self._value = observe(value)
        self._dep.notify()

    def __repr__(self) -> str:
        return f"ReactiveProperty({self.key!r}, {self._value!r})"


class ReactiveRecord:
    """A record whose keys are reactive properties.

    Keys are reachable both as attributes (``rec.user.name``) and as items
    (``rec["user"]["name"]``). Assigning an unknown key defines a new
    reactive property.

    Usage:
        data = observe({"user": {"name": "Al"}})
        data.user.name = "Bo"      # notifies watchers that read user.name
        data.user = {"name": "Cy"}  # new subtree is reactive too
    """

    __slots__ = ("_props",)

    def __init__(self, data: dict | None = None) -> None:
        object.__setattr__(self, "_props", {})
        for key, value in (data or {}).items():
            define_reactive(self, key, value)

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails, i.e. for data keys.
        try:
            prop = object.__getattribute__(self, "_props")[name]
        except (KeyError, AttributeError):
            raise AttributeError(
                f"{type(self).__name__} has no property {name!r}"
            ) from None
        return prop.get()

    def __setattr__(self, name: str, value: Any) -> None:
        _write(self, name, value)

    def __getitem__(self, key: Hashable) -> Any:
        try:
            prop = self._props[key]
        except KeyError:
            raise KeyError(key) from None
        return prop.get()

    def __setitem__(self, key: Hashable, value: Any) -> None:
        _write(self, key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._props

    def __iter__(self) -> Iterator[Hashable]:
        return iter(list(self._props))

    def __len__(self) -> int:
        return len(self._props)

    def __repr__(self) -> str:
        values = {key: prop.peek() for key, prop in self._props.items()}
        return f"ReactiveRecord({values!r})"


def same_value(new: Any, old: Any) -> bool:
    """Strict equality: identical, or equal values of the same type.

    ``1``, ``1.0`` and ``True`` compare equal in Python but are different values here.
    """
    return new is old or (type(new) is type(old) and new == old)


def _write(record: ReactiveRecord, key: Hashable, value: Any) -> None:
    prop = record._props.get(key)
    if prop is None:
        define_reactive(record, key, value)
    else:
        prop.set(value)


def define_reactive(record: ReactiveRecord, key: Hashable, value: Any) -> ReactiveProperty:
    """Install a reactive property for key on record.

    If the key is already reactive, the value is written through the
    existing property so its subscribers stay attached.
    """
    prop = record._props.get(key)
    if prop is not None:
        prop.set(value)
        return prop
    prop = ReactiveProperty(key, value)
    record._props[key] = prop
    return prop


def observe(value: Any) -> Any:
    """Make value reactive.

    dicts become ReactiveRecords (recursively), ReactiveRecords are returned
    unchanged, anything else is returned as is.
    """
    if isinstance(value, ReactiveRecord):
        return value
    if isinstance(value, dict):
        return ReactiveRecord(value)
    return value


def dep_of(record: ReactiveRecord, key: Hashable) -> Dep:
    """The Dep backing record[key]. Raises KeyError for unknown keys."""
    return record._props[key].dep


def to_plain(value: Any) -> Any:
    """Convert a reactive tree back into plain dicts, without tracking."""
    if isinstance(value, ReactiveRecord):
        return {key: to_plain(prop.peek()) for key, prop in value._props.items()}
    if isinstance(value, list):
        return [to_plain(item) for item in value]
    return value
