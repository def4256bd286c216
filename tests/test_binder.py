"""Tests for the view binder over the in-memory view tree."""

import pytest

from tinybind import Element, EvaluationError, Text, compile_node, compile_text, observe, transaction
from tinybind.reactive import dep_of


class TestView:
    def test_strings_become_text(self):
        el = Element("p", "hi", Element("b", "there"))
        assert isinstance(el.children[0], Text)
        assert el.text_content == "hithere"

    def test_find(self):
        target = Element("span", id="x")
        root = Element("div", Element("p", target))
        assert root.find("x") is target
        assert root.find("nope") is None


class TestCompileText:
    def test_initial_render(self):
        node = Text("say: {{ message }}")
        data = observe({"message": "hi"})
        compile_text(node, data)
        assert node.text_content == "say: hi"

    def test_rerender_on_write(self):
        node = Text("say: {{ message }}")
        data = observe({"message": "hi"})
        compile_text(node, data)
        data.message = "bye"
        assert node.text_content == "say: bye"

    def test_literal_text_round_trip(self):
        node = Text("hello")
        compile_text(node, observe({"hello": "ignored"}))
        assert node.text_content == "hello"


class TestCompileNode:
    def test_binds_nested_leaves_in_order(self):
        root = Element(
            "div",
            Element("h1", "{{ title }}"),
            Element("p", "by {{ author }}", Element("i", "!")),
        )
        data = observe({"title": "T", "author": "A"})
        watchers = compile_node(root, data)
        assert len(watchers) == 3
        assert root.text_content == "Tby A!"

    def test_unrelated_write_does_not_rerender(self):
        a, b = Text("{{ a }}"), Text("{{ b }}")
        data = observe({"a": 1, "b": 2})
        compile_node(Element("div", a, b), data)
        original = b.text_content
        data.a = 5
        assert a.text_content == "5"
        assert b.text_content == original
        assert len(dep_of(data, "b")) == 1

    def test_nested_record_scenario(self):
        node = Text("{{ user.name }}")
        data = observe({"user": {"name": "Al"}})
        compile_node(Element("div", node), data)
        assert node.text_content == "Al"

        data.user.name = "Bo"
        assert node.text_content == "Bo"

        data.user = {"name": "Cy"}
        assert node.text_content == "Cy"

        data.user.name = "Dee"
        assert node.text_content == "Dee"

    def test_replaced_subtree_drops_old_subscription(self):
        node = Text("{{ user.name }}")
        data = observe({"user": {"name": "Al"}})
        compile_node(Element("div", node), data)
        old_user = data.user
        data.user = {"name": "Cy"}
        old_user.name = "ghost"
        assert node.text_content == "Cy"

    def test_two_markers_scenario(self):
        node = Text("{{a}}-{{b}}")
        data = observe({"a": 1, "b": 2})
        compile_node(Element("div", node), data)
        assert node.text_content == "1-2"
        data.a = 3
        assert node.text_content == "3-2"

    def test_fan_in(self):
        node = Text("{{a}}-{{b}}")
        data = observe({"a": 1, "b": 2})
        [watcher] = compile_node(Element("div", node), data)
        renders = []
        callback = watcher.callback
        watcher.callback = lambda value: (renders.append(value), callback(value))

        data.a = 3
        data.b = 4
        assert renders == ["3-2", "3-4"]

        with transaction():
            data.a = 5
            data.b = 6
        assert renders == ["3-2", "3-4", "5-6"]
        assert node.text_content == "5-6"

    def test_fail_fast_leaves_node_untouched(self):
        good = Text("{{ a }}")
        bad = Text("{{ missing }}")
        data = observe({"a": 1})
        with pytest.raises(EvaluationError):
            compile_node(Element("div", good, bad), data)
        assert bad.text_content == "{{ missing }}"
        # bindings created before the failure are torn down
        assert len(dep_of(data, "a")) == 0
        data.a = 2
        assert good.text_content == "1"

    def test_syntax_error_surfaces(self):
        node = Text("{{ ) }}")
        with pytest.raises(EvaluationError):
            compile_node(Element("div", node), observe({}))
        assert node.text_content == "{{ ) }}"
