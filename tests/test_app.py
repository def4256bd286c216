"""Tests for the ViewModel construction surface."""

import logging

import pytest

from tinybind import Element, ReactiveRecord, Text, ViewModel


def _page():
    message = Text("say: {{ message }}")
    page = Element("body", Element("div", Element("p", message), id="app"), Text("{{ message }}"))
    return page, message


class TestViewModel:
    def test_mount_by_id(self):
        page, message = _page()
        vm = ViewModel(data={"message": "hi"}, el="#app", document=page)
        assert isinstance(vm.data, ReactiveRecord)
        assert vm.mounted
        assert message.text_content == "say: hi"
        # outside the mounted subtree: left alone
        assert page.children[1].text_content == "{{ message }}"

        vm.data.message = "bye"
        assert message.text_content == "say: bye"

    def test_mount_by_node(self):
        root = Element("div", "{{ n * 2 }}")
        vm = ViewModel(data={"n": 2}, el=root)
        assert root.text_content == "4"
        assert len(vm.watchers) == 1

    def test_unmounted_then_mount(self):
        root = Element("div", "{{ n }}")
        vm = ViewModel(data={"n": 1})
        assert not vm.mounted
        assert root.text_content == "{{ n }}"
        vm.mount(root)
        assert root.text_content == "1"
        with pytest.raises(RuntimeError):
            vm.mount(root)

    def test_data_defaults_to_empty_record(self):
        vm = ViewModel(el=Element("div", "static"))
        assert len(vm.data) == 0

    def test_non_record_data_is_left_alone(self):
        vm = ViewModel(data=[1, 2])
        assert vm.data == [1, 2]

    def test_string_locator_needs_document(self):
        with pytest.raises(LookupError):
            ViewModel(data={}, el="#app")

    def test_unknown_locator(self):
        page, _ = _page()
        with pytest.raises(LookupError):
            ViewModel(data={}, el="#nope", document=page)

    def test_teardown(self):
        root = Element("div", "{{ n }}")
        vm = ViewModel(data={"n": 1}, el=root)
        vm.teardown()
        assert not vm.mounted
        vm.data.n = 2
        assert root.text_content == "1"

    def test_logs_mount(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="tinybind"):
            ViewModel(data={"n": 1}, el=Element("div", "{{ n }}"))
        assert any("Mounted" in record.getMessage() for record in caplog.records)

    def test_repr(self):
        assert repr(ViewModel()) == "ViewModel(unmounted)"
