"""tinybind: fine-grained reactive data binding for text templates."""

from importlib.metadata import version as _version

__version__ = _version("tinybind")

from tinybind._tracking import ReentrantEvaluationError, get_pending_count
from tinybind.dep import Dep
from tinybind.reactive import ReactiveRecord, ReactiveProperty, observe, define_reactive, to_plain
from tinybind.watcher import Watcher
from tinybind.compiler import (
    TemplateError,
    EvaluationError,
    TemplateSyntaxError,
    parse_template,
    compile_evaluator,
)
from tinybind.action import action, transaction
from tinybind.view import Element, Text
from tinybind.binder import compile_node, compile_text
from tinybind.app import ViewModel
# textual NOT auto-imported — opt-in only

__all__ = [
    "Dep",
    "ReactiveRecord",
    "ReactiveProperty",
    "observe",
    "define_reactive",
    "to_plain",
    "Watcher",
    "ReentrantEvaluationError",
    "TemplateError",
    "EvaluationError",
    "TemplateSyntaxError",
    "parse_template",
    "compile_evaluator",
    "action",
    "transaction",
    "get_pending_count",
    "Element",
    "Text",
    "compile_node",
    "compile_text",
    "ViewModel",
]
