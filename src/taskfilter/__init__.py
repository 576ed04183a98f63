"""taskfilter - Todoist-style filter queries for personal task manager exports."""

from taskfilter.filters import compile_filter, evaluate_filter, filter_visible, is_excluded
from taskfilter.models import Label, Project, SavedFilter, Section, Task, TaskLabel
from taskfilter.query_language import FilterContext, create_context


__version__ = "0.1.0"

__all__ = [
    "FilterContext",
    "Label",
    "Project",
    "SavedFilter",
    "Section",
    "Task",
    "TaskLabel",
    "__version__",
    "compile_filter",
    "create_context",
    "evaluate_filter",
    "filter_visible",
    "is_excluded",
]
