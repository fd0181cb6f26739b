"""Plain-text help rendering for a documentation tree."""

from __future__ import annotations

import logging

from taskdoc.documentation import ActionDoc, Documentation, ParamDoc, TaskDoc
from taskdoc.trigger import is_help

logger = logging.getLogger(__name__)

USAGE_LINE = "\tcommand [<task> [<action> [<param1> <param2> ... <paramN>] ] ]"
TASK_HELP_HINT = "           command <task> -h | --help | help"

TASK_INDENT = "    "
TASK_DESCRIPTION_INDENT = "            "
DETAIL_DESCRIPTION_INDENT = "  "
ACTION_INDENT = "           "
ACTION_DESCRIPTION_INDENT = "               "
PARAM_INDENT = "                   "


def render_help(
    documentation: Documentation,
    *,
    app_name: str | None = None,
    version: str | None = None,
    target: str | None = None,
) -> list[str]:
    """Render the banner plus the task list or the detail view of ``target``."""

    lines = render_banner(app_name=app_name, version=version)
    if target is None or is_help(target):
        lines.extend(render_task_list(documentation))
    else:
        lines.extend(render_task_detail(documentation, target))
    return lines


def render_banner(*, app_name: str | None, version: str | None) -> list[str]:
    banner = ""
    if app_name is not None:
        banner += f"{app_name} "
    if version is not None:
        banner += version
    return ["", banner, "", "Usage:", "", USAGE_LINE, ""]


def render_task_list(documentation: Documentation) -> list[str]:
    lines = ["", "To show task help type:", "", TASK_HELP_HINT, "", "Available tasks "]
    for task_name, task_doc in documentation.items():
        lines.append("")
        lines.append(f"{TASK_INDENT}{task_name}")
        lines.extend(f"{TASK_DESCRIPTION_INDENT}{line}" for line in task_doc.description)
    return lines


def render_task_detail(documentation: Documentation, task_name: str) -> list[str]:
    lines = ["", f"Task: {task_name}", ""]

    task_doc = documentation.get(task_name)
    if task_doc is None:
        logger.warning("No documentation found for task %r", task_name)
        lines.append(f"No documentation found for task '{task_name}'.")
        task_doc = TaskDoc()

    lines.extend(f"{DETAIL_DESCRIPTION_INDENT}{line}" for line in task_doc.description)
    lines.extend(["", "Available actions:", ""])
    for action_name, action_doc in task_doc.actions.items():
        lines.extend(_render_action(action_name, action_doc))
    return lines


def format_param(param: ParamDoc) -> str:
    """Compose ``name ( type ) description``, leaving out absent fields."""

    text = ""
    if param.name is not None:
        text = param.name
    if param.type is not None:
        text += f" ( {param.type} )"
    if param.description is not None:
        text += f" {param.description}"
    return text


def _render_action(action_name: str, action_doc: ActionDoc) -> list[str]:
    lines = [f"{ACTION_INDENT}{action_name}"]
    if action_doc.description is not None:
        lines.append(ACTION_DESCRIPTION_INDENT + "\n".join(action_doc.description))
    lines.append("")

    if action_doc.params:
        lines.append(f"{ACTION_DESCRIPTION_INDENT}Parameters:")
        for param in action_doc.params:
            text = format_param(param)
            if text:
                lines.append(f"{PARAM_INDENT}{text}")
    return lines
