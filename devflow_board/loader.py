"""Load workflows from the YAML store and group them into board columns."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from devflow.workflow.aggregate import Workflow
from devflow.workflow.exceptions import WorkflowError
from devflow.workflow.models import Stage, TaskStatus
from devflow.workflow.serialization import workflow_from_dict

logger = logging.getLogger(__name__)

# (column name, display name, stages shown in it)
COLUMNS: list[tuple[str, str, frozenset[Stage]]] = [
    ("draft", "Draft", frozenset({Stage.DRAFT})),
    ("spec", "Specification", frozenset({Stage.SPEC_GENERATING, Stage.SPEC_GENERATED})),
    ("design", "Design", frozenset({
        Stage.TECH_DESIGN_GENERATING,
        Stage.TECH_DESIGN_GENERATED,
        Stage.TECH_DESIGN_APPROVED,
    })),
    ("tasks", "Tasks", frozenset({Stage.TASK_LIST_GENERATING, Stage.TASK_LIST_GENERATED})),
    ("code", "Code", frozenset({Stage.CODE_GENERATING})),
    ("done", "Done", frozenset({Stage.COMPLETED})),
    ("stopped", "Stopped", frozenset({Stage.FAILED, Stage.CANCELLED})),
]

TASK_MARKS = {
    TaskStatus.PENDING: "[ ]",
    TaskStatus.IN_PROGRESS: "[~]",
    TaskStatus.COMPLETED: "[x]",
    TaskStatus.FAILED: "[!]",
    TaskStatus.SKIPPED: "[-]",
}


@dataclass
class ColumnInfo:
    name: str
    display_name: str
    workflows: list[Workflow] = field(default_factory=list)


def column_for(stage: Stage) -> str:
    for name, _, stages in COLUMNS:
        if stage in stages:
            return name
    raise ValueError(f"No board column for stage {stage}")


def load_workflow(path: Path) -> Workflow | None:
    """Read one stored workflow; unreadable files are skipped with a warning."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        return workflow_from_dict(data)
    except (OSError, yaml.YAMLError, KeyError, TypeError, ValueError, WorkflowError) as e:
        logger.warning("Skipping unreadable workflow file %s: %s", path, e)
        return None


def load_board(store_dir: Path) -> list[ColumnInfo]:
    """Return every column in pipeline order, each sorted by last update."""
    columns = {name: ColumnInfo(name, display) for name, display, _ in COLUMNS}
    store_dir = Path(store_dir)
    if store_dir.is_dir():
        for path in sorted(store_dir.glob("wf-*.yaml")):
            workflow = load_workflow(path)
            if workflow is not None:
                columns[column_for(workflow.stage)].workflows.append(workflow)

    result = []
    for name, _, _ in COLUMNS:
        col = columns[name]
        col.workflows.sort(key=lambda w: w.updated_at, reverse=True)
        result.append(col)
    return result


def render_detail(workflow: Workflow) -> str:
    """Markdown-ish summary shown in the detail panel."""
    lines = [
        f"# {workflow.name}",
        "",
        f"ID: {workflow.id}",
        f"Repository: {workflow.repository_id}",
        f"Created by: {workflow.created_by}",
        f"Stage: {workflow.stage_label}",
        f"Progress: {workflow.progress}%",
        f"Updated: {workflow.updated_at:%Y-%m-%d %H:%M}",
    ]
    if workflow.failure_reason:
        lines.append(f"Failure: {workflow.failure_reason}")

    lines += ["", "## Documents"]
    lines.append(f"Specification: {'yes' if workflow.specification else 'no'}")
    design = workflow.technical_design
    if design is None:
        lines.append("Technical design: no")
    else:
        state = "approved" if design.approved else "draft"
        lines.append(f"Technical design: v{design.version} ({state})")

    if workflow.task_list is not None:
        task_list = workflow.task_list
        done = task_list.count(TaskStatus.COMPLETED)
        lines += ["", f"## Tasks ({done}/{len(task_list)})"]
        for task in task_list.tasks:
            lines.append(f"{TASK_MARKS[task.status]} {task.id}: {task.title}")
            if task.error:
                lines.append(f"    {task.error}")
    return "\n".join(lines)
