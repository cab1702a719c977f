"""Plain-dict form of the workflow aggregate.

Used by the file-backed repository and by the tool handlers. Enums become
their values and datetimes ISO-8601 strings, so the output is safe for
both JSON and YAML.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from .aggregate import StageTransition, Workflow
from .models import Specification, Stage, Task, TaskList, TaskStatus, TechnicalDesign


def _dt(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_dt(value: str | datetime | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def specification_to_dict(spec: Specification) -> dict[str, Any]:
    return {
        "prd_content": spec.prd_content,
        "document_paths": list(spec.document_paths),
        "generated_content": spec.generated_content,
        "generated_at": _dt(spec.generated_at),
    }


def specification_from_dict(data: dict[str, Any]) -> Specification:
    return Specification(
        prd_content=data["prd_content"],
        generated_content=data["generated_content"],
        document_paths=tuple(data.get("document_paths") or ()),
        generated_at=_parse_dt(data["generated_at"]),
    )


def technical_design_to_dict(design: TechnicalDesign) -> dict[str, Any]:
    return {
        "content": design.content,
        "version": design.version,
        "approved": design.approved,
        "created_at": _dt(design.created_at),
        "approved_at": _dt(design.approved_at),
    }


def technical_design_from_dict(data: dict[str, Any]) -> TechnicalDesign:
    return TechnicalDesign(
        content=data["content"],
        version=int(data["version"]),
        approved=bool(data["approved"]),
        created_at=_parse_dt(data["created_at"]),
        approved_at=_parse_dt(data.get("approved_at")),
    )


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "status": task.status.value,
        "dependencies": list(task.dependencies),
        "target_file": task.target_file,
        "generated_code": task.generated_code,
        "error": task.error,
        "completed_at": _dt(task.completed_at),
    }


def task_from_dict(data: dict[str, Any]) -> Task:
    return Task(
        id=data["id"],
        title=data["title"],
        description=data.get("description", ""),
        status=TaskStatus(data.get("status", TaskStatus.PENDING.value)),
        dependencies=tuple(data.get("dependencies") or ()),
        target_file=data.get("target_file"),
        generated_code=data.get("generated_code"),
        error=data.get("error"),
        completed_at=_parse_dt(data.get("completed_at")),
    )


def task_list_to_dict(task_list: TaskList) -> dict[str, Any]:
    return {
        "content": task_list.content,
        "tasks": [task_to_dict(t) for t in task_list.tasks],
        "generated_at": _dt(task_list.generated_at),
    }


def task_list_from_dict(data: dict[str, Any]) -> TaskList:
    return TaskList(
        content=data.get("content", ""),
        tasks=tuple(task_from_dict(t) for t in data.get("tasks") or ()),
        generated_at=_parse_dt(data["generated_at"]),
    )


def workflow_to_dict(workflow: Workflow) -> dict[str, Any]:
    return {
        "id": workflow.id,
        "name": workflow.name,
        "repository_id": workflow.repository_id,
        "created_by": workflow.created_by,
        "stage": workflow.stage.value,
        "progress": workflow.progress,
        "stage_label": workflow.stage_label,
        "created_at": _dt(workflow.created_at),
        "updated_at": _dt(workflow.updated_at),
        "failure_reason": workflow.failure_reason,
        "revision": workflow.revision,
        "specification": (
            specification_to_dict(workflow.specification) if workflow.specification else None
        ),
        "technical_design": (
            technical_design_to_dict(workflow.technical_design)
            if workflow.technical_design
            else None
        ),
        "task_list": task_list_to_dict(workflow.task_list) if workflow.task_list else None,
        "transitions": [
            {
                "from_stage": t.from_stage.value,
                "to_stage": t.to_stage.value,
                "timestamp": _dt(t.timestamp),
                "reason": t.reason,
            }
            for t in workflow.transitions
        ],
    }


def workflow_from_dict(data: dict[str, Any]) -> Workflow:
    spec = data.get("specification")
    design = data.get("technical_design")
    task_list = data.get("task_list")
    return Workflow(
        id=data.get("id"),
        name=data["name"],
        repository_id=int(data["repository_id"]),
        created_by=data["created_by"],
        stage=Stage(data["stage"]),
        progress=int(data["progress"]),
        stage_label=data.get("stage_label", ""),
        created_at=_parse_dt(data["created_at"]),
        updated_at=_parse_dt(data["updated_at"]),
        failure_reason=data.get("failure_reason"),
        revision=int(data.get("revision", 0)),
        specification=specification_from_dict(spec) if spec else None,
        technical_design=technical_design_from_dict(design) if design else None,
        task_list=task_list_from_dict(task_list) if task_list else None,
        transitions=[
            StageTransition(
                from_stage=Stage(t["from_stage"]),
                to_stage=Stage(t["to_stage"]),
                timestamp=_parse_dt(t["timestamp"]),
                reason=t.get("reason"),
            )
            for t in data.get("transitions") or ()
        ],
    )
