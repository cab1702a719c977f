"""Pure handler functions for workflow MCP tools.

Each handler takes (args, service) and returns MCP result format.
No SDK dependency, so they are testable with InMemoryWorkflowRepository.
"""

from __future__ import annotations

import json
from typing import Any

from ..execution.service import WorkflowService
from ..workflow.exceptions import WorkflowError
from ..workflow.serialization import (
    specification_to_dict,
    task_list_to_dict,
    technical_design_to_dict,
)


def _text_result(text: str) -> dict[str, Any]:
    """Build MCP tool result with a text content block."""
    return {"content": [{"type": "text", "text": text}]}


def _json_result(data: Any) -> dict[str, Any]:
    """Build MCP tool result with JSON-serialized content."""
    return _text_result(json.dumps(data, indent=2, default=str))


def _error_result(error: Exception) -> dict[str, Any]:
    return _text_result(f"Error: {error}")


def _wait(args: dict[str, Any]) -> bool:
    value = args.get("wait", False)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


def _parse_paths(raw: Any) -> list[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        return json.loads(raw) if raw.lstrip().startswith("[") else [raw]
    return list(raw)


async def create_workflow_handler(
    args: dict[str, Any], service: WorkflowService
) -> dict[str, Any]:
    """Create a workflow in the draft stage."""
    try:
        workflow = await service.create_workflow(
            args["name"], int(args["repository_id"]), args.get("created_by") or "mcp"
        )
    except (WorkflowError, ValueError) as e:
        return _error_result(e)
    return _json_result(await service.get_status(workflow.id))


async def get_workflow_status_handler(
    args: dict[str, Any], service: WorkflowService
) -> dict[str, Any]:
    try:
        return _json_result(await service.get_status(args["workflow_id"]))
    except WorkflowError as e:
        return _error_result(e)


async def get_workflow_progress_handler(
    args: dict[str, Any], service: WorkflowService
) -> dict[str, Any]:
    """Status plus task counts and a progress consistency check."""
    try:
        return _json_result(await service.get_progress(args["workflow_id"]))
    except WorkflowError as e:
        return _error_result(e)


async def list_workflows_handler(
    args: dict[str, Any], service: WorkflowService
) -> dict[str, Any]:
    """List workflows, optionally filtered by repository_id."""
    repository_id = args.get("repository_id")
    if repository_id in (None, ""):
        repository_id = None
    else:
        try:
            repository_id = int(repository_id)
        except ValueError:
            return _text_result(f"Error: Invalid repository_id: {repository_id}")
    return _json_result(await service.list_workflows(repository_id))


async def generate_specification_handler(
    args: dict[str, Any], service: WorkflowService
) -> dict[str, Any]:
    """Start specification generation from PRD content."""
    try:
        paths = _parse_paths(args.get("document_paths"))
    except json.JSONDecodeError as e:
        return _text_result(f"Error: Invalid JSON in document_paths: {e}")
    try:
        workflow = await service.generate_specification(
            args["workflow_id"], args["prd_content"], paths, wait=_wait(args)
        )
    except WorkflowError as e:
        return _error_result(e)
    return _json_result(await service.get_status(workflow.id))


async def get_specification_handler(
    args: dict[str, Any], service: WorkflowService
) -> dict[str, Any]:
    try:
        spec = await service.get_specification(args["workflow_id"])
    except WorkflowError as e:
        return _error_result(e)
    return _json_result(specification_to_dict(spec))


async def generate_technical_design_handler(
    args: dict[str, Any], service: WorkflowService
) -> dict[str, Any]:
    try:
        workflow = await service.generate_technical_design(args["workflow_id"], wait=_wait(args))
    except WorkflowError as e:
        return _error_result(e)
    return _json_result(await service.get_status(workflow.id))


async def get_technical_design_handler(
    args: dict[str, Any], service: WorkflowService
) -> dict[str, Any]:
    try:
        design = await service.get_technical_design(args["workflow_id"])
    except WorkflowError as e:
        return _error_result(e)
    return _json_result(technical_design_to_dict(design))


async def update_technical_design_handler(
    args: dict[str, Any], service: WorkflowService
) -> dict[str, Any]:
    """Replace the design content with a new version."""
    try:
        workflow = await service.update_technical_design(args["workflow_id"], args["content"])
    except WorkflowError as e:
        return _error_result(e)
    return _json_result(technical_design_to_dict(workflow.technical_design))


async def approve_technical_design_handler(
    args: dict[str, Any], service: WorkflowService
) -> dict[str, Any]:
    try:
        workflow = await service.approve_technical_design(args["workflow_id"])
    except WorkflowError as e:
        return _error_result(e)
    return _json_result(await service.get_status(workflow.id))


async def generate_task_list_handler(
    args: dict[str, Any], service: WorkflowService
) -> dict[str, Any]:
    try:
        workflow = await service.generate_task_list(args["workflow_id"], wait=_wait(args))
    except WorkflowError as e:
        return _error_result(e)
    return _json_result(await service.get_status(workflow.id))


async def get_task_list_handler(
    args: dict[str, Any], service: WorkflowService
) -> dict[str, Any]:
    try:
        task_list = await service.get_task_list(args["workflow_id"])
    except WorkflowError as e:
        return _error_result(e)
    return _json_result(task_list_to_dict(task_list))


async def start_code_generation_handler(
    args: dict[str, Any], service: WorkflowService
) -> dict[str, Any]:
    try:
        workflow = await service.start_code_generation(args["workflow_id"], wait=_wait(args))
    except WorkflowError as e:
        return _error_result(e)
    return _json_result(await service.get_status(workflow.id))


async def cancel_workflow_handler(
    args: dict[str, Any], service: WorkflowService
) -> dict[str, Any]:
    """Cancel a workflow that has not reached a terminal stage."""
    reason = args.get("reason") or "Cancelled by user"
    try:
        workflow = await service.cancel_workflow(args["workflow_id"], reason)
    except WorkflowError as e:
        return _error_result(e)
    return _json_result(await service.get_status(workflow.id))
