"""MCP server factory binding handlers to a workflow service."""

from typing import Any

from claude_agent_sdk import create_sdk_mcp_server, tool

from ..execution.service import WorkflowService
from . import handlers


def create_workflow_server(service: WorkflowService):
    """Create an MCP server with the workflow tools.

    Each handler is bound to the service via closure so the @tool wrappers
    are clean single-argument async functions as the SDK expects.
    """

    @tool(
        "create_workflow",
        "Create a new workflow for a repository. Starts in the draft stage.",
        {"name": str, "repository_id": int, "created_by": str},
    )
    async def create_workflow(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.create_workflow_handler(args, service)

    @tool(
        "get_workflow_status",
        "Get stage, progress and label of a workflow",
        {"workflow_id": str},
    )
    async def get_workflow_status(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.get_workflow_status_handler(args, service)

    @tool(
        "get_workflow_progress",
        "Get workflow progress including task counts",
        {"workflow_id": str},
    )
    async def get_workflow_progress(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.get_workflow_progress_handler(args, service)

    @tool(
        "list_workflows",
        "List workflows, optionally filtered by repository_id. Omit repository_id to list all.",
        {"repository_id": str},
    )
    async def list_workflows(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.list_workflows_handler(args, service)

    @tool(
        "generate_specification",
        "Generate the specification from PRD content. document_paths is a JSON list of strings.",
        {"workflow_id": str, "prd_content": str, "document_paths": str, "wait": bool},
    )
    async def generate_specification(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.generate_specification_handler(args, service)

    @tool(
        "get_specification",
        "Get the generated specification of a workflow",
        {"workflow_id": str},
    )
    async def get_specification(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.get_specification_handler(args, service)

    @tool(
        "generate_technical_design",
        "Generate (or regenerate) the technical design from the specification",
        {"workflow_id": str, "wait": bool},
    )
    async def generate_technical_design(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.generate_technical_design_handler(args, service)

    @tool(
        "get_technical_design",
        "Get the current technical design of a workflow",
        {"workflow_id": str},
    )
    async def get_technical_design(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.get_technical_design_handler(args, service)

    @tool(
        "update_technical_design",
        "Replace the technical design content before approval. Bumps the version.",
        {"workflow_id": str, "content": str},
    )
    async def update_technical_design(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.update_technical_design_handler(args, service)

    @tool(
        "approve_technical_design",
        "Approve the technical design so the task list can be generated",
        {"workflow_id": str},
    )
    async def approve_technical_design(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.approve_technical_design_handler(args, service)

    @tool(
        "generate_task_list",
        "Generate the task list from the approved technical design",
        {"workflow_id": str, "wait": bool},
    )
    async def generate_task_list(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.generate_task_list_handler(args, service)

    @tool(
        "get_task_list",
        "Get the task list with per-task status and dependencies",
        {"workflow_id": str},
    )
    async def get_task_list(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.get_task_list_handler(args, service)

    @tool(
        "start_code_generation",
        "Generate code for every task in dependency order",
        {"workflow_id": str, "wait": bool},
    )
    async def start_code_generation(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.start_code_generation_handler(args, service)

    @tool(
        "cancel_workflow",
        "Cancel a workflow that has not finished, with a reason",
        {"workflow_id": str, "reason": str},
    )
    async def cancel_workflow(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.cancel_workflow_handler(args, service)

    return create_sdk_mcp_server(
        name="devflow_workflow",
        version="0.1.0",
        tools=[
            create_workflow,
            get_workflow_status,
            get_workflow_progress,
            list_workflows,
            generate_specification,
            get_specification,
            generate_technical_design,
            get_technical_design,
            update_technical_design,
            approve_technical_design,
            generate_task_list,
            get_task_list,
            start_code_generation,
            cancel_workflow,
        ],
    )
