"""Prompt builders for each generation stage."""

from __future__ import annotations

from ..workflow.aggregate import Workflow
from ..workflow.models import Task, TaskStatus

SUMMARY_CHARS = 500
CODE_SAMPLE_CHARS = 1000
MAX_CODE_SAMPLES = 3

TASK_FORMAT_EXAMPLE = """\
### P0-1: Create domain enums and exceptions
**Effort**: 0.5d
**Depends**: None
**File**: src/domain/model/
**Checklist**:
- [ ] Create the Status enum
- [ ] Create the exception hierarchy

### P0-2: Implement the repository port
**Effort**: 1d
**Depends**: P0-1
**File**: src/domain/repository.py
**Checklist**:
- [ ] Define the repository protocol
"""


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def build_spec_prompt(prd_content: str, document_paths: list[str] | tuple[str, ...]) -> str:
    documents = "\n".join(document_paths) if document_paths else "None"
    return (
        "You are a senior software engineer.\n"
        "Write a detailed specification document from the PRD and "
        "reference documents below.\n\n"
        "Requirements:\n"
        "1. State the goals and boundaries of the requirement\n"
        "2. Define the core functional modules\n"
        "3. List the key business rules\n"
        "4. Describe external dependencies and interfaces\n"
        "5. Use clearly structured Markdown\n"
        "6. Include a feature checklist and acceptance criteria\n\n"
        f"PRD:\n{prd_content}\n\n"
        f"Reference documents:\n{documents}\n\n"
        "Return only the complete specification in Markdown."
    )


def build_tech_design_prompt(spec_content: str, repository_context: str) -> str:
    return (
        "You are a senior software architect.\n"
        "Write a detailed technical design from the specification and the "
        "repository structure below.\n\n"
        "Requirements:\n"
        "1. Analyse the existing code architecture\n"
        "2. Design the domain model\n"
        "3. Define the API surface\n"
        "4. Plan the implementation steps by priority\n"
        "5. Identify technical risks and dependencies\n"
        "6. Use Markdown and include code samples\n"
        "7. Stay within the repository's existing technology stack\n\n"
        f"Specification:\n{spec_content}\n\n"
        f"Repository structure:\n{repository_context}\n\n"
        "Return only the complete technical design."
    )


def build_task_list_prompt(design_content: str) -> str:
    return (
        "You are a project manager.\n"
        "Break the technical design below into a task list (tasklist.md).\n\n"
        "Requirements:\n"
        "1. Group tasks by priority (P0/P1/P2/P3)\n"
        "2. Every task has an ID, title, checklist, dependencies and effort\n"
        "3. Keep tasks between half a day and one day of work\n"
        "4. Express dependencies with task IDs\n"
        "5. Follow the exact Markdown format below\n\n"
        f"Format:\n{TASK_FORMAT_EXAMPLE}\n"
        f"Technical design:\n{design_content}\n\n"
        "Return only the complete tasklist.md content in this format."
    )


def build_task_description(task: Task) -> str:
    return (
        f"Task ID: {task.id}\n"
        f"Title: {task.title}\n"
        f"Target file: {task.target_file or 'None'}\n"
        f"\nDescription:\n{task.description}"
    )


def build_code_context(workflow: Workflow) -> str:
    """Summaries of prior documents plus a few completed tasks' code."""
    parts = ["## Related documents"]
    if workflow.specification is not None:
        parts.append(
            "Specification summary: "
            + _truncate(workflow.specification.generated_content, SUMMARY_CHARS)
        )
    if workflow.technical_design is not None:
        parts.append(
            "Technical design summary: "
            + _truncate(workflow.technical_design.content, SUMMARY_CHARS)
        )

    parts.append("\n## Code from completed tasks")
    if workflow.task_list is not None:
        done = [
            t for t in workflow.task_list.tasks
            if t.status is TaskStatus.COMPLETED and t.generated_code
        ]
        for task in done[:MAX_CODE_SAMPLES]:
            parts.append(
                f"Task {task.id}: {task.title}\n"
                f"```\n{_truncate(task.generated_code, CODE_SAMPLE_CHARS)}\n```"
            )
    return "\n".join(parts)


def build_code_prompt(task: Task, workflow: Workflow) -> str:
    return (
        "You are a senior developer.\n"
        "Implement the task below completely, using the code context.\n\n"
        "Requirements:\n"
        "1. Follow the existing code style\n"
        "2. Respect the architecture layers from the technical design\n"
        "3. Keep functions short and focused\n"
        "4. Return only the complete code, without commentary\n\n"
        f"Task:\n{build_task_description(task)}\n\n"
        f"Code context:\n{build_code_context(workflow)}\n"
    )
