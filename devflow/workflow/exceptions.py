"""Workflow exception types."""

from __future__ import annotations


class WorkflowError(Exception):
    """Base class for all workflow engine errors."""


class InvalidTransitionError(WorkflowError):
    """Raised when a stage change is not present in the transition table."""

    def __init__(self, workflow_id: str | None, from_stage, to_stage):
        self.workflow_id = workflow_id
        self.from_stage = from_stage
        self.to_stage = to_stage
        super().__init__(
            f"Invalid transition for workflow {workflow_id}: "
            f"{from_stage.value} → {to_stage.value}"
        )


class WorkflowNotFoundError(WorkflowError):
    """Raised when the repository has no workflow with the given id."""

    def __init__(self, workflow_id: str):
        self.workflow_id = workflow_id
        super().__init__(f"Workflow not found: {workflow_id}")


class TaskNotFoundError(WorkflowError):
    """Raised when a task id is absent from the current task list."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class ValidationError(WorkflowError):
    """Raised when a payload fails validation before being accepted."""


class CyclicDependencyError(ValidationError):
    """Raised when task dependencies form a cycle."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Cycle detected involving tasks: {' -> '.join(cycle)}")


class ConcurrentModificationError(WorkflowError):
    """Raised when a save is based on a stale revision of the workflow."""

    def __init__(self, workflow_id: str, expected_revision: int, actual_revision: int):
        self.workflow_id = workflow_id
        self.expected_revision = expected_revision
        self.actual_revision = actual_revision
        super().__init__(
            f"Workflow {workflow_id} was modified concurrently: "
            f"saved from revision {expected_revision}, store is at {actual_revision}"
        )


class DocumentNotAvailableError(WorkflowError):
    """Raised when a document is requested before its stage has produced it."""

    def __init__(self, workflow_id: str, document: str):
        self.workflow_id = workflow_id
        self.document = document
        super().__init__(f"Workflow {workflow_id} has no {document} yet")


class GenerationError(WorkflowError):
    """Raised when an external content generator fails."""

    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"{stage} generation failed: {message}")
