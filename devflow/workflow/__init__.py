from .aggregate import StageTransition, Workflow
from .exceptions import (
    ConcurrentModificationError,
    CyclicDependencyError,
    DocumentNotAvailableError,
    GenerationError,
    InvalidTransitionError,
    TaskNotFoundError,
    ValidationError,
    WorkflowError,
    WorkflowNotFoundError,
)
from .interface import WorkflowRepository
from .models import Specification, Stage, Task, TaskList, TaskStatus, TechnicalDesign
from .progress import calculate_progress, is_progress_consistent, stage_label
from .transitions import VALID_TRANSITIONS, is_valid_transition, validate_transition

__all__ = [
    "Workflow",
    "StageTransition",
    "Stage",
    "TaskStatus",
    "Specification",
    "TechnicalDesign",
    "Task",
    "TaskList",
    "WorkflowRepository",
    "VALID_TRANSITIONS",
    "is_valid_transition",
    "validate_transition",
    "calculate_progress",
    "is_progress_consistent",
    "stage_label",
    "WorkflowError",
    "InvalidTransitionError",
    "WorkflowNotFoundError",
    "TaskNotFoundError",
    "ValidationError",
    "CyclicDependencyError",
    "ConcurrentModificationError",
    "DocumentNotAvailableError",
    "GenerationError",
]
