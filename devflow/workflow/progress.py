"""Progress calculation across pipeline stages.

Everything here takes plain values so that the same functions serve the
aggregate (to update itself) and read-only callers auditing a persisted
snapshot.
"""

from __future__ import annotations

from .models import Stage

# Share of the 0-100 range reserved for the code-generation stage.
CODE_GENERATION_BASE = 60
CODE_GENERATION_SPAN = 39

STAGE_PROGRESS: dict[Stage, int] = {
    Stage.DRAFT: 0,
    Stage.SPEC_GENERATING: 20,
    Stage.SPEC_GENERATED: 20,
    Stage.TECH_DESIGN_GENERATING: 40,
    Stage.TECH_DESIGN_GENERATED: 40,
    Stage.TECH_DESIGN_APPROVED: 40,
    Stage.TASK_LIST_GENERATING: 60,
    Stage.TASK_LIST_GENERATED: 60,
    Stage.COMPLETED: 100,
}

STAGE_LABELS: dict[Stage, str] = {
    Stage.DRAFT: "Draft",
    Stage.SPEC_GENERATING: "Generating specification",
    Stage.SPEC_GENERATED: "Specification generated",
    Stage.TECH_DESIGN_GENERATING: "Generating technical design",
    Stage.TECH_DESIGN_GENERATED: "Technical design generated",
    Stage.TECH_DESIGN_APPROVED: "Technical design approved",
    Stage.TASK_LIST_GENERATING: "Generating task list",
    Stage.TASK_LIST_GENERATED: "Task list generated",
    Stage.CODE_GENERATING: "Generating code",
    Stage.COMPLETED: "Completed",
    Stage.FAILED: "Failed",
    Stage.CANCELLED: "Cancelled",
}

FROZEN_STAGES = frozenset({Stage.FAILED, Stage.CANCELLED})


def calculate_progress(
    stage: Stage,
    task_progress: int | None = None,
    frozen_progress: int = 0,
) -> int:
    """Map a stage (and task-list completion for CODE_GENERATING) to 0-100.

    FAILED and CANCELLED keep whatever value the workflow held when it
    stopped, passed in as ``frozen_progress``.
    """
    if task_progress is not None and not 0 <= task_progress <= 100:
        raise ValueError(f"task_progress must be within 0..100, got {task_progress}")
    if stage in FROZEN_STAGES:
        return frozen_progress
    if stage is Stage.CODE_GENERATING:
        if task_progress is None:
            return CODE_GENERATION_BASE
        return CODE_GENERATION_BASE + task_progress * CODE_GENERATION_SPAN // 100
    return STAGE_PROGRESS[stage]


def stage_label(stage: Stage, reason: str | None = None) -> str:
    label = STAGE_LABELS[stage]
    if reason and stage in FROZEN_STAGES:
        return f"{label}: {reason}"
    return label


def is_progress_consistent(
    stage: Stage,
    progress: int,
    task_progress: int | None = None,
) -> bool:
    """Check a persisted (stage, progress) pair against the calculator."""
    if not 0 <= progress <= 100:
        return False
    if stage in FROZEN_STAGES:
        return True
    return progress == calculate_progress(stage, task_progress)
