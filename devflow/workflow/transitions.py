"""Workflow stage transitions defined as data."""

from __future__ import annotations

from .exceptions import InvalidTransitionError
from .models import Stage

TERMINAL_STAGES: frozenset[Stage] = frozenset(
    {Stage.COMPLETED, Stage.FAILED, Stage.CANCELLED}
)

_PIPELINE: dict[Stage, set[Stage]] = {
    Stage.DRAFT: {Stage.SPEC_GENERATING},
    Stage.SPEC_GENERATING: {Stage.SPEC_GENERATED, Stage.FAILED},
    Stage.SPEC_GENERATED: {Stage.SPEC_GENERATING, Stage.TECH_DESIGN_GENERATING},  # regenerate
    Stage.TECH_DESIGN_GENERATING: {Stage.TECH_DESIGN_GENERATED, Stage.FAILED},
    Stage.TECH_DESIGN_GENERATED: {Stage.TECH_DESIGN_GENERATING, Stage.TECH_DESIGN_APPROVED},
    Stage.TECH_DESIGN_APPROVED: {Stage.TASK_LIST_GENERATING},
    Stage.TASK_LIST_GENERATING: {Stage.TASK_LIST_GENERATED, Stage.FAILED},
    Stage.TASK_LIST_GENERATED: {Stage.CODE_GENERATING},
    Stage.CODE_GENERATING: {Stage.COMPLETED, Stage.FAILED},
}

# Every non-terminal stage may be cancelled; terminal stages have no exits.
VALID_TRANSITIONS: dict[Stage, frozenset[Stage]] = {
    stage: (
        frozenset()
        if stage in TERMINAL_STAGES
        else frozenset(_PIPELINE[stage] | {Stage.CANCELLED})
    )
    for stage in Stage
}


def allowed_targets(stage: Stage) -> frozenset[Stage]:
    return VALID_TRANSITIONS[stage]


def is_valid_transition(from_stage: Stage, to_stage: Stage) -> bool:
    return to_stage in VALID_TRANSITIONS[from_stage]


def validate_transition(
    workflow_id: str | None,
    from_stage: Stage,
    to_stage: Stage,
) -> None:
    """Raise InvalidTransitionError if the transition is not allowed."""
    if not is_valid_transition(from_stage, to_stage):
        raise InvalidTransitionError(workflow_id, from_stage, to_stage)
