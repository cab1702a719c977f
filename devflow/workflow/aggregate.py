"""Workflow aggregate: the one mutable object in the engine.

Every operation checks the transition table before touching any field,
so a rejected call leaves the workflow exactly as it was.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .exceptions import InvalidTransitionError, TaskNotFoundError, ValidationError
from .models import Specification, Stage, Task, TaskList, TaskStatus, TechnicalDesign
from .progress import calculate_progress, stage_label
from .rules import validate_specification, validate_technical_design
from .transitions import validate_transition


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StageTransition:
    from_stage: Stage
    to_stage: Stage
    timestamp: datetime
    reason: str | None = None


@dataclass
class Workflow:
    name: str
    repository_id: int
    created_by: str
    id: str | None = None
    stage: Stage = Stage.DRAFT
    progress: int = 0
    stage_label: str = "Draft"
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    specification: Specification | None = None
    technical_design: TechnicalDesign | None = None
    task_list: TaskList | None = None
    failure_reason: str | None = None
    revision: int = 0
    transitions: list[StageTransition] = field(default_factory=list)

    @classmethod
    def create(cls, name: str, repository_id: int, created_by: str) -> Workflow:
        now = _now()
        return cls(
            name=name,
            repository_id=repository_id,
            created_by=created_by,
            stage=Stage.DRAFT,
            progress=0,
            stage_label=stage_label(Stage.DRAFT),
            created_at=now,
            updated_at=now,
        )

    # -- internals --

    def _task_progress(self) -> int | None:
        return self.task_list.progress() if self.task_list is not None else None

    def _move_to(self, target: Stage, reason: str | None = None) -> None:
        """Apply an already-validated stage change and refresh derived fields."""
        now = _now()
        self.transitions.append(
            StageTransition(
                from_stage=self.stage,
                to_stage=target,
                timestamp=now,
                reason=reason,
            )
        )
        self.stage = target
        self._refresh(reason)
        self.updated_at = now

    def _refresh(self, reason: str | None = None) -> None:
        self.progress = calculate_progress(
            self.stage, self._task_progress(), frozen_progress=self.progress
        )
        self.stage_label = stage_label(self.stage, reason)

    def _require_stage(self, stage: Stage) -> None:
        if self.stage is not stage:
            raise InvalidTransitionError(self.id, self.stage, stage)

    def _require_task(self, task_id: str) -> Task:
        task = self.task_list.get(task_id) if self.task_list is not None else None
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    # -- specification --

    def start_spec_generation(self) -> None:
        validate_transition(self.id, self.stage, Stage.SPEC_GENERATING)
        self._move_to(Stage.SPEC_GENERATING)

    def complete_spec_generation(self, spec: Specification) -> None:
        validate_transition(self.id, self.stage, Stage.SPEC_GENERATED)
        validate_specification(spec)
        self.specification = spec
        self._move_to(Stage.SPEC_GENERATED)

    # -- technical design --

    def start_tech_design(self) -> None:
        validate_transition(self.id, self.stage, Stage.TECH_DESIGN_GENERATING)
        self._move_to(Stage.TECH_DESIGN_GENERATING)

    def complete_tech_design(self, design: TechnicalDesign) -> None:
        validate_transition(self.id, self.stage, Stage.TECH_DESIGN_GENERATED)
        validate_technical_design(design)
        self.technical_design = design
        self._move_to(Stage.TECH_DESIGN_GENERATED)

    def revise_tech_design(self, content: str) -> None:
        """Replace the design with its next version. Stage is unchanged."""
        self._require_stage(Stage.TECH_DESIGN_GENERATED)
        revised = self.technical_design.revise_to(content)
        validate_technical_design(revised)
        self.technical_design = revised
        self.updated_at = _now()

    def approve_tech_design(self) -> None:
        validate_transition(self.id, self.stage, Stage.TECH_DESIGN_APPROVED)
        self.technical_design = self.technical_design.approve()
        self._move_to(Stage.TECH_DESIGN_APPROVED)

    # -- task list --

    def start_task_list_generation(self) -> None:
        validate_transition(self.id, self.stage, Stage.TASK_LIST_GENERATING)
        self._move_to(Stage.TASK_LIST_GENERATING)

    def complete_task_list_generation(self, task_list: TaskList) -> None:
        validate_transition(self.id, self.stage, Stage.TASK_LIST_GENERATED)
        if task_list is None:
            raise ValidationError("Task list is required")
        self.task_list = task_list
        self._move_to(Stage.TASK_LIST_GENERATED)

    # -- code generation --

    def start_code_generation(self) -> None:
        validate_transition(self.id, self.stage, Stage.CODE_GENERATING)
        self._move_to(Stage.CODE_GENERATING)

    def mark_task_in_progress(self, task_id: str) -> None:
        self._require_stage(Stage.CODE_GENERATING)
        task = self._require_task(task_id)
        self.task_list = self.task_list.replace_task(task.mark_in_progress())
        self.updated_at = _now()

    def complete_task(self, task_id: str, code: str) -> None:
        self._require_stage(Stage.CODE_GENERATING)
        task = self._require_task(task_id)
        self.task_list = self.task_list.replace_task(task.complete(code))
        self._refresh()
        self.updated_at = _now()
        if self.task_list.progress() == 100:
            self._move_to(Stage.COMPLETED)
            self.progress = 100

    def fail_task(self, task_id: str, error: str) -> None:
        self._require_stage(Stage.CODE_GENERATING)
        task = self._require_task(task_id)
        self.task_list = self.task_list.replace_task(task.fail(error))
        self.updated_at = _now()

    def complete_code_generation(self) -> None:
        """Finish code generation once no task is left to run.

        Needed for task lists that never reach 100% through complete_task,
        e.g. an empty list or one with skipped tasks.
        """
        validate_transition(self.id, self.stage, Stage.COMPLETED)
        done = {TaskStatus.COMPLETED, TaskStatus.SKIPPED}
        if self.task_list is not None and not all(t.status in done for t in self.task_list.tasks):
            raise ValidationError(f"Not all tasks are done for workflow {self.id}")
        self._move_to(Stage.COMPLETED)

    # -- termination --

    def mark_as_failed(self, reason: str) -> None:
        validate_transition(self.id, self.stage, Stage.FAILED)
        self.failure_reason = reason
        self._move_to(Stage.FAILED, reason)

    def cancel(self, reason: str) -> None:
        validate_transition(self.id, self.stage, Stage.CANCELLED)
        self._move_to(Stage.CANCELLED, reason)

    def update_progress(self, value: int) -> None:
        """Override progress with an externally computed snapshot."""
        if not 0 <= value <= 100:
            raise ValidationError(f"Progress must be within 0..100, got {value}")
        self.progress = value
        self.updated_at = _now()
